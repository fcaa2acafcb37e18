from vehicles.weights import calculate_compliance, inventory_mass, water_mass


CARAVAN = {
    "tare_mass": 2000,
    "atm": 2800,
    "gtm": 2600,
    "max_towball_download": 250,
    "water_tanks": [{"id": "fresh1", "capacity_litres": 100}],
}

VEHICLE = {
    "gvm": 3280,
    "gcm": 6750,
    "max_tow_capacity": 3500,
    "max_towball_mass": 350,
    "kerb_weight": 2630,
}


def _check(result, name):
    return next(c for c in result["checks"] if c["name"] == name)


def test_inventory_mass_multiplies_weight_by_quantity():
    items = [{"weight": 2.5, "quantity": 4}, {"weight": 10, "quantity": 1}, {"weight": None, "quantity": 3}]
    assert inventory_mass(items) == 20.0


def test_water_mass_uses_fill_level_and_clamps():
    tanks = [{"id": "a", "capacity_litres": 80}, {"id": "b", "capacity_litres": 50}]
    assert water_mass(tanks, {"a": 50}) == 40.0
    assert water_mass(tanks, {"a": 150, "b": 100}) == 130.0
    assert water_mass(tanks, None) == 0.0


def test_loaded_caravan_within_limits():
    result = calculate_compliance(
        CARAVAN, inventory=[{"weight": 10, "quantity": 5}], water_levels={"fresh1": 50}
    )

    assert result["inventory_mass"] == 50.0
    assert result["water_mass"] == 50.0
    assert result["caravan_payload"] == 100.0
    assert result["gross_caravan_mass"] == 2100.0
    assert result["towball_download"] == 210.0
    assert result["towball_estimated"] is True
    assert result["gtm_load"] == 1890.0
    assert _check(result, "atm")["usage_percent"] == 75.0
    assert _check(result, "atm")["remaining"] == 700.0
    assert result["overall_status"] == "ok"
    assert result["vehicle"] is None
    assert result["warnings"] == []


def test_over_atm_is_reported():
    result = calculate_compliance(CARAVAN, inventory=[{"weight": 100, "quantity": 9}])

    atm = _check(result, "atm")
    assert atm["status"] == "over"
    assert result["overall_status"] == "over"
    assert "ATM: 2900.0 kg is OVER the 2800 kg limit." in result["warnings"]


def test_near_limit_above_ninety_percent():
    result = calculate_compliance({**CARAVAN, "atm": 2200})
    assert _check(result, "atm")["status"] == "near"
    assert result["overall_status"] == "near"


def test_missing_atm_is_unknown_with_warning():
    result = calculate_compliance({**CARAVAN, "atm": 0})
    assert _check(result, "atm")["status"] == "unknown"
    assert any("ATM not specified" in w for w in result["warnings"])


def test_all_limits_unknown_gives_unknown_overall():
    result = calculate_compliance({"tare_mass": 1000})
    assert result["overall_status"] == "unknown"


def test_measured_towball_outside_typical_range_warns():
    result = calculate_compliance(CARAVAN, measured_towball_download=100)

    assert result["towball_estimated"] is False
    assert result["towball_download"] == 100.0
    assert result["towball_percent_of_gross"] == 5.0
    assert any("Towball download is 5.0%" in w for w in result["warnings"])


def test_vehicle_checks_include_occupants():
    occupants = [{"weight": 80}, {"weight": 70}]
    result = calculate_compliance(
        CARAVAN, vehicle=VEHICLE, occupants=occupants, inventory=[{"weight": 10, "quantity": 5}],
        water_levels={"fresh1": 50},
    )

    summary = result["vehicle"]
    assert summary["occupant_mass"] == 150.0
    assert summary["payload_capacity"] == 650.0
    assert summary["gross_vehicle_mass"] == 2990.0
    assert summary["gross_combined_mass"] == 4880.0
    assert _check(result, "gvm")["status"] == "near"
    assert _check(result, "gcm")["status"] == "ok"
    assert _check(result, "tow_capacity")["actual"] == 2100.0


def test_vehicle_without_kerb_weight_cannot_check_gvm():
    vehicle = {**VEHICLE, "kerb_weight": None}
    result = calculate_compliance(CARAVAN, vehicle=vehicle)

    assert _check(result, "gvm")["status"] == "unknown"
    assert _check(result, "gcm")["status"] == "unknown"
    assert result["vehicle"]["payload_capacity"] is None
    assert any("Kerb weight not specified" in w for w in result["warnings"])


def test_wdh_minimum_not_reached():
    result = calculate_compliance(CARAVAN, wdh={"max_capacity_kg": 350, "min_capacity_kg": 250})

    assert _check(result, "towball_wdh")["status"] == "ok"
    assert any("wdh_under_min" in w for w in result["warnings"])


def test_inputs_are_not_modified():
    caravan = {**CARAVAN, "water_tanks": [dict(CARAVAN["water_tanks"][0])]}
    inventory = [{"weight": 1, "quantity": 1}]
    calculate_compliance(caravan, inventory=inventory, water_levels={"fresh1": 100})
    assert caravan["water_tanks"] == CARAVAN["water_tanks"]
    assert inventory == [{"weight": 1, "quantity": 1}]


def test_axle_group_rating_checks_load_on_caravan_axles():
    result = calculate_compliance({**CARAVAN, "axle_group_rating": 1900}, inventory=[{"weight": 100, "quantity": 1}])

    axle = _check(result, "axle_group")
    # gross 2100, towball 210, axles carry 1890
    assert axle["actual"] == 1890.0
    assert axle["limit"] == 1900.0
    assert axle["status"] == "near"


def test_combined_vehicle_axle_limits():
    vehicle = {**VEHICLE, "front_axle_limit": 1400, "rear_axle_limit": 1500}
    result = calculate_compliance(CARAVAN, vehicle=vehicle, occupants=[{"weight": 90}])

    axles = _check(result, "vehicle_axles")
    assert axles["actual"] == 2920.0
    assert axles["limit"] == 2900.0
    assert axles["status"] == "over"


def test_vehicle_axles_unknown_without_kerb_weight():
    vehicle = {**VEHICLE, "kerb_weight": None, "front_axle_limit": 1400, "rear_axle_limit": 1800}
    result = calculate_compliance(CARAVAN, vehicle=vehicle)
    assert _check(result, "vehicle_axles")["status"] == "unknown"


def test_infinite_values_count_as_missing():
    result = calculate_compliance({**CARAVAN, "atm": float("inf")}, inventory=[{"weight": float("inf"), "quantity": 1}])
    assert result["inventory_mass"] == 0.0
    assert _check(result, "atm")["status"] == "unknown"
