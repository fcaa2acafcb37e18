from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional


# Rule-of-thumb figures used when no weighbridge reading is available.
TOWBALL_ESTIMATE_RATIO = 0.10
TOWBALL_ADVISED_MIN_PERCENT = 7.0
TOWBALL_ADVISED_MAX_PERCENT = 15.0
NEAR_LIMIT_PERCENT = 90.0
WATER_KG_PER_LITRE = 1.0

STATUS_OK = "ok"
STATUS_NEAR = "near"
STATUS_OVER = "over"
STATUS_UNKNOWN = "unknown"

_STATUS_RANK = {STATUS_UNKNOWN: 0, STATUS_OK: 1, STATUS_NEAR: 2, STATUS_OVER: 3}


@dataclass
class LimitCheck:
    name: str
    label: str
    actual: float
    limit: Optional[float]
    remaining: Optional[float]
    usage_percent: Optional[float]
    status: str


def _mass(value: Any) -> float:
    """Coerce a stored mass/limit to a non-negative float (missing -> 0)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _check(name: str, label: str, actual: float, limit: Any) -> LimitCheck:
    limit_kg = _mass(limit)
    if limit_kg <= 0:
        return LimitCheck(
            name=name,
            label=label,
            actual=round(actual, 1),
            limit=None,
            remaining=None,
            usage_percent=None,
            status=STATUS_UNKNOWN,
        )
    usage = actual / limit_kg * 100.0
    if usage > 100.0:
        status = STATUS_OVER
    elif usage > NEAR_LIMIT_PERCENT:
        status = STATUS_NEAR
    else:
        status = STATUS_OK
    return LimitCheck(
        name=name,
        label=label,
        actual=round(actual, 1),
        limit=round(limit_kg, 1),
        remaining=round(limit_kg - actual, 1),
        usage_percent=round(usage, 1),
        status=status,
    )


def inventory_mass(items: Iterable[Mapping[str, Any]]) -> float:
    """Total mass of inventory items (weight per unit x quantity)."""
    return sum(_mass(item.get("weight")) * _mass(item.get("quantity")) for item in items or [])


def water_mass(tanks: Iterable[Mapping[str, Any]], levels: Optional[Mapping[str, Any]]) -> float:
    """
    Mass of water carried, from each tank's capacity and its fill level (percent).
    Tanks without a recorded level are treated as empty.
    """
    if not levels:
        return 0.0
    total = 0.0
    for tank in tanks or []:
        level = levels.get(str(tank.get("id")))
        if level is None:
            continue
        percent = min(max(_mass(level), 0.0), 100.0)
        total += _mass(tank.get("capacity_litres")) * percent / 100.0 * WATER_KG_PER_LITRE
    return total


def _warning_for(check: LimitCheck) -> Optional[str]:
    if check.status == STATUS_OVER:
        return f"{check.label}: {check.actual:.1f} kg is OVER the {check.limit:.0f} kg limit."
    if check.status == STATUS_NEAR:
        return f"{check.label}: {check.actual:.1f} kg is nearing the {check.limit:.0f} kg limit."
    return None


def calculate_compliance(
    caravan: Mapping[str, Any],
    vehicle: Optional[Mapping[str, Any]] = None,
    wdh: Optional[Mapping[str, Any]] = None,
    inventory: Iterable[Mapping[str, Any]] = (),
    water_levels: Optional[Mapping[str, Any]] = None,
    occupants: Iterable[Mapping[str, Any]] = (),
    measured_towball_download: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Weight summary for a loaded caravan, optionally coupled to a tow vehicle
    and fitted with a weight distribution hitch.

    All masses are in kg. Inputs are plain dicts using the model field names
    (tare_mass, atm, gtm, max_towball_download, gvm, kerb_weight, ...); they
    are never modified. Returns the derived masses, one entry per limit check
    and an overall status (the worst of the checks whose limit is known).
    """
    payload_inventory = inventory_mass(inventory)
    payload_water = water_mass(caravan.get("water_tanks") or [], water_levels)
    caravan_payload = payload_inventory + payload_water
    gross_caravan_mass = _mass(caravan.get("tare_mass")) + caravan_payload

    if measured_towball_download is not None:
        towball_download = _mass(measured_towball_download)
        towball_estimated = False
    else:
        towball_download = gross_caravan_mass * TOWBALL_ESTIMATE_RATIO
        towball_estimated = True

    # Mass carried by the caravan's own axles once coupled.
    gtm_load = max(gross_caravan_mass - towball_download, 0.0)

    checks: List[LimitCheck] = [
        _check("atm", "ATM", gross_caravan_mass, caravan.get("atm")),
        _check("gtm", "GTM", gtm_load, caravan.get("gtm")),
        _check(
            "towball_caravan",
            "Towball download (caravan rating)",
            towball_download,
            caravan.get("max_towball_download"),
        ),
    ]
    if caravan.get("axle_group_rating"):
        checks.append(
            _check("axle_group", "Caravan axle group", gtm_load, caravan.get("axle_group_rating"))
        )

    warnings: List[str] = []
    if _mass(caravan.get("atm")) <= 0:
        warnings.append("ATM not specified for this caravan. Cannot calculate usage.")

    towball_percent = None
    if gross_caravan_mass > 0:
        towball_percent = round(towball_download / gross_caravan_mass * 100.0, 1)
        if not towball_estimated and not (
            TOWBALL_ADVISED_MIN_PERCENT <= towball_percent <= TOWBALL_ADVISED_MAX_PERCENT
        ):
            warnings.append(
                f"Towball download is {towball_percent:.1f}% of the loaded caravan mass; "
                f"{TOWBALL_ADVISED_MIN_PERCENT:.0f}-{TOWBALL_ADVISED_MAX_PERCENT:.0f}% is typical."
            )

    if wdh:
        checks.append(
            _check("towball_wdh", "Towball download (WDH rating)", towball_download, wdh.get("max_capacity_kg"))
        )
        min_capacity = _mass(wdh.get("min_capacity_kg"))
        if min_capacity > 0 and towball_download < min_capacity:
            warnings.append(
                f"Towball download of {towball_download:.1f} kg is below the WDH minimum of "
                f"{min_capacity:.0f} kg (wdh_under_min)."
            )

    occupant_mass = sum(_mass(o.get("weight")) for o in occupants or [])
    vehicle_summary = None
    if vehicle:
        kerb = _mass(vehicle.get("kerb_weight"))
        gvm = _mass(vehicle.get("gvm"))
        gross_vehicle_mass = kerb + occupant_mass + towball_download
        gross_combined_mass = gross_vehicle_mass + gtm_load
        vehicle_summary = {
            "payload_capacity": round(gvm - kerb, 1) if gvm > 0 and kerb > 0 and gvm >= kerb else None,
            "occupant_mass": round(occupant_mass, 1),
            "gross_vehicle_mass": round(gross_vehicle_mass, 1),
            "gross_combined_mass": round(gross_combined_mass, 1),
        }
        checks.extend(
            [
                _check(
                    "towball_vehicle",
                    "Towball download (vehicle rating)",
                    towball_download,
                    vehicle.get("max_towball_mass"),
                ),
                _check("tow_capacity", "Vehicle towing capacity", gross_caravan_mass, vehicle.get("max_tow_capacity")),
                _check("gvm", "GVM", gross_vehicle_mass, vehicle.get("gvm") if kerb > 0 else None),
                _check("gcm", "GCM", gross_combined_mass, vehicle.get("gcm") if kerb > 0 else None),
            ]
        )
        front = _mass(vehicle.get("front_axle_limit"))
        rear = _mass(vehicle.get("rear_axle_limit"))
        if front > 0 and rear > 0:
            axle_limit = front + rear if kerb > 0 else None
            checks.append(_check("vehicle_axles", "Vehicle axle limits (combined)", gross_vehicle_mass, axle_limit))
        if kerb <= 0:
            warnings.append("Kerb weight not specified for the tow vehicle. GVM and GCM cannot be checked.")

    for check in checks:
        message = _warning_for(check)
        if message:
            warnings.append(message)

    known = [c.status for c in checks if c.status != STATUS_UNKNOWN]
    overall = max(known, key=_STATUS_RANK.__getitem__) if known else STATUS_UNKNOWN

    return {
        "inventory_mass": round(payload_inventory, 1),
        "water_mass": round(payload_water, 1),
        "caravan_payload": round(caravan_payload, 1),
        "gross_caravan_mass": round(gross_caravan_mass, 1),
        "towball_download": round(towball_download, 1),
        "towball_estimated": towball_estimated,
        "towball_percent_of_gross": towball_percent,
        "gtm_load": round(gtm_load, 1),
        "vehicle": vehicle_summary,
        "checks": [asdict(c) for c in checks],
        "overall_status": overall,
        "warnings": warnings,
    }
