from trips.budget import (
    ACCOMMODATION_CATEGORY_ID,
    add_accommodation_cost,
    remove_accommodation_cost,
    summarize_budget,
)
from trips.checklists import (
    GLOBAL_TEMPLATE,
    default_checklists,
    normalize_checklists,
    reset_completion,
)


def test_default_checklists_use_global_template():
    stages = default_checklists()
    assert [s["title"] for s in stages] == ["Pre-Departure", "Campsite Setup", "Pack-Down"]
    assert [len(s["items"]) for s in stages] == [23, 17, 20]
    assert stages[0]["items"][0]["id"] == "global_pd1_tpl"
    assert all(not item["completed"] for s in stages for item in s["items"])


def test_default_checklists_vehicle_only():
    stages = default_checklists(is_vehicle_only=True)
    assert [len(s["items"]) for s in stages] == [8, 8, 8]
    assert stages[0]["items"][0]["id"] == "vehicle_pd1_tpl"


def test_default_checklists_prefer_caravan_default():
    saved = [{"title": "My list", "items": [{"id": "m1", "text": "Check hitch", "completed": True}]}]
    stages = default_checklists(caravan_default=saved)
    assert stages == [{"title": "My list", "items": [{"id": "m1", "text": "Check hitch", "completed": False}]}]
    assert saved[0]["items"][0]["completed"] is True


def test_default_checklists_do_not_share_template_items():
    stages = default_checklists()
    stages[0]["items"][0]["text"] = "changed"
    assert GLOBAL_TEMPLATE["preDeparture"][0]["text"] != "changed"


def test_normalize_legacy_keyed_format():
    stages = normalize_checklists(
        {"preDeparture": [{"id": "a", "text": "Lock door", "completed": True}], "pack_down": []}
    )
    assert stages == [
        {"title": "Pre-Departure", "items": [{"id": "a", "text": "Lock door", "completed": True}]},
        {"title": "Campsite Setup", "items": []},
        {"title": "Pack-Down", "items": []},
    ]


def test_normalize_drops_bad_items_and_rejects_junk():
    stages = normalize_checklists([{"title": "T", "items": [{"id": "x", "text": "ok"}, {"text": "no id"}, "junk"]}])
    assert stages == [{"title": "T", "items": [{"id": "x", "text": "ok", "completed": False}]}]
    assert normalize_checklists("junk") is None
    assert normalize_checklists([]) is None
    assert normalize_checklists({"other": []}) is None


def test_reset_completion():
    stages = [{"title": "T", "items": [{"id": "x", "text": "ok", "completed": True}]}]
    assert reset_completion(stages)[0]["items"][0]["completed"] is False
    assert reset_completion(None) == []


def test_add_accommodation_cost_creates_then_accumulates():
    budget = add_accommodation_cost([], 150)
    assert budget == [{"id": ACCOMMODATION_CATEGORY_ID, "name": "Accommodation", "budgeted_amount": 150.0}]

    budget = add_accommodation_cost(budget, 49.5)
    assert budget[0]["budgeted_amount"] == 199.5


def test_add_accommodation_cost_ignores_non_positive():
    original = [{"id": "fuel", "name": "Fuel", "budgeted_amount": 300}]
    assert add_accommodation_cost(original, 0) == original


def test_remove_accommodation_cost_drops_empty_category():
    budget = [
        {"id": "fuel", "name": "Fuel", "budgeted_amount": 300},
        {"id": ACCOMMODATION_CATEGORY_ID, "name": "Accommodation", "budgeted_amount": 200},
    ]
    partly = remove_accommodation_cost(budget, 50)
    assert partly[1]["budgeted_amount"] == 150.0
    assert remove_accommodation_cost(budget, 200) == [budget[0]]
    assert budget[1]["budgeted_amount"] == 200


def test_summarize_budget():
    budget = [
        {"id": "fuel", "name": "Fuel", "budgeted_amount": 300},
        {"id": "food", "name": "Food", "budgeted_amount": 200},
    ]
    expenses = [
        {"category_id": "fuel", "amount": 120.5},
        {"category_id": "fuel", "amount": 30},
        {"category_id": "gone", "amount": 10},
    ]
    summary = summarize_budget(budget, expenses)

    rows = {row["id"]: row for row in summary["categories"]}
    assert rows["fuel"] == {"id": "fuel", "name": "Fuel", "budgeted": 300.0, "spent": 150.5, "remaining": 149.5}
    assert rows["food"]["spent"] == 0.0
    assert rows["uncategorised"]["spent"] == 10.0
    assert summary["total_budgeted"] == 500.0
    assert summary["total_spent"] == 160.5
    assert summary["total_remaining"] == 339.5


def test_infinite_amounts_are_ignored():
    summary = summarize_budget(
        [{"id": "fuel", "name": "Fuel", "budgeted_amount": float("inf")}],
        [{"category_id": "fuel", "amount": float("-inf")}, {"category_id": "fuel", "amount": 12}],
    )
    assert summary["total_budgeted"] == 0.0
    assert summary["total_spent"] == 12.0
