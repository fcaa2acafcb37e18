from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping


ACCOMMODATION_CATEGORY_ID = "accommodation_budget_category"
ACCOMMODATION_CATEGORY_NAME = "Accommodation"
UNCATEGORISED_ID = "uncategorised"


def _amount(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def add_accommodation_cost(budget: Iterable[Mapping[str, Any]], cost: Any) -> List[Dict[str, Any]]:
    """
    New budget list with ``cost`` added to the Accommodation category
    (created if the trip doesn't have one yet).
    """
    cost = _amount(cost)
    updated = [dict(cat) for cat in budget or []]
    if cost <= 0:
        return updated
    for cat in updated:
        if cat.get("name") == ACCOMMODATION_CATEGORY_NAME:
            cat["budgeted_amount"] = round(_amount(cat.get("budgeted_amount")) + cost, 2)
            return updated
    updated.append(
        {
            "id": ACCOMMODATION_CATEGORY_ID,
            "name": ACCOMMODATION_CATEGORY_NAME,
            "budgeted_amount": round(cost, 2),
        }
    )
    return updated


def remove_accommodation_cost(budget: Iterable[Mapping[str, Any]], cost: Any) -> List[Dict[str, Any]]:
    """
    New budget list with ``cost`` taken off the Accommodation category.
    The category is dropped once it reaches zero.
    """
    cost = _amount(cost)
    updated = []
    for cat in budget or []:
        cat = dict(cat)
        if cat.get("name") == ACCOMMODATION_CATEGORY_NAME and cost > 0:
            cat["budgeted_amount"] = round(max(0.0, _amount(cat.get("budgeted_amount")) - cost), 2)
            if cat["budgeted_amount"] <= 0:
                continue
        updated.append(cat)
    return updated


def summarize_budget(
    budget: Iterable[Mapping[str, Any]], expenses: Iterable[Mapping[str, Any]]
) -> Dict[str, Any]:
    """
    Per-category budgeted / spent / remaining, plus totals. Expenses pointing
    at a category the budget doesn't have are grouped under "Uncategorised".
    """
    categories: Dict[str, Dict[str, Any]] = {}
    for cat in budget or []:
        cat_id = str(cat.get("id"))
        categories[cat_id] = {
            "id": cat_id,
            "name": cat.get("name", ""),
            "budgeted": _amount(cat.get("budgeted_amount")),
            "spent": 0.0,
        }

    for expense in expenses or []:
        cat_id = str(expense.get("category_id"))
        if cat_id not in categories:
            cat_id = UNCATEGORISED_ID
            categories.setdefault(
                cat_id, {"id": cat_id, "name": "Uncategorised", "budgeted": 0.0, "spent": 0.0}
            )
        categories[cat_id]["spent"] += _amount(expense.get("amount"))

    rows = []
    for cat in categories.values():
        rows.append(
            {
                **cat,
                "budgeted": round(cat["budgeted"], 2),
                "spent": round(cat["spent"], 2),
                "remaining": round(cat["budgeted"] - cat["spent"], 2),
            }
        )

    total_budgeted = sum(r["budgeted"] for r in rows)
    total_spent = sum(r["spent"] for r in rows)
    return {
        "categories": rows,
        "total_budgeted": round(total_budgeted, 2),
        "total_spent": round(total_spent, 2),
        "total_remaining": round(total_budgeted - total_spent, 2),
    }
