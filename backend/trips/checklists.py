"""
Default pre-departure / campsite / pack-down checklists for new trips.

Checklists are stored in stage format::

    [{"title": "Pre-Departure", "items": [{"id", "text", "completed"}, ...]}, ...]

Older records keep three keyed lists instead (``preDeparture``,
``campsiteSetup``, ``packDown``); ``normalize_checklists`` converts those.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional


# Legacy key -> stage title, in display order.
STAGE_KEYS = [
    ("preDeparture", "Pre-Departure"),
    ("campsiteSetup", "Campsite Setup"),
    ("packDown", "Pack-Down"),
]
_SNAKE_KEYS = {"pre_departure": "preDeparture", "campsite_setup": "campsiteSetup", "pack_down": "packDown"}


def _items(prefix: str, texts: List[str]) -> List[Dict[str, Any]]:
    return [
        {"id": f"{prefix}{n}_tpl", "text": text, "completed": False}
        for n, text in enumerate(texts, start=1)
    ]


GLOBAL_TEMPLATE = {
    "preDeparture": _items(
        "global_pd",
        [
            "Secure all loose items in cupboards and on benches",
            "Lock refrigerator door",
            "Lower and secure TV antenna",
            "Turn off all internal lights and 12V accessories",
            "Close and lock all internal doors and drawers",
            "Turn off gas appliances and close gas bottles",
            "Switch fridge to appropriate travel power source (12V/Gas)",
            "Turn off water pump",
            "Fill fresh water tanks / Empty grey & black tanks as needed",
            "Retract and lock awning securely",
            "Close and lock all windows and roof hatches",
            "Retract and secure caravan step",
            "Lock main caravan door",
            "Retract and secure stabiliser legs",
            "Disconnect and stow power lead, water hoses, and drain hoses",
            "Hitch caravan to tow vehicle securely",
            "Connect safety chains and breakaway cable",
            "Connect 7/12-pin plug and check all lights (indicators, brake, tail)",
            "Retract jockey wheel fully",
            "Check tyre pressures (vehicle & caravan)",
            "Attach and adjust towing mirrors",
            "Test brake controller manually",
            "Perform final walk-around of rig and check for obstacles",
        ],
    ),
    "campsiteSetup": _items(
        "global_cs",
        [
            "Position caravan on site (check for hazards/obstacles)",
            "Level caravan side-to-side (using ramps)",
            "Chock wheels securely",
            "Unhitch from vehicle (disconnect chains, power, etc.)",
            "Move tow vehicle away from caravan",
            "Level caravan front-to-back (using jockey wheel)",
            "Deploy stabiliser legs (do not use for lifting)",
            "Connect power lead (van side first, then pole)",
            "Connect water hose (with filter if needed)",
            "Connect grey water hose/container",
            "Turn on gas bottles",
            "Switch fridge to appropriate power source (240V/Gas)",
            "Turn on hot water system (if needed)",
            "Raise TV antenna",
            "Extend caravan step",
            "Deploy awning",
            "Set up outdoor area (mats, chairs, table)",
        ],
    ),
    "packDown": _items(
        "global_pk",
        [
            "Clean and empty toilet cassette",
            "Switch fridge to 12V/Off for travel",
            "Turn off all appliances and water pump",
            "Lower and secure TV antenna",
            "Secure all items inside caravan",
            "Clean and stow BBQ",
            "Stow all outdoor gear (furniture, mats)",
            "Retract and secure awning",
            "Empty grey water tank/container",
            "Disconnect grey water hose",
            "Disconnect fresh water hose",
            "Disconnect power lead (van side first)",
            "Turn off gas bottles",
            "Close and lock all windows, hatches, and door",
            "Retract caravan step",
            "Retract stabiliser legs completely",
            "Hitch up to vehicle and connect electrics/chains",
            "Perform light check",
            "Remove wheel chocks",
            "Final walk-around check of site and rig",
        ],
    ),
}

VEHICLE_ONLY_TEMPLATE = {
    "preDeparture": _items(
        "vehicle_pd",
        [
            "Check vehicle tyre pressures",
            "Check vehicle fluids (oil, coolant, washer fluid)",
            "Check vehicle has adequate fuel for the journey",
            "Check lights and indicators",
            "Secure all items/luggage in vehicle",
            "Pack recovery gear (if going off-road)",
            "Confirm navigation/GPS is ready",
            "Pack snacks and water for the journey",
        ],
    ),
    "campsiteSetup": _items(
        "vehicle_cs",
        [
            "Select and clear tent/swag site",
            "Set up tent/swag and sleeping gear",
            "Arrange cooking area and camp kitchen",
            "Set up camp chairs and table",
            "Organize lighting for the evening",
            "Secure food storage from animals",
            "Check campfire regulations and prepare fire pit safely (if applicable)",
            "Familiarize with camp amenities (toilets, water)",
        ],
    ),
    "packDown": _items(
        "vehicle_pk",
        [
            "Pack sleeping bags and bedding",
            "Disassemble and pack tent/swag",
            "Clean and pack cooking gear",
            "Extinguish campfire completely with water",
            "Pack all rubbish (leave no trace)",
            "Secure all items in vehicle",
            "Thoroughly clean campsite area",
            "Final walk-around of site to check for forgotten items",
        ],
    ),
}


def _clean_item(item: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(item, dict) or not item.get("id") or not isinstance(item.get("text"), str):
        return None
    return {"id": str(item["id"]), "text": item["text"], "completed": bool(item.get("completed", False))}


def _clean_items(items: Any) -> List[Dict[str, Any]]:
    if not isinstance(items, list):
        return []
    return [cleaned for cleaned in (_clean_item(i) for i in items) if cleaned]


def normalize_checklists(value: Any) -> Optional[List[Dict[str, Any]]]:
    """
    Return checklists in stage format, or None if ``value`` holds nothing usable.
    Accepts stage format or the legacy keyed format.
    """
    if isinstance(value, list):
        stages = []
        for stage in value:
            if not isinstance(stage, dict) or not isinstance(stage.get("title"), str):
                continue
            stages.append({"title": stage["title"], "items": _clean_items(stage.get("items"))})
        return stages or None

    if isinstance(value, dict):
        keyed = {_SNAKE_KEYS.get(k, k): v for k, v in value.items()}
        if not any(key in keyed for key, _ in STAGE_KEYS):
            return None
        return [
            {"title": title, "items": _clean_items(keyed.get(key))}
            for key, title in STAGE_KEYS
        ]

    return None


def default_checklists(is_vehicle_only: bool = False, caravan_default: Any = None) -> List[Dict[str, Any]]:
    """
    Checklists for a new trip: the caravan's saved default if there is one,
    else the vehicle-only or the global template. Every item starts incomplete.
    """
    stages = normalize_checklists(caravan_default)
    if stages is None:
        template = VEHICLE_ONLY_TEMPLATE if is_vehicle_only else GLOBAL_TEMPLATE
        stages = normalize_checklists(copy.deepcopy(template))
    return reset_completion(stages)


def reset_completion(stages: Any) -> List[Dict[str, Any]]:
    """Copy of ``stages`` (any accepted format) with every item marked not completed."""
    normalized = normalize_checklists(stages) or []
    return [
        {"title": stage["title"], "items": [{**item, "completed": False} for item in stage["items"]]}
        for stage in normalized
    ]
