from __future__ import annotations

import re
from typing import Any, Dict, Optional


def estimate_fuel(distance_meters: Any, fuel_efficiency: Any, fuel_price: Any) -> Optional[Dict[str, Any]]:
    """
    Fuel needed for a drive and what it will cost.

    distance_meters: route distance in metres
    fuel_efficiency: litres per 100 km (must be > 0)
    fuel_price: price per litre (must be > 0)

    Returns None when there is nothing to estimate (zero distance, missing or
    non-positive efficiency/price).
    """
    try:
        distance = float(distance_meters)
        efficiency = float(fuel_efficiency)
        price = float(fuel_price)
    except (TypeError, ValueError):
        return None
    if distance <= 0 or efficiency <= 0 or price <= 0:
        return None

    litres = distance / 1000.0 / 100.0 * efficiency
    cost = litres * price
    return {
        "fuel_needed_litres": round(litres, 2),
        "estimated_cost": round(cost, 2),
        "fuel_needed": f"{litres:.1f} L",
        "estimated_cost_display": f"${cost:.2f}",
    }


_SECONDS_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)s?\s*$")


def parse_duration_seconds(value: Any) -> Optional[int]:
    """Seconds from ``"3600s"`` (Routes API style) or a plain number; None if unusable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        match = _SECONDS_RE.match(str(value))
        if not match:
            return None
        seconds = float(match.group(1))
    if seconds < 0 or seconds != seconds:
        return None
    return int(seconds)


def format_duration(value: Any) -> str:
    seconds = parse_duration_seconds(value)
    if seconds is None:
        return "N/A"
    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    parts = []
    if hours > 0:
        parts.append(f"{hours} hour{'s' if hours > 1 else ''}")
    if minutes > 0:
        parts.append(f"{minutes} min{'s' if minutes > 1 else ''}")
    return " ".join(parts) if parts else "Less than a minute"


def format_distance(meters: Any) -> str:
    try:
        return f"{float(meters) / 1000:.1f} km"
    except (TypeError, ValueError):
        return "N/A"
