import logging
import os
from typing import Any, Dict, Optional

import requests

from .fuel import format_distance, format_duration, parse_duration_seconds


logger = logging.getLogger(__name__)

ROUTES_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"
ROUTES_FIELD_MASK = (
    "routes.duration,routes.distanceMeters,routes.warnings,"
    "routes.polyline.encodedPolyline,routes.legs(startLocation,endLocation),"
    "routes.travelAdvisory.tollInfo"
)


class MapsError(Exception):
    """Upstream routing failure (HTTP 502 in views)."""


class MapsConfigurationError(MapsError):
    """Server is missing its Google Maps key (HTTP 500 in views)."""


class NoRouteFound(MapsError):
    """Google answered but found no route (HTTP 404 in views)."""


def _get_api_key() -> str:
    key = os.getenv("GOOGLE_MAPS_API_KEY")
    if not key:
        raise MapsConfigurationError("GOOGLE_MAPS_API_KEY environment variable is not set.")
    return key


def _error_message(resp) -> str:
    """Turn a failed Routes API response into something a user can act on."""
    message = f"Google Routes API request failed with status {resp.status_code}."
    try:
        payload = resp.json()
    except ValueError:
        body = (resp.text or "").lower()
        if "api key not valid" in body:
            return "The GOOGLE_MAPS_API_KEY is invalid. Check the key configured on the server."
        if "http referrer" in body:
            return (
                'The GOOGLE_MAPS_API_KEY has "HTTP referrer" restrictions. '
                'Use a key with "None" or "IP address" restrictions for server-side calls.'
            )
        return message

    upstream = (payload.get("error") or {}).get("message") if isinstance(payload, dict) else None
    if not upstream:
        return message
    if "Routes API has not been used in project" in upstream:
        return (
            "The Google Routes API is not enabled for this project. Enable it in the "
            "Google Cloud Console and make sure the API key is allowed to use it."
        )
    if "api_key_not_valid" in upstream.lower():
        return "The GOOGLE_MAPS_API_KEY is invalid. Check the key configured on the server."
    if "invalid json payload" in upstream.lower():
        return f"Invalid request sent to the Google Routes API. {upstream}"
    return upstream


def _toll_info(route: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    prices = ((route.get("travelAdvisory") or {}).get("tollInfo") or {}).get("estimatedPrice") or []
    if not prices:
        return None
    total = 0.0
    for price in prices:
        total += float(price.get("units") or 0) + float(price.get("nanos") or 0) / 1_000_000_000
    if total <= 0:
        return None
    currency = prices[0].get("currencyCode") or "USD"
    return {"text": f"${total:.2f} ({currency})", "value": round(total, 2)}


def _lat_lng(location: Optional[Dict[str, Any]]) -> Optional[Dict[str, float]]:
    lat_lng = (location or {}).get("latLng")
    if not lat_lng:
        return None
    return {"lat": lat_lng.get("latitude"), "lng": lat_lng.get("longitude")}


def compute_route(
    origin: str,
    destination: str,
    vehicle_height: Optional[float] = None,
    axle_count: Optional[int] = None,
    avoid_tolls: bool = False,
) -> Dict[str, Any]:
    """
    Driving route between two addresses using the Google Routes API.

    vehicle_height is in metres; when given (> 0) it is passed to Google so
    the route respects height restrictions.

    Returns:
        {
          "distance": {"text": "123.4 km", "value": <metres>},
          "duration": {"text": "1 hour 23 mins", "value": <seconds>},
          "start_location": {"lat", "lng"} | None,
          "end_location": {"lat", "lng"} | None,
          "polyline": <encoded polyline> | None,
          "warnings": [...],
          "toll_info": {"text", "value"} | None,
        }
    """
    api_key = _get_api_key()

    body: Dict[str, Any] = {
        "origin": {"address": origin},
        "destination": {"address": destination},
        "travelMode": "DRIVE",
        "routingPreference": "TRAFFIC_AWARE",
        "computeAlternativeRoutes": False,
        "extraComputations": ["TOLLS"],
        "languageCode": "en-US",
        "units": "METRIC",
        "polylineEncoding": "ENCODED_POLYLINE",
    }
    vehicle_info: Dict[str, Any] = {}
    if vehicle_height and vehicle_height > 0:
        vehicle_info["dimensions"] = {"height": vehicle_height}
    if axle_count and axle_count > 0:
        vehicle_info["axleCount"] = axle_count
    route_modifiers: Dict[str, Any] = {}
    if vehicle_info:
        route_modifiers["vehicleInfo"] = vehicle_info
    if avoid_tolls:
        route_modifiers["avoidTolls"] = True
    if route_modifiers:
        body["routeModifiers"] = route_modifiers

    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": ROUTES_FIELD_MASK,
    }
    try:
        resp = requests.post(ROUTES_URL, json=body, headers=headers, timeout=15)
    except requests.RequestException as exc:
        logger.error(f"Routes API request failed: {exc}")
        raise MapsError(f"Could not reach the Google Routes API: {exc}") from exc

    if resp.status_code != 200:
        logger.error(f"Routes API error {resp.status_code}: {resp.text}")
        raise MapsError(_error_message(resp))

    routes = resp.json().get("routes") or []
    if not routes:
        raise NoRouteFound(
            "No routes found between the specified locations. Please check the start and end points."
        )

    route = routes[0]
    distance_m = route.get("distanceMeters") or 0
    duration_raw = route.get("duration") or "0s"
    legs = route.get("legs") or []

    return {
        "distance": {"text": format_distance(distance_m), "value": distance_m},
        "duration": {"text": format_duration(duration_raw), "value": parse_duration_seconds(duration_raw) or 0},
        "start_location": _lat_lng(legs[0].get("startLocation")) if legs else None,
        "end_location": _lat_lng(legs[-1].get("endLocation")) if legs else None,
        "polyline": (route.get("polyline") or {}).get("encodedPolyline"),
        "warnings": route.get("warnings") or [],
        "toll_info": _toll_info(route),
    }
