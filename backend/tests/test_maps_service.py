from unittest import mock

import pytest
import requests

from trips import maps_service
from trips.maps_service import MapsConfigurationError, MapsError, NoRouteFound, compute_route


ROUTE_RESPONSE = {
    "routes": [
        {
            "distanceMeters": 877000,
            "duration": "31500s",
            "polyline": {"encodedPolyline": "abc123"},
            "legs": [
                {
                    "startLocation": {"latLng": {"latitude": -33.87, "longitude": 151.21}},
                    "endLocation": {"latLng": {"latitude": -37.81, "longitude": 144.96}},
                }
            ],
            "travelAdvisory": {
                "tollInfo": {"estimatedPrice": [{"currencyCode": "AUD", "units": "12", "nanos": 500000000}]}
            },
        }
    ]
}


def _response(status_code=200, payload=None, text=""):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.text = text
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def maps_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "test-key")


def test_compute_route_adapts_response(maps_key):
    with mock.patch.object(maps_service.requests, "post", return_value=_response(payload=ROUTE_RESPONSE)):
        route = compute_route("Sydney NSW", "Melbourne VIC")

    assert route["distance"] == {"text": "877.0 km", "value": 877000}
    assert route["duration"] == {"text": "8 hours 45 mins", "value": 31500}
    assert route["start_location"] == {"lat": -33.87, "lng": 151.21}
    assert route["end_location"] == {"lat": -37.81, "lng": 144.96}
    assert route["polyline"] == "abc123"
    assert route["toll_info"] == {"text": "$12.50 (AUD)", "value": 12.5}


def test_compute_route_sends_vehicle_details(maps_key):
    with mock.patch.object(maps_service.requests, "post", return_value=_response(payload=ROUTE_RESPONSE)) as post:
        compute_route("A", "B", vehicle_height=3.1, axle_count=3, avoid_tolls=True)

    body = post.call_args.kwargs["json"]
    assert body["routeModifiers"] == {
        "vehicleInfo": {"dimensions": {"height": 3.1}, "axleCount": 3},
        "avoidTolls": True,
    }
    assert post.call_args.kwargs["headers"]["X-Goog-Api-Key"] == "test-key"
    assert post.call_args.kwargs["timeout"] == 15


def test_compute_route_without_modifiers(maps_key):
    with mock.patch.object(maps_service.requests, "post", return_value=_response(payload=ROUTE_RESPONSE)) as post:
        compute_route("A", "B")
    assert "routeModifiers" not in post.call_args.kwargs["json"]


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    with pytest.raises(MapsConfigurationError):
        compute_route("A", "B")


def test_no_route_found(maps_key):
    with mock.patch.object(maps_service.requests, "post", return_value=_response(payload={"routes": []})):
        with pytest.raises(NoRouteFound):
            compute_route("A", "B")


def test_disabled_api_message_is_rewritten(maps_key):
    payload = {"error": {"message": "Routes API has not been used in project 42 before or it is disabled."}}
    with mock.patch.object(maps_service.requests, "post", return_value=_response(403, payload)):
        with pytest.raises(MapsError) as excinfo:
            compute_route("A", "B")
    assert "not enabled" in str(excinfo.value)


def test_network_failure_is_maps_error(maps_key):
    with mock.patch.object(maps_service.requests, "post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(MapsError):
            compute_route("A", "B")
