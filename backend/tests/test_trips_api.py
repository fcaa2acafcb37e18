from unittest import mock

import pytest
from django.urls import reverse

from accounts.models import UserProfile
from trips.maps_service import MapsConfigurationError, NoRouteFound
from trips.models import Journey, PackingList, Trip


pytestmark = pytest.mark.django_db

TRIP_PAYLOAD = {
    "name": "Coastal run",
    "start_location_display": "Brisbane QLD",
    "end_location_display": "Byron Bay NSW",
    "fuel_efficiency": 14,
    "fuel_price": 2.1,
    "occupants": [{"id": "o1", "name": "Alex", "type": "Adult", "weight": 78}],
}


def test_create_trip_gets_global_checklists(auth_client, user):
    response = auth_client.post(reverse("trips:trip-list"), TRIP_PAYLOAD, format="json")

    assert response.status_code == 201
    titles = [stage["title"] for stage in response.data["checklists"]]
    assert titles == ["Pre-Departure", "Campsite Setup", "Pack-Down"]
    assert Trip.objects.get(id=response.data["id"]).user == user


def test_vehicle_only_trip_gets_vehicle_checklists(auth_client, user, make_caravan):
    profile = UserProfile.for_user(user)
    profile.active_caravan = make_caravan(user)
    profile.save()

    payload = {**TRIP_PAYLOAD, "is_vehicle_only": True}
    response = auth_client.post(reverse("trips:trip-list"), payload, format="json")

    assert response.status_code == 201
    assert response.data["checklists"][0]["items"][0]["id"] == "vehicle_pd1_tpl"
    assert response.data["caravan_id_at_creation"] is None


def test_trip_snapshots_active_caravan_and_its_checklist(auth_client, user, make_caravan):
    caravan = make_caravan(user)
    profile = UserProfile.for_user(user)
    profile.active_caravan = caravan
    profile.caravan_default_checklists = {
        str(caravan.id): [{"title": "Our van", "items": [{"id": "v1", "text": "Gas off", "completed": True}]}]
    }
    profile.save()

    response = auth_client.post(reverse("trips:trip-list"), TRIP_PAYLOAD, format="json")

    assert response.data["caravan_id_at_creation"] == caravan.id
    assert response.data["caravan_name_at_creation"] == "Jayco Starcraft"
    assert response.data["checklists"] == [
        {"title": "Our van", "items": [{"id": "v1", "text": "Gas off", "completed": False}]}
    ]


def test_trip_keeps_supplied_checklists(auth_client):
    checklists = {"preDeparture": [{"id": "c1", "text": "Check tyres", "completed": False}]}
    payload = {**TRIP_PAYLOAD, "checklists": checklists}
    response = auth_client.post(reverse("trips:trip-list"), payload, format="json")
    assert response.status_code == 201
    assert response.data["checklists"][0]["items"] == [{"id": "c1", "text": "Check tyres", "completed": False}]
    assert len(response.data["checklists"]) == 3


def test_trip_fuel_estimate_from_route(auth_client):
    payload = {**TRIP_PAYLOAD, "route_details": {"distance": {"text": "100.0 km", "value": 100000}}}
    response = auth_client.post(reverse("trips:trip-list"), payload, format="json")
    assert response.data["fuel_estimate"]["fuel_needed_litres"] == 14.0
    assert response.data["fuel_estimate"]["estimated_cost"] == 29.4


def test_trip_validation(auth_client):
    url = reverse("trips:trip-list")
    assert auth_client.post(url, {**TRIP_PAYLOAD, "occupants": []}, format="json").status_code == 400
    assert auth_client.post(url, {**TRIP_PAYLOAD, "fuel_price": 0}, format="json").status_code == 400

    dates = {"planned_start_date": "2024-06-10T00:00:00Z", "planned_end_date": "2024-06-01T00:00:00Z"}
    response = auth_client.post(url, {**TRIP_PAYLOAD, **dates}, format="json")
    assert response.status_code == 400
    assert "planned_end_date" in response.data

    budget = [
        {"id": "fuel", "name": "Fuel", "budgeted_amount": 100},
        {"id": "fuel", "name": "Fuel again", "budgeted_amount": 50},
    ]
    assert auth_client.post(url, {**TRIP_PAYLOAD, "budget": budget}, format="json").status_code == 400


def test_trips_are_private(auth_client, other_user, make_trip):
    trip = make_trip(other_user)
    assert auth_client.get(reverse("trips:trip-detail", args=[trip.id])).status_code == 404
    assert auth_client.get(reverse("trips:trip-list")).data == []


def test_record_expense(auth_client, user, make_trip):
    trip = make_trip(user, budget=[{"id": "food", "name": "Food", "budgeted_amount": 200}])
    expense = {"id": "e1", "category_id": "food", "description": "Groceries", "amount": 85.5,
               "date": "2024-06-02T10:00:00Z"}
    response = auth_client.patch(
        reverse("trips:trip-detail", args=[trip.id]), {"expenses": [expense]}, format="json"
    )
    assert response.status_code == 200

    summary = auth_client.get(reverse("trips:trip-budget", args=[trip.id])).data
    assert summary["trip"] == trip.id
    assert summary["total_spent"] == 85.5
    assert summary["total_remaining"] == 114.5


def test_budget_of_missing_trip(auth_client):
    assert auth_client.get(reverse("trips:trip-budget", args=[9999])).status_code == 404


def test_copy_trip_into_journey(auth_client, user, make_trip):
    source = make_trip(
        user,
        is_completed=True,
        planned_start_date="2024-01-01T00:00:00Z",
        checklists=[{"title": "T", "items": [{"id": "a", "text": "x", "completed": True}]}],
        budget=[{"id": "fuel", "name": "Fuel", "budgeted_amount": 300}],
        expenses=[{"id": "e1", "category_id": "fuel", "description": "Fill", "amount": 90,
                   "date": "2024-01-01T00:00:00Z"}],
    )
    PackingList.objects.create(trip=source, categories=[{"id": "c", "name": "Kitchen", "items": []}])
    journey = Journey.objects.create(user=user, name="Big lap")

    response = auth_client.post(
        reverse("trips:copy"), {"source_trip_id": source.id, "destination_journey_id": journey.id}, format="json"
    )

    assert response.status_code == 201
    copy = Trip.objects.get(id=response.data["id"])
    assert copy.name == "Copy of: Sydney to Melbourne"
    assert copy.journey == journey
    assert copy.is_completed is False
    assert copy.planned_start_date is None
    assert copy.expenses == []
    assert copy.budget == [{"id": "fuel", "name": "Fuel", "budgeted_amount": 300}]
    assert copy.checklists[0]["items"][0]["completed"] is False
    assert copy.occupants == source.occupants
    assert not PackingList.objects.filter(trip=copy).exists()
    source.refresh_from_db()
    assert source.is_completed is True


def test_copy_trip_not_found(auth_client, user, other_user, make_trip):
    journey = Journey.objects.create(user=user, name="Mine")
    foreign_trip = make_trip(other_user)
    foreign_journey = Journey.objects.create(user=other_user, name="Theirs")
    own_trip = make_trip(user)
    url = reverse("trips:copy")

    response = auth_client.post(url, {"source_trip_id": foreign_trip.id, "destination_journey_id": journey.id})
    assert response.status_code == 404
    assert response.data["detail"] == "Source trip not found."

    response = auth_client.post(url, {"source_trip_id": own_trip.id, "destination_journey_id": foreign_journey.id})
    assert response.status_code == 404
    assert response.data["detail"] == "Destination journey not found."
    assert Trip.objects.filter(user=user).count() == 1


def test_packing_list_lifecycle(auth_client, user, make_trip):
    trip = make_trip(user)
    url = reverse("trips:packing-list", args=[trip.id])

    assert auth_client.get(url).data == {"trip": trip.id, "categories": []}

    categories = [
        {"id": "c1", "name": "Kitchen", "items": [{"id": "i1", "name": "Kettle", "quantity": 1, "packed": True}]}
    ]
    response = auth_client.put(url, {"categories": categories}, format="json")
    assert response.status_code == 200
    assert auth_client.get(url).data["categories"][0]["items"][0]["name"] == "Kettle"

    assert auth_client.delete(url).status_code == 204
    assert not PackingList.objects.filter(trip=trip).exists()


def test_deleting_trip_removes_packing_list(auth_client, user, make_trip):
    trip = make_trip(user)
    PackingList.objects.create(trip=trip, categories=[])
    assert auth_client.delete(reverse("trips:trip-detail", args=[trip.id])).status_code == 204
    assert PackingList.objects.count() == 0


def test_journey_membership(auth_client, user, other_user, make_trip):
    first = make_trip(user)
    second = make_trip(user, name="Second leg")
    url = reverse("trips:journey-list")

    response = auth_client.post(url, {"name": "East coast", "trip_ids": [first.id, second.id]}, format="json")
    assert response.status_code == 201
    assert sorted(response.data["trip_ids"]) == sorted([first.id, second.id])

    detail = reverse("trips:journey-detail", args=[response.data["id"]])
    response = auth_client.patch(detail, {"trip_ids": [second.id]}, format="json")
    assert response.data["trip_ids"] == [second.id]
    first.refresh_from_db()
    assert first.journey is None

    foreign = make_trip(other_user)
    assert auth_client.patch(detail, {"trip_ids": [foreign.id]}, format="json").status_code == 400

    assert auth_client.delete(detail).status_code == 204
    second.refresh_from_db()
    assert second.journey is None


def test_directions_returns_route_and_fuel(auth_client):
    route = {"distance": {"text": "200.0 km", "value": 200000}, "duration": {"text": "2 hours", "value": 7200}}
    with mock.patch("trips.views.compute_route", return_value=route) as compute:
        response = auth_client.post(
            reverse("trips:directions"),
            {"origin": "A", "destination": "B", "vehicle_height": 3.2, "fuel_efficiency": 10, "fuel_price": 2},
            format="json",
        )

    assert response.status_code == 200
    assert response.data["route"] == route
    assert response.data["fuel_estimate"]["estimated_cost"] == 40.0
    assert compute.call_args.kwargs["vehicle_height"] == 3.2


def test_directions_errors(auth_client):
    url = reverse("trips:directions")
    with mock.patch("trips.views.compute_route", side_effect=NoRouteFound("No routes found.")):
        assert auth_client.post(url, {"origin": "A", "destination": "B"}, format="json").status_code == 404
    with mock.patch("trips.views.compute_route", side_effect=MapsConfigurationError("no key")):
        assert auth_client.post(url, {"origin": "A", "destination": "B"}, format="json").status_code == 500
    assert auth_client.post(url, {"origin": "A"}, format="json").status_code == 400


def test_deleting_journey_keeps_its_trips(auth_client, user, make_trip):
    journey = Journey.objects.create(user=user, name="Big lap")
    legs = [make_trip(user, journey=journey), make_trip(user, name="Leg two", journey=journey)]

    assert auth_client.delete(reverse("trips:journey-detail", args=[journey.id])).status_code == 204

    assert not Journey.objects.filter(id=journey.id).exists()
    for leg in legs:
        leg.refresh_from_db()
        assert leg.journey is None
    assert Trip.objects.filter(user=user).count() == 2
