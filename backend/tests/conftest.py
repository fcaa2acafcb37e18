import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.models import UserProfile
from trips.models import Trip
from vehicles.models import Caravan, Vehicle, WeightDistributionHitch


User = get_user_model()


@pytest.fixture
def user(db):
    u = User.objects.create_user(username="traveller", email="traveller@example.com", password="s3cret-pass")
    UserProfile.objects.create(user=u)
    return u


@pytest.fixture
def other_user(db):
    u = User.objects.create_user(username="someone", email="someone@example.com", password="s3cret-pass")
    UserProfile.objects.create(user=u)
    return u


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def make_vehicle():
    def _make(owner, **overrides):
        fields = {
            "make": "Toyota",
            "model": "LandCruiser 300",
            "year": 2022,
            "gvm": 3280,
            "gcm": 6750,
            "max_tow_capacity": 3500,
            "max_towball_mass": 350,
            "fuel_efficiency": 12.5,
            "kerb_weight": 2630,
        }
        fields.update(overrides)
        return Vehicle.objects.create(user=owner, **fields)

    return _make


@pytest.fixture
def make_caravan():
    def _make(owner, **overrides):
        fields = {
            "make": "Jayco",
            "model": "Starcraft",
            "year": 2021,
            "tare_mass": 2000,
            "atm": 2800,
            "gtm": 2600,
            "max_towball_download": 250,
            "water_tanks": [
                {
                    "id": "fresh1",
                    "name": "Front fresh",
                    "type": "fresh",
                    "capacity_litres": 100,
                    "longitudinal_position": "front-of-axles",
                    "lateral_position": "center",
                }
            ],
        }
        fields.update(overrides)
        return Caravan.objects.create(user=owner, **fields)

    return _make


@pytest.fixture
def make_wdh():
    def _make(owner, **overrides):
        fields = {"name": "Eaz-Lift", "type": "Round bar", "max_capacity_kg": 350, "min_capacity_kg": 100}
        fields.update(overrides)
        return WeightDistributionHitch.objects.create(user=owner, **fields)

    return _make


@pytest.fixture
def make_trip():
    def _make(owner, **overrides):
        fields = {
            "name": "Sydney to Melbourne",
            "start_location_display": "Sydney NSW",
            "end_location_display": "Melbourne VIC",
            "fuel_efficiency": 12.0,
            "fuel_price": 2.0,
            "occupants": [{"id": "o1", "name": "Driver", "type": "Adult", "weight": 80}],
        }
        fields.update(overrides)
        return Trip.objects.create(user=owner, **fields)

    return _make
