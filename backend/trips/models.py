from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class Journey(models.Model):
    """
    A named group of trips (e.g. a lap of the country made of several legs).
    Membership lives on Trip.journey; deleting a journey detaches its trips.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="journeys"
    )
    name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    # Encoded polyline covering every leg, for the overview map
    master_polyline = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return self.name


class Trip(models.Model):
    """
    A planned (or completed) trip with its route, fuel estimate, checklists,
    budget, expenses and occupants.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="trips"
    )
    journey = models.ForeignKey(
        Journey, on_delete=models.SET_NULL, null=True, blank=True, related_name="trips"
    )
    name = models.CharField(max_length=200)
    start_location_display = models.CharField(max_length=255)
    end_location_display = models.CharField(max_length=255)
    fuel_efficiency = models.FloatField(help_text="L/100km")
    fuel_price = models.FloatField(help_text="Price per litre")

    # Adapted route from the maps service: distance, duration, locations, polyline
    route_details = models.JSONField(null=True, blank=True)
    # { "fuel_needed", "estimated_cost", ... } from trips.fuel.estimate_fuel
    fuel_estimate = models.JSONField(null=True, blank=True)

    planned_start_date = models.DateTimeField(null=True, blank=True)
    planned_end_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    is_completed = models.BooleanField(default=False)
    is_vehicle_only = models.BooleanField(default=False)

    # [ { "title", "items": [ { "id", "text", "completed" } ] } ]
    checklists = models.JSONField(default=list, blank=True)
    # [ { "id", "name", "budgeted_amount" } ]
    budget = models.JSONField(default=list, blank=True)
    # [ { "id", "category_id", "description", "amount", "date" } ]
    expenses = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    # [ { "id", "name", "type", "age", "weight", "notes" } ]
    occupants = models.JSONField(default=list, blank=True)

    # Snapshot of the active caravan when the trip was planned
    caravan_id_at_creation = models.PositiveIntegerField(null=True, blank=True)
    caravan_name_at_creation = models.CharField(max_length=255, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return self.name


class PackingList(models.Model):
    trip = models.OneToOneField(Trip, on_delete=models.CASCADE, related_name="packing_list")
    # [ { "id", "name", "items": [ { "id", "name", "quantity", "packed", "notes" } ] } ]
    categories = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - convenience only
        return f"Packing list for trip {self.trip_id}"


class Booking(models.Model):
    """
    Campsite / accommodation booking. When assigned to a trip with a cost,
    the cost is carried in that trip's "Accommodation" budget category.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings"
    )
    site_name = models.CharField(max_length=200)
    location_address = models.CharField(max_length=255, blank=True, default="")
    contact_phone = models.CharField(max_length=50, blank=True, default="")
    contact_website = models.CharField(max_length=500, blank=True, default="")
    confirmation_number = models.CharField(max_length=100, blank=True, default="")
    check_in_date = models.DateTimeField()
    check_out_date = models.DateTimeField()
    notes = models.TextField(blank=True, default="")
    assigned_trip = models.ForeignKey(
        Trip, on_delete=models.SET_NULL, null=True, blank=True, related_name="bookings"
    )
    budgeted_cost = models.FloatField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["check_in_date", "id"]

    def __str__(self) -> str:
        return self.site_name


DOCUMENT_TAGS = [
    "Insurance",
    "Registration",
    "Manual",
    "Receipt",
    "Booking Confirmation",
    "Map",
    "Permit",
    "Other",
]


class Document(models.Model):
    """Link to a travel document stored elsewhere (insurance, rego papers, manuals...)."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="documents"
    )
    name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    file_url = models.URLField(max_length=1000)
    # Subset of DOCUMENT_TAGS
    tags = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at", "-id"]

    def __str__(self) -> str:
        return self.name


class FavoriteSpot(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favorite_spots"
    )
    name = models.CharField(max_length=200)
    latitude = models.FloatField()
    longitude = models.FloatField()
    notes = models.TextField(null=True, blank=True)
    # e.g. a Google Place id or a booking site id
    external_id = models.CharField(max_length=255, null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)
    added_date = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-added_date", "-id"]

    def __str__(self) -> str:
        return self.name
