from django.conf import settings
from django.db import models


CARAVAN_TYPES = [
    "Caravan",
    "Folding Camper",
    "Motorhome",
    "Campervan",
    "Slide-on Camper",
    "Fifth Wheeler",
    "Tent",
    "Utility Trailer",
]


class Vehicle(models.Model):
    """
    Tow vehicle profile. Masses in kg, fuel efficiency in L/100km.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="vehicles"
    )
    make = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    year = models.PositiveIntegerField()

    gvm = models.FloatField(help_text="Gross Vehicle Mass")
    gcm = models.FloatField(help_text="Gross Combined Mass")
    max_tow_capacity = models.FloatField()
    max_towball_mass = models.FloatField()
    fuel_efficiency = models.FloatField()
    # Vehicle with a full tank of fuel, no occupants or cargo
    kerb_weight = models.FloatField(null=True, blank=True)
    front_axle_limit = models.FloatField(null=True, blank=True)
    rear_axle_limit = models.FloatField(null=True, blank=True)
    wheelbase = models.FloatField(null=True, blank=True, help_text="mm")

    storage_locations = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["make", "model", "id"]

    def __str__(self) -> str:
        return f"{self.year} {self.make} {self.model}"


class WeightDistributionHitch(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="wdhs"
    )
    name = models.CharField(max_length=150)
    type = models.CharField(max_length=100)
    max_capacity_kg = models.FloatField()
    min_capacity_kg = models.FloatField(null=True, blank=True)
    has_integrated_sway_control = models.BooleanField(default=False)
    sway_control_type = models.CharField(max_length=150, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        verbose_name = "weight distribution hitch"
        verbose_name_plural = "weight distribution hitches"

    def __str__(self) -> str:
        return self.name


class Caravan(models.Model):
    """
    Caravan/trailer profile. Storage locations, water tanks and diagrams are
    kept as JSON lists in the same shape the frontend edits them.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="caravans"
    )
    type = models.CharField(
        max_length=30, choices=[(t, t) for t in CARAVAN_TYPES], default="Caravan"
    )
    make = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    year = models.PositiveIntegerField()

    tare_mass = models.FloatField()
    atm = models.FloatField(help_text="Aggregate Trailer Mass")
    gtm = models.FloatField(help_text="Gross Trailer Mass")
    max_towball_download = models.FloatField()
    number_of_axles = models.PositiveSmallIntegerField(default=1)
    axle_group_rating = models.FloatField(null=True, blank=True)

    number_of_gas_bottles = models.PositiveSmallIntegerField(null=True, blank=True)
    gas_bottle_capacity_kg = models.FloatField(null=True, blank=True)
    tyre_size = models.CharField(max_length=50, null=True, blank=True)
    tyre_load_rating = models.PositiveIntegerField(null=True, blank=True)
    tyre_speed_rating = models.CharField(max_length=5, null=True, blank=True)
    recommended_tyre_pressure_psi = models.FloatField(null=True, blank=True)

    # Dimensions in mm
    overall_length = models.FloatField(null=True, blank=True)
    body_length = models.FloatField(null=True, blank=True)
    overall_height = models.FloatField(null=True, blank=True)
    hitch_to_axle_center_distance = models.FloatField(null=True, blank=True)
    inter_axle_spacing = models.FloatField(null=True, blank=True)

    storage_locations = models.JSONField(default=list, blank=True)
    water_tanks = models.JSONField(default=list, blank=True)
    diagrams = models.JSONField(default=list, blank=True)

    wdh = models.ForeignKey(
        WeightDistributionHitch,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="caravans",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["make", "model", "id"]

    def __str__(self) -> str:
        return f"{self.year} {self.make} {self.model}"


class CaravanInventory(models.Model):
    """
    Items loaded in a caravan. The list is always replaced as a whole.
    """

    caravan = models.OneToOneField(
        Caravan, on_delete=models.CASCADE, related_name="inventory"
    )
    # [{ "id", "name", "weight", "quantity", "location_id" }]
    items = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "caravan inventories"

    def __str__(self) -> str:  # pragma: no cover - convenience only
        return f"Inventory for caravan {self.caravan_id}"


class FuelLogEntry(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="fuel_logs"
    )
    vehicle = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name="fuel_logs")
    date = models.DateTimeField()
    odometer = models.FloatField()
    litres = models.FloatField()
    price_per_litre = models.FloatField()
    total_cost = models.FloatField()
    location = models.CharField(max_length=255, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    assigned_trip = models.ForeignKey(
        "trips.Trip",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fuel_logs",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-id"]
        verbose_name_plural = "fuel log entries"


class MaintenanceTask(models.Model):
    CATEGORIES = [
        "Engine",
        "Tyres",
        "Brakes",
        "Chassis",
        "Electrical",
        "Plumbing",
        "Appliance",
        "Registration",
        "General",
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="maintenance_tasks"
    )
    # Vehicle or caravan id; the name is kept for display after the asset is removed.
    asset_id = models.CharField(max_length=64)
    asset_name = models.CharField(max_length=200)
    task_name = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=[(c, c) for c in CATEGORIES], default="General")
    due_date = models.DateTimeField(null=True, blank=True)
    due_odometer = models.FloatField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    is_completed = models.BooleanField(default=False)
    completed_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["is_completed", "due_date", "id"]

    def __str__(self) -> str:  # pragma: no cover - convenience only
        return f"{self.task_name} ({self.asset_name})"
