from django.utils import timezone
from rest_framework import serializers

from .models import (
    CARAVAN_TYPES,
    Caravan,
    FuelLogEntry,
    MaintenanceTask,
    Vehicle,
    WeightDistributionHitch,
)


POSITIONS_LONGITUDINAL = ["front-of-axles", "over-axles", "rear-of-axles"]
POSITIONS_LATERAL = ["left", "center", "right"]


def _validate_year(value):
    max_year = timezone.now().year + 2
    if value < 1900 or value > max_year:
        raise serializers.ValidationError(f"Year must be between 1900 and {max_year}.")
    return value


class StorageLocationSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    longitudinal_position = serializers.ChoiceField(choices=POSITIONS_LONGITUDINAL)
    lateral_position = serializers.ChoiceField(choices=POSITIONS_LATERAL)
    distance_from_axle_center_mm = serializers.FloatField(required=False, allow_null=True)
    distance_from_centerline_mm = serializers.FloatField(required=False, allow_null=True)
    height_from_ground_mm = serializers.FloatField(required=False, allow_null=True)
    max_weight_capacity_kg = serializers.FloatField(required=False, allow_null=True)


class WaterTankSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    type = serializers.ChoiceField(choices=["fresh", "grey", "black"])
    capacity_litres = serializers.FloatField(min_value=0.1)
    longitudinal_position = serializers.ChoiceField(choices=POSITIONS_LONGITUDINAL)
    lateral_position = serializers.ChoiceField(choices=POSITIONS_LATERAL)
    distance_from_axle_center_mm = serializers.FloatField(required=False, allow_null=True)


class DiagramSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    url = serializers.URLField()
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class VehicleSerializer(serializers.ModelSerializer):
    gvm = serializers.FloatField(min_value=0.1)
    gcm = serializers.FloatField(min_value=0.1)
    max_tow_capacity = serializers.FloatField(min_value=0.1)
    max_towball_mass = serializers.FloatField(min_value=0.1)
    fuel_efficiency = serializers.FloatField(min_value=0.1)
    kerb_weight = serializers.FloatField(min_value=1, required=False, allow_null=True)
    front_axle_limit = serializers.FloatField(min_value=1, required=False, allow_null=True)
    rear_axle_limit = serializers.FloatField(min_value=1, required=False, allow_null=True)
    wheelbase = serializers.FloatField(min_value=1000, required=False, allow_null=True)
    storage_locations = serializers.ListField(child=StorageLocationSerializer(), required=False)

    class Meta:
        model = Vehicle
        fields = (
            "id",
            "make",
            "model",
            "year",
            "gvm",
            "gcm",
            "max_tow_capacity",
            "max_towball_mass",
            "fuel_efficiency",
            "kerb_weight",
            "front_axle_limit",
            "rear_axle_limit",
            "wheelbase",
            "storage_locations",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_year(self, value):
        return _validate_year(value)


class WeightDistributionHitchSerializer(serializers.ModelSerializer):
    max_capacity_kg = serializers.FloatField(min_value=0.1)
    min_capacity_kg = serializers.FloatField(min_value=0, required=False, allow_null=True)

    class Meta:
        model = WeightDistributionHitch
        fields = (
            "id",
            "name",
            "type",
            "max_capacity_kg",
            "min_capacity_kg",
            "has_integrated_sway_control",
            "sway_control_type",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate(self, attrs):
        max_kg = attrs.get("max_capacity_kg", getattr(self.instance, "max_capacity_kg", None))
        min_kg = attrs.get("min_capacity_kg", getattr(self.instance, "min_capacity_kg", None))
        if min_kg is not None and max_kg is not None and min_kg > max_kg:
            raise serializers.ValidationError(
                {"min_capacity_kg": "Min capacity cannot be greater than max capacity."}
            )
        return attrs


class CaravanSerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(choices=CARAVAN_TYPES, required=False)
    tare_mass = serializers.FloatField(min_value=0.1)
    atm = serializers.FloatField(min_value=0.1)
    gtm = serializers.FloatField(min_value=0.1)
    max_towball_download = serializers.FloatField(min_value=0.1)
    number_of_axles = serializers.IntegerField(min_value=1, required=False)
    axle_group_rating = serializers.FloatField(min_value=0.1, required=False, allow_null=True)
    storage_locations = serializers.ListField(child=StorageLocationSerializer(), required=False)
    water_tanks = serializers.ListField(child=WaterTankSerializer(), required=False)
    diagrams = serializers.ListField(child=DiagramSerializer(), required=False)
    wdh = serializers.PrimaryKeyRelatedField(
        queryset=WeightDistributionHitch.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Caravan
        fields = (
            "id",
            "type",
            "make",
            "model",
            "year",
            "tare_mass",
            "atm",
            "gtm",
            "max_towball_download",
            "number_of_axles",
            "axle_group_rating",
            "number_of_gas_bottles",
            "gas_bottle_capacity_kg",
            "tyre_size",
            "tyre_load_rating",
            "tyre_speed_rating",
            "recommended_tyre_pressure_psi",
            "overall_length",
            "body_length",
            "overall_height",
            "hitch_to_axle_center_distance",
            "inter_axle_spacing",
            "storage_locations",
            "water_tanks",
            "diagrams",
            "wdh",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get("request")
        if request is not None and request.user.is_authenticated:
            self.fields["wdh"].queryset = WeightDistributionHitch.objects.filter(user=request.user)

    def validate_year(self, value):
        return _validate_year(value)


class InventoryItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    weight = serializers.FloatField(min_value=0)
    quantity = serializers.IntegerField(min_value=0)
    location_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class InventoryUpdateSerializer(serializers.Serializer):
    items = serializers.ListField(child=InventoryItemSerializer())


class OccupantWeightSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    weight = serializers.FloatField(min_value=0)


class ComplianceCaravanSerializer(serializers.Serializer):
    tare_mass = serializers.FloatField(min_value=0)
    atm = serializers.FloatField(min_value=0)
    gtm = serializers.FloatField(min_value=0)
    max_towball_download = serializers.FloatField(min_value=0)
    axle_group_rating = serializers.FloatField(min_value=0, required=False, allow_null=True)
    water_tanks = serializers.ListField(child=WaterTankSerializer(), required=False)


class ComplianceVehicleSerializer(serializers.Serializer):
    gvm = serializers.FloatField(min_value=0)
    gcm = serializers.FloatField(min_value=0)
    max_tow_capacity = serializers.FloatField(min_value=0)
    max_towball_mass = serializers.FloatField(min_value=0)
    kerb_weight = serializers.FloatField(min_value=0, required=False, allow_null=True)
    front_axle_limit = serializers.FloatField(min_value=0, required=False, allow_null=True)
    rear_axle_limit = serializers.FloatField(min_value=0, required=False, allow_null=True)


class ComplianceWdhSerializer(serializers.Serializer):
    max_capacity_kg = serializers.FloatField(min_value=0)
    min_capacity_kg = serializers.FloatField(min_value=0, required=False, allow_null=True)


class ComplianceRequestSerializer(serializers.Serializer):
    """
    Payload for an ad hoc compliance calculation (nothing is read from or
    written to the database).
    """

    caravan = ComplianceCaravanSerializer()
    vehicle = ComplianceVehicleSerializer(required=False, allow_null=True)
    wdh = ComplianceWdhSerializer(required=False, allow_null=True)
    inventory = serializers.ListField(child=InventoryItemSerializer(), required=False)
    water_levels = serializers.DictField(
        child=serializers.FloatField(min_value=0, max_value=100), required=False
    )
    occupants = serializers.ListField(child=OccupantWeightSerializer(), required=False)
    measured_towball_download = serializers.FloatField(min_value=0, required=False, allow_null=True)


class FuelLogEntrySerializer(serializers.ModelSerializer):
    odometer = serializers.FloatField(min_value=0.1)
    litres = serializers.FloatField(min_value=0.01)
    price_per_litre = serializers.FloatField(min_value=0.01)
    total_cost = serializers.FloatField(min_value=0.01)

    class Meta:
        model = FuelLogEntry
        fields = (
            "id",
            "vehicle",
            "date",
            "odometer",
            "litres",
            "price_per_litre",
            "total_cost",
            "location",
            "notes",
            "assigned_trip",
            "created_at",
        )
        read_only_fields = ("id", "created_at")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get("request")
        if request is not None and request.user.is_authenticated:
            self.fields["vehicle"].queryset = Vehicle.objects.filter(user=request.user)
            self.fields["assigned_trip"].queryset = request.user.trips.all()


class MaintenanceTaskSerializer(serializers.ModelSerializer):
    due_odometer = serializers.FloatField(min_value=0.1, required=False, allow_null=True)

    class Meta:
        model = MaintenanceTask
        fields = (
            "id",
            "asset_id",
            "asset_name",
            "task_name",
            "category",
            "due_date",
            "due_odometer",
            "notes",
            "is_completed",
            "completed_date",
            "created_at",
        )
        read_only_fields = ("id", "created_at")

    def validate(self, attrs):
        completed = attrs.get("is_completed", getattr(self.instance, "is_completed", False))
        if completed and not attrs.get("completed_date") and not getattr(self.instance, "completed_date", None):
            attrs["completed_date"] = timezone.now()
        if "is_completed" in attrs and not attrs["is_completed"]:
            attrs["completed_date"] = None
        return attrs
