from django.db import transaction
from rest_framework import serializers

from .checklists import normalize_checklists
from .models import DOCUMENT_TAGS, Booking, Document, FavoriteSpot, Journey, Trip


OCCUPANT_TYPES = ["Adult", "Child", "Infant", "Pet"]


class BudgetCategorySerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    budgeted_amount = serializers.FloatField(min_value=0)


class ExpenseSerializer(serializers.Serializer):
    id = serializers.CharField()
    category_id = serializers.CharField()
    description = serializers.CharField()
    amount = serializers.FloatField(min_value=0.01)
    date = serializers.DateTimeField()


class OccupantSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    type = serializers.ChoiceField(choices=OCCUPANT_TYPES, default="Adult")
    age = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    weight = serializers.FloatField(min_value=0)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class TripSerializer(serializers.ModelSerializer):
    fuel_efficiency = serializers.FloatField(min_value=0.1)
    fuel_price = serializers.FloatField(min_value=0.01)
    checklists = serializers.JSONField(required=False)
    budget = serializers.ListField(child=BudgetCategorySerializer(), required=False)
    expenses = serializers.ListField(child=ExpenseSerializer(), required=False)
    occupants = serializers.ListField(child=OccupantSerializer(), required=False, min_length=1)
    journey = serializers.PrimaryKeyRelatedField(
        queryset=Journey.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Trip
        fields = (
            "id",
            "name",
            "start_location_display",
            "end_location_display",
            "fuel_efficiency",
            "fuel_price",
            "route_details",
            "fuel_estimate",
            "planned_start_date",
            "planned_end_date",
            "notes",
            "is_completed",
            "is_vehicle_only",
            "checklists",
            "budget",
            "expenses",
            "occupants",
            "caravan_id_at_creation",
            "caravan_name_at_creation",
            "journey",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get("request")
        if request is not None and request.user.is_authenticated:
            self.fields["journey"].queryset = Journey.objects.filter(user=request.user)

    def validate_checklists(self, value):
        if value in (None, [], {}):
            return []
        stages = normalize_checklists(value)
        if stages is None:
            raise serializers.ValidationError(
                "Checklists must be a list of {title, items} stages or a "
                "{preDeparture, campsiteSetup, packDown} object."
            )
        return stages

    def validate(self, attrs):
        start = attrs.get("planned_start_date", getattr(self.instance, "planned_start_date", None))
        end = attrs.get("planned_end_date", getattr(self.instance, "planned_end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError(
                {"planned_end_date": "Planned end date cannot be before the start date."}
            )
        budget_ids = {c["id"] for c in attrs.get("budget", [])}
        if len(budget_ids) != len(attrs.get("budget", [])):
            raise serializers.ValidationError({"budget": "Budget category ids must be unique."})
        return attrs


class DirectionsRequestSerializer(serializers.Serializer):
    origin = serializers.CharField()
    destination = serializers.CharField()
    vehicle_height = serializers.FloatField(min_value=0.1, required=False, allow_null=True)
    axle_count = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    avoid_tolls = serializers.BooleanField(required=False, default=False)
    fuel_efficiency = serializers.FloatField(min_value=0.1, required=False, allow_null=True)
    fuel_price = serializers.FloatField(min_value=0.01, required=False, allow_null=True)


class TripCopySerializer(serializers.Serializer):
    source_trip_id = serializers.IntegerField()
    destination_journey_id = serializers.IntegerField()


class PackingListItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    quantity = serializers.IntegerField(min_value=0, default=1)
    packed = serializers.BooleanField(default=False)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PackingListCategorySerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    items = serializers.ListField(child=PackingListItemSerializer(), required=False, default=list)


class PackingListUpdateSerializer(serializers.Serializer):
    categories = serializers.ListField(child=PackingListCategorySerializer())


class JourneySerializer(serializers.ModelSerializer):
    trip_ids = serializers.ListField(child=serializers.IntegerField(), required=False)

    class Meta:
        model = Journey
        fields = ("id", "name", "description", "trip_ids", "master_polyline", "created_at", "updated_at")
        read_only_fields = ("id", "created_at", "updated_at")

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["trip_ids"] = list(instance.trips.values_list("id", flat=True))
        return data

    def validate_trip_ids(self, value):
        request = self.context.get("request")
        ids = list(dict.fromkeys(value))
        owned = set(Trip.objects.filter(user=request.user, id__in=ids).values_list("id", flat=True))
        unknown = [i for i in ids if i not in owned]
        if unknown:
            raise serializers.ValidationError(f"Unknown trip id(s): {', '.join(str(i) for i in unknown)}")
        return ids

    @transaction.atomic
    def create(self, validated_data):
        trip_ids = validated_data.pop("trip_ids", None)
        journey = super().create(validated_data)
        if trip_ids is not None:
            set_journey_trips(journey, trip_ids)
        return journey

    @transaction.atomic
    def update(self, instance, validated_data):
        trip_ids = validated_data.pop("trip_ids", None)
        journey = super().update(instance, validated_data)
        if trip_ids is not None:
            set_journey_trips(journey, trip_ids)
        return journey


def set_journey_trips(journey, trip_ids):
    """Make ``trip_ids`` exactly the journey's trips (a trip belongs to one journey at most)."""
    Trip.objects.filter(journey=journey).exclude(id__in=trip_ids).update(journey=None)
    Trip.objects.filter(user_id=journey.user_id, id__in=trip_ids).update(journey=journey)


class BookingSerializer(serializers.ModelSerializer):
    contact_website = serializers.URLField(required=False, allow_blank=True)
    budgeted_cost = serializers.FloatField(min_value=0, required=False, allow_null=True)
    assigned_trip = serializers.PrimaryKeyRelatedField(
        queryset=Trip.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Booking
        fields = (
            "id",
            "site_name",
            "location_address",
            "contact_phone",
            "contact_website",
            "confirmation_number",
            "check_in_date",
            "check_out_date",
            "notes",
            "assigned_trip",
            "budgeted_cost",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get("request")
        if request is not None and request.user.is_authenticated:
            self.fields["assigned_trip"].queryset = Trip.objects.filter(user=request.user)

    def validate(self, attrs):
        check_in = attrs.get("check_in_date", getattr(self.instance, "check_in_date", None))
        check_out = attrs.get("check_out_date", getattr(self.instance, "check_out_date", None))
        if check_in and check_out and check_out < check_in:
            raise serializers.ValidationError(
                {"check_out_date": "Check-out date cannot be before check-in date."}
            )
        return attrs


class DocumentSerializer(serializers.ModelSerializer):
    file_url = serializers.URLField(max_length=1000)
    tags = serializers.ListField(child=serializers.ChoiceField(choices=DOCUMENT_TAGS), required=False)

    class Meta:
        model = Document
        fields = ("id", "name", "description", "file_url", "tags", "created_at", "updated_at")
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_tags(self, value):
        return list(dict.fromkeys(value))


class FavoriteSpotSerializer(serializers.ModelSerializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    tags = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = FavoriteSpot
        fields = ("id", "name", "latitude", "longitude", "notes", "external_id", "tags", "added_date", "updated_at")
        read_only_fields = ("id", "added_date", "updated_at")
