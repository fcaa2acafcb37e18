from django.contrib.auth import get_user_model
from rest_framework import serializers

from trips.checklists import normalize_checklists
from vehicles.models import Caravan, Vehicle, WeightDistributionHitch

from .models import UserProfile


User = get_user_model()


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    city = serializers.CharField(required=False, allow_blank=True, write_only=True)
    state = serializers.CharField(required=False, allow_blank=True, write_only=True)
    country = serializers.CharField(required=False, allow_blank=True, write_only=True)

    class Meta:
        model = User
        fields = ("id", "username", "email", "password", "first_name", "last_name", "city", "state", "country")
        read_only_fields = ("id",)
        extra_kwargs = {
            "email": {"required": True},
            "username": {"required": True},
        }

    def validate_email(self, value):
        """Email is stored lowercased and must be unique."""
        if not value:
            raise serializers.ValidationError("Email is required.")
        value = value.lower().strip()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate_username(self, value):
        if not value:
            raise serializers.ValidationError("Username is required.")
        value = value.strip()
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("A user with this username already exists.")
        return value

    def create(self, validated_data):
        password = validated_data.pop("password")
        location = {key: validated_data.pop(key, "") for key in ("city", "state", "country")}
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        UserProfile.objects.create(user=user, **location)
        return user


class SessionSerializer(serializers.Serializer):
    """Login with either the username or the email address."""

    username = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class ProfileSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    first_name = serializers.CharField(source="user.first_name", required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(source="user.last_name", required=False, allow_blank=True, max_length=150)
    has_pro_access = serializers.BooleanField(read_only=True)

    class Meta:
        model = UserProfile
        fields = (
            "username",
            "email",
            "first_name",
            "last_name",
            "city",
            "state",
            "country",
            "subscription_tier",
            "subscription_status",
            "stripe_customer_id",
            "has_pro_access",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "subscription_tier",
            "subscription_status",
            "stripe_customer_id",
            "created_at",
            "updated_at",
        )

    def update(self, instance, validated_data):
        user_data = validated_data.pop("user", {})
        if user_data:
            for attr, value in user_data.items():
                setattr(instance.user, attr, value)
            instance.user.save(update_fields=list(user_data.keys()))
        return super().update(instance, validated_data)


class _OwnedPrimaryKeyField(serializers.PrimaryKeyRelatedField):
    def get_queryset(self):
        request = self.context.get("request")
        return super().get_queryset().filter(user=request.user)


class PreferencesSerializer(serializers.ModelSerializer):
    """
    Partial updates merge: only the keys sent are changed, and water levels
    are merged per caravan.
    """

    active_vehicle = _OwnedPrimaryKeyField(queryset=Vehicle.objects.all(), required=False, allow_null=True)
    active_caravan = _OwnedPrimaryKeyField(queryset=Caravan.objects.all(), required=False, allow_null=True)
    active_wdh = _OwnedPrimaryKeyField(
        queryset=WeightDistributionHitch.objects.all(), required=False, allow_null=True
    )
    dashboard_layout = serializers.ListField(child=serializers.CharField(), required=False)
    caravan_water_levels = serializers.DictField(
        child=serializers.DictField(child=serializers.FloatField(min_value=0, max_value=100)),
        required=False,
    )
    caravan_default_checklists = serializers.DictField(required=False)

    class Meta:
        model = UserProfile
        fields = (
            "active_vehicle",
            "active_caravan",
            "active_wdh",
            "dashboard_layout",
            "caravan_water_levels",
            "caravan_default_checklists",
        )

    def _check_caravan_keys(self, value):
        request = self.context.get("request")
        owned = {str(pk) for pk in Caravan.objects.filter(user=request.user).values_list("id", flat=True)}
        unknown = [key for key in value if str(key) not in owned]
        if unknown:
            raise serializers.ValidationError(f"Unknown caravan id(s): {', '.join(map(str, unknown))}")

    def validate_caravan_water_levels(self, value):
        self._check_caravan_keys(value)
        return {str(caravan): {str(tank): level for tank, level in levels.items()} for caravan, levels in value.items()}

    def validate_caravan_default_checklists(self, value):
        self._check_caravan_keys(value)
        cleaned = {}
        for caravan_id, checklists in value.items():
            if checklists is None:
                cleaned[str(caravan_id)] = None
                continue
            stages = normalize_checklists(checklists)
            if stages is None:
                raise serializers.ValidationError(f"Invalid checklist for caravan {caravan_id}.")
            cleaned[str(caravan_id)] = stages
        return cleaned

    def update(self, instance, validated_data):
        if "caravan_water_levels" in validated_data:
            merged = dict(instance.caravan_water_levels or {})
            for caravan_id, levels in validated_data.pop("caravan_water_levels").items():
                merged[caravan_id] = {**merged.get(caravan_id, {}), **levels}
            instance.caravan_water_levels = merged
        if "caravan_default_checklists" in validated_data:
            merged = dict(instance.caravan_default_checklists or {})
            for caravan_id, stages in validated_data.pop("caravan_default_checklists").items():
                # null clears a caravan's saved default
                if stages is None:
                    merged.pop(caravan_id, None)
                else:
                    merged[caravan_id] = stages
            instance.caravan_default_checklists = merged
        return super().update(instance, validated_data)


class TaskCategorySerializer(serializers.Serializer):
    category_name = serializers.CharField()
    items = serializers.ListField(child=serializers.CharField(), allow_empty=True)


class GoogleTasksRequestSerializer(serializers.Serializer):
    trip_task_name = serializers.CharField()
    categories = serializers.ListField(child=TaskCategorySerializer(), allow_empty=False)
