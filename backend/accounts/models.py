import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


TIER_FREE = "free"
TIER_PRO = "pro"
TIER_TRIALING = "trialing"
SUBSCRIPTION_TIERS = [TIER_FREE, TIER_PRO, TIER_TRIALING]

OAUTH_STATE_TTL = timedelta(minutes=10)


class UserProfile(models.Model):
    """
    Per-user profile, subscription state and app preferences.
    Created alongside the user at registration (or lazily via ``for_user``).
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile"
    )
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")

    subscription_tier = models.CharField(
        max_length=20, choices=[(t, t) for t in SUBSCRIPTION_TIERS], default=TIER_FREE
    )
    subscription_status = models.CharField(max_length=40, blank=True, default="")
    stripe_customer_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    stripe_subscription_id = models.CharField(max_length=255, null=True, blank=True)

    # Preferences. Deleting the referenced record clears the preference.
    active_vehicle = models.ForeignKey(
        "vehicles.Vehicle", on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    active_caravan = models.ForeignKey(
        "vehicles.Caravan", on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    active_wdh = models.ForeignKey(
        "vehicles.WeightDistributionHitch",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    dashboard_layout = models.JSONField(default=list, blank=True)
    # { "<caravan id>": { "<tank id>": percent } }
    caravan_water_levels = models.JSONField(default=dict, blank=True)
    # { "<caravan id>": [ { "title", "items": [...] } ] }
    caravan_default_checklists = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Profile of {self.user}"

    @classmethod
    def for_user(cls, user) -> "UserProfile":
        profile, _ = cls.objects.get_or_create(user=user)
        return profile

    @property
    def has_pro_access(self) -> bool:
        return self.subscription_tier in (TIER_PRO, TIER_TRIALING)


class OAuthState(models.Model):
    """
    Single-use anti-CSRF token for the Google OAuth round trip.
    """

    state = models.CharField(max_length=64, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="oauth_states"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    @classmethod
    def issue(cls, user) -> "OAuthState":
        return cls.objects.create(user=user, state=secrets.token_hex(16))

    @property
    def is_expired(self) -> bool:
        return timezone.now() - self.created_at > OAUTH_STATE_TTL


class GoogleCredential(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="google_credential"
    )
    access_token = models.TextField()
    refresh_token = models.TextField()
    expiry = models.DateTimeField(null=True, blank=True)
    scopes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - convenience only
        return f"Google credential for {self.user}"
