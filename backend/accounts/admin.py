from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User

from .models import GoogleCredential, OAuthState, UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    fk_name = "user"
    fields = (
        "city",
        "state",
        "country",
        "subscription_tier",
        "subscription_status",
        "stripe_customer_id",
        "stripe_subscription_id",
    )


# Unregister the default User admin so the profile shows inline
admin.site.unregister(User)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "first_name", "last_name", "subscription_tier", "is_active", "date_joined")
    list_filter = ("is_staff", "is_active", "profile__subscription_tier", "date_joined")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("-date_joined",)
    inlines = [UserProfileInline]

    @admin.display(description="Tier", ordering="profile__subscription_tier")
    def subscription_tier(self, obj):
        profile = getattr(obj, "profile", None)
        return profile.subscription_tier if profile else "-"


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    """Subscription tier can be changed here by staff (e.g. comp accounts)."""

    list_display = ("id", "user", "subscription_tier", "subscription_status", "stripe_customer_id", "updated_at")
    list_filter = ("subscription_tier",)
    search_fields = ("user__username", "user__email", "stripe_customer_id")
    readonly_fields = ("created_at", "updated_at")


@admin.register(GoogleCredential)
class GoogleCredentialAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "expiry", "updated_at")
    search_fields = ("user__username",)
    exclude = ("access_token", "refresh_token")


@admin.register(OAuthState)
class OAuthStateAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "created_at")
    readonly_fields = ("created_at",)
    date_hierarchy = "created_at"
