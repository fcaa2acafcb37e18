from django.contrib import admin

from .models import Booking, Document, FavoriteSpot, Journey, PackingList, Trip


class PackingListInline(admin.StackedInline):
    model = PackingList
    extra = 0
    readonly_fields = ("updated_at",)


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "name",
        "start_location_display",
        "end_location_display",
        "planned_start_date",
        "is_completed",
        "journey",
    )
    list_filter = ("is_completed", "is_vehicle_only", "created_at")
    search_fields = (
        "user__username",
        "name",
        "start_location_display",
        "end_location_display",
    )
    readonly_fields = ("created_at", "updated_at")
    inlines = [PackingListInline]


class TripInline(admin.TabularInline):
    model = Trip
    extra = 0
    fields = ("name", "start_location_display", "end_location_display", "is_completed")
    show_change_link = True


@admin.register(Journey)
class JourneyAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "name", "created_at")
    search_fields = ("user__username", "name")
    ordering = ("-created_at",)
    inlines = [TripInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "site_name", "check_in_date", "check_out_date", "assigned_trip", "budgeted_cost")
    list_filter = ("check_in_date",)
    search_fields = ("user__username", "site_name", "confirmation_number")


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "name", "updated_at")
    search_fields = ("user__username", "name")


@admin.register(FavoriteSpot)
class FavoriteSpotAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "name", "latitude", "longitude", "added_date")
    search_fields = ("user__username", "name", "external_id")
