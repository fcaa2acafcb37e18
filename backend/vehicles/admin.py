from django.contrib import admin

from .models import (
    Caravan,
    CaravanInventory,
    FuelLogEntry,
    MaintenanceTask,
    Vehicle,
    WeightDistributionHitch,
)


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "year", "make", "model", "gvm", "gcm", "max_tow_capacity")
    list_filter = ("make",)
    search_fields = ("user__username", "make", "model")
    readonly_fields = ("created_at", "updated_at")


class CaravanInventoryInline(admin.StackedInline):
    model = CaravanInventory
    extra = 0
    readonly_fields = ("updated_at",)


@admin.register(Caravan)
class CaravanAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "type", "year", "make", "model", "tare_mass", "atm", "gtm")
    list_filter = ("type",)
    search_fields = ("user__username", "make", "model")
    readonly_fields = ("created_at", "updated_at")
    inlines = [CaravanInventoryInline]


@admin.register(WeightDistributionHitch)
class WeightDistributionHitchAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "name", "type", "max_capacity_kg", "min_capacity_kg")
    search_fields = ("user__username", "name", "type")


@admin.register(FuelLogEntry)
class FuelLogEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "vehicle", "date", "odometer", "litres", "total_cost")
    list_filter = ("date",)
    search_fields = ("user__username", "location")
    ordering = ("-date",)


@admin.register(MaintenanceTask)
class MaintenanceTaskAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "asset_name", "task_name", "category", "due_date", "is_completed")
    list_filter = ("category", "is_completed")
    search_fields = ("user__username", "asset_name", "task_name")
