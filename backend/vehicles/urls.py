from django.urls import path

from .views import (
    CaravanDetailView,
    CaravanInventoryView,
    CaravanListCreateView,
    ComplianceView,
    FuelLogDetailView,
    FuelLogListCreateView,
    MaintenanceTaskDetailView,
    MaintenanceTaskListCreateView,
    VehicleDetailView,
    VehicleListCreateView,
    WdhDetailView,
    WdhListCreateView,
)


app_name = "vehicles"


urlpatterns = [
    path("", VehicleListCreateView.as_view(), name="vehicle-list"),
    path("<int:pk>/", VehicleDetailView.as_view(), name="vehicle-detail"),
    path("caravans/", CaravanListCreateView.as_view(), name="caravan-list"),
    path("caravans/<int:pk>/", CaravanDetailView.as_view(), name="caravan-detail"),
    path("caravans/<int:caravan_id>/inventory/", CaravanInventoryView.as_view(), name="caravan-inventory"),
    path("wdhs/", WdhListCreateView.as_view(), name="wdh-list"),
    path("wdhs/<int:pk>/", WdhDetailView.as_view(), name="wdh-detail"),
    path("compliance/", ComplianceView.as_view(), name="compliance"),
    path("fuel-logs/", FuelLogListCreateView.as_view(), name="fuel-log-list"),
    path("fuel-logs/<int:pk>/", FuelLogDetailView.as_view(), name="fuel-log-detail"),
    path("maintenance/", MaintenanceTaskListCreateView.as_view(), name="maintenance-list"),
    path("maintenance/<int:pk>/", MaintenanceTaskDetailView.as_view(), name="maintenance-detail"),
]
