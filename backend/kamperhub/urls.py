"""
URL configuration for the KamperHub backend.

- /api/accounts/ - Registration, sessions, profile, preferences, Google Tasks
- /api/vehicles/ - Vehicles, caravans, WDHs, inventory, compliance, service log
- /api/trips/    - Trips, journeys, bookings, directions, packing lists
- /api/billing/  - Stripe checkout, customer portal, webhook
"""

from django.contrib import admin
from django.urls import include, path


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/accounts/", include("accounts.urls", namespace="accounts")),
    path("api/vehicles/", include("vehicles.urls", namespace="vehicles")),
    path("api/trips/", include("trips.urls", namespace="trips")),
    path("api/billing/", include("billing.urls", namespace="billing")),
]
