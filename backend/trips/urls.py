from django.urls import path

from .views import (
    BookingDetailView,
    BookingListCreateView,
    DirectionsView,
    DocumentDetailView,
    DocumentListCreateView,
    FavoriteSpotDetailView,
    FavoriteSpotListCreateView,
    JourneyDetailView,
    JourneyListCreateView,
    PackingListView,
    TripBudgetView,
    TripCopyView,
    TripDetailView,
    TripListCreateView,
)


app_name = "trips"


urlpatterns = [
    path("", TripListCreateView.as_view(), name="trip-list"),
    path("<int:pk>/", TripDetailView.as_view(), name="trip-detail"),
    path("<int:trip_id>/budget/", TripBudgetView.as_view(), name="trip-budget"),
    path("<int:trip_id>/packing-list/", PackingListView.as_view(), name="packing-list"),
    path("directions/", DirectionsView.as_view(), name="directions"),
    path("copy/", TripCopyView.as_view(), name="copy"),
    path("journeys/", JourneyListCreateView.as_view(), name="journey-list"),
    path("journeys/<int:pk>/", JourneyDetailView.as_view(), name="journey-detail"),
    path("bookings/", BookingListCreateView.as_view(), name="booking-list"),
    path("bookings/<int:pk>/", BookingDetailView.as_view(), name="booking-detail"),
    path("documents/", DocumentListCreateView.as_view(), name="document-list"),
    path("documents/<int:pk>/", DocumentDetailView.as_view(), name="document-detail"),
    path("favorite-spots/", FavoriteSpotListCreateView.as_view(), name="favorite-spot-list"),
    path("favorite-spots/<int:pk>/", FavoriteSpotDetailView.as_view(), name="favorite-spot-detail"),
]
