import copy
import logging

from django.db import transaction
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.mixins import OwnedQuerysetMixin
from accounts.models import UserProfile

from .budget import add_accommodation_cost, remove_accommodation_cost, summarize_budget
from .checklists import default_checklists, reset_completion
from .fuel import estimate_fuel
from .maps_service import MapsConfigurationError, MapsError, NoRouteFound, compute_route
from .models import Booking, Document, FavoriteSpot, Journey, PackingList, Trip
from .serializers import (
    BookingSerializer,
    DirectionsRequestSerializer,
    DocumentSerializer,
    FavoriteSpotSerializer,
    JourneySerializer,
    PackingListUpdateSerializer,
    TripCopySerializer,
    TripSerializer,
)

logger = logging.getLogger(__name__)


class TripListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET /api/trips/
    POST /api/trips/
    A new trip without checklists gets the default set: the caravan's saved
    default, else the vehicle-only or global template.
    """

    model = Trip
    serializer_class = TripSerializer

    def perform_create(self, serializer):
        profile = UserProfile.for_user(self.request.user)
        data = serializer.validated_data
        is_vehicle_only = data.get("is_vehicle_only", False)
        extra = {}

        caravan_id = data.get("caravan_id_at_creation")
        if caravan_id is None and not is_vehicle_only and profile.active_caravan_id:
            caravan = profile.active_caravan
            caravan_id = caravan.id
            extra["caravan_id_at_creation"] = caravan.id
            extra["caravan_name_at_creation"] = f"{caravan.make} {caravan.model}"

        if not data.get("checklists"):
            caravan_default = (
                profile.caravan_default_checklists.get(str(caravan_id)) if caravan_id else None
            )
            extra["checklists"] = default_checklists(is_vehicle_only, caravan_default)

        route = data.get("route_details")
        if not data.get("fuel_estimate") and isinstance(route, dict):
            distance = (route.get("distance") or {}).get("value")
            extra["fuel_estimate"] = estimate_fuel(distance, data["fuel_efficiency"], data["fuel_price"])

        trip = serializer.save(user=self.request.user, **extra)
        logger.info(f"Trip {trip.id} created for user {self.request.user.username}")


class TripDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/trips/<id>/
    Deleting a trip also deletes its packing list; bookings are unassigned.
    """

    model = Trip
    serializer_class = TripSerializer


class DirectionsView(APIView):
    """
    POST /api/trips/directions/
    Route between two addresses, plus a fuel estimate when fuel efficiency
    and price are supplied.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = DirectionsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            route = compute_route(
                data["origin"],
                data["destination"],
                vehicle_height=data.get("vehicle_height"),
                axle_count=data.get("axle_count"),
                avoid_tolls=data.get("avoid_tolls", False),
            )
        except MapsConfigurationError as exc:
            logger.error(f"Directions unavailable: {exc}")
            return Response({"detail": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except NoRouteFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except MapsError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        fuel_estimate = None
        if data.get("fuel_efficiency") and data.get("fuel_price"):
            fuel_estimate = estimate_fuel(
                route["distance"]["value"], data["fuel_efficiency"], data["fuel_price"]
            )
        return Response({"route": route, "fuel_estimate": fuel_estimate})


class TripCopyView(APIView):
    """
    POST /api/trips/copy/   { "source_trip_id", "destination_journey_id" }
    Creates "Copy of: <name>" in the journey. Budget is kept; expenses,
    completion, planned dates and checklist ticks are reset.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = TripCopySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            source = Trip.objects.filter(id=data["source_trip_id"], user=request.user).first()
            if source is None:
                return Response({"detail": "Source trip not found."}, status=status.HTTP_404_NOT_FOUND)
            journey = Journey.objects.filter(id=data["destination_journey_id"], user=request.user).first()
            if journey is None:
                return Response(
                    {"detail": "Destination journey not found."}, status=status.HTTP_404_NOT_FOUND
                )

            new_trip = Trip.objects.create(
                user=request.user,
                journey=journey,
                name=f"Copy of: {source.name}",
                start_location_display=source.start_location_display,
                end_location_display=source.end_location_display,
                fuel_efficiency=source.fuel_efficiency,
                fuel_price=source.fuel_price,
                route_details=copy.deepcopy(source.route_details),
                fuel_estimate=copy.deepcopy(source.fuel_estimate),
                notes=source.notes,
                is_vehicle_only=source.is_vehicle_only,
                checklists=reset_completion(source.checklists),
                budget=copy.deepcopy(source.budget),
                occupants=copy.deepcopy(source.occupants),
                caravan_id_at_creation=source.caravan_id_at_creation,
                caravan_name_at_creation=source.caravan_name_at_creation,
                expenses=[],
                is_completed=False,
                planned_start_date=None,
                planned_end_date=None,
            )

        logger.info(f"Trip {source.id} copied to {new_trip.id} in journey {journey.id}")
        out = TripSerializer(new_trip, context={"request": request})
        return Response(out.data, status=status.HTTP_201_CREATED)


class TripBudgetView(APIView):
    """
    GET /api/trips/<trip_id>/budget/
    Budgeted / spent / remaining per category and in total.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, trip_id: int, *args, **kwargs):
        trip = Trip.objects.filter(id=trip_id, user=request.user).first()
        if trip is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response({"trip": trip.id, **summarize_budget(trip.budget, trip.expenses)})


class PackingListView(APIView):
    """
    GET    /api/trips/<trip_id>/packing-list/
    PUT    /api/trips/<trip_id>/packing-list/   { "categories": [...] }
    DELETE /api/trips/<trip_id>/packing-list/
    """

    permission_classes = [permissions.IsAuthenticated]

    def _get_trip(self, request, trip_id):
        return Trip.objects.filter(id=trip_id, user=request.user).first()

    def get(self, request, trip_id: int, *args, **kwargs):
        trip = self._get_trip(request, trip_id)
        if trip is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        packing = PackingList.objects.filter(trip=trip).first()
        return Response({"trip": trip.id, "categories": packing.categories if packing else []})

    def put(self, request, trip_id: int, *args, **kwargs):
        trip = self._get_trip(request, trip_id)
        if trip is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        serializer = PackingListUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        categories = serializer.validated_data["categories"]
        PackingList.objects.update_or_create(trip=trip, defaults={"categories": categories})
        return Response({"trip": trip.id, "categories": categories})

    def delete(self, request, trip_id: int, *args, **kwargs):
        trip = self._get_trip(request, trip_id)
        if trip is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        PackingList.objects.filter(trip=trip).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class JourneyListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/trips/journeys/   (newest first)
    """

    model = Journey
    serializer_class = JourneySerializer


class JourneyDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    Deleting a journey leaves its trips in place, just ungrouped.
    """

    model = Journey
    serializer_class = JourneySerializer


def _adjust_accommodation(trip_id, cost, remove=False):
    if not trip_id or not cost or cost <= 0:
        return
    trip = Trip.objects.select_for_update().filter(id=trip_id).first()
    if trip is None:
        return
    if remove:
        trip.budget = remove_accommodation_cost(trip.budget, cost)
    else:
        trip.budget = add_accommodation_cost(trip.budget, cost)
    trip.save(update_fields=["budget", "updated_at"])


class BookingListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/trips/bookings/
    A booking's cost is carried in its trip's "Accommodation" budget category.
    """

    model = Booking
    serializer_class = BookingSerializer

    def perform_create(self, serializer):
        with transaction.atomic():
            booking = serializer.save(user=self.request.user)
            _adjust_accommodation(booking.assigned_trip_id, booking.budgeted_cost)


class BookingDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = Booking
    serializer_class = BookingSerializer

    def perform_update(self, serializer):
        old_trip_id = serializer.instance.assigned_trip_id
        old_cost = serializer.instance.budgeted_cost
        with transaction.atomic():
            _adjust_accommodation(old_trip_id, old_cost, remove=True)
            booking = serializer.save()
            _adjust_accommodation(booking.assigned_trip_id, booking.budgeted_cost)

    def perform_destroy(self, instance):
        with transaction.atomic():
            _adjust_accommodation(instance.assigned_trip_id, instance.budgeted_cost, remove=True)
            instance.delete()


class DocumentListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/trips/documents/   (most recently updated first)
    """

    model = Document
    serializer_class = DocumentSerializer


class DocumentDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = Document
    serializer_class = DocumentSerializer


class FavoriteSpotListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/trips/favorite-spots/   (newest first)
    """

    model = FavoriteSpot
    serializer_class = FavoriteSpotSerializer


class FavoriteSpotDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = FavoriteSpot
    serializer_class = FavoriteSpotSerializer
