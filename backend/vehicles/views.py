import logging

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.mixins import OwnedQuerysetMixin
from accounts.models import UserProfile
from trips.models import Trip

from .models import (
    Caravan,
    CaravanInventory,
    FuelLogEntry,
    MaintenanceTask,
    Vehicle,
    WeightDistributionHitch,
)
from .serializers import (
    CaravanSerializer,
    ComplianceRequestSerializer,
    FuelLogEntrySerializer,
    InventoryUpdateSerializer,
    MaintenanceTaskSerializer,
    VehicleSerializer,
    WeightDistributionHitchSerializer,
)
from .weights import calculate_compliance

logger = logging.getLogger(__name__)


class VehicleListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/vehicles/
    """

    model = Vehicle
    serializer_class = VehicleSerializer


class VehicleDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = Vehicle
    serializer_class = VehicleSerializer


class CaravanListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/vehicles/caravans/
    """

    model = Caravan
    serializer_class = CaravanSerializer


class CaravanDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = Caravan
    serializer_class = CaravanSerializer

    def perform_destroy(self, instance):
        # Water levels and default checklists are keyed by caravan id.
        profile = UserProfile.for_user(self.request.user)
        key = str(instance.id)
        if key in profile.caravan_water_levels or key in profile.caravan_default_checklists:
            profile.caravan_water_levels.pop(key, None)
            profile.caravan_default_checklists.pop(key, None)
            profile.save(update_fields=["caravan_water_levels", "caravan_default_checklists", "updated_at"])
        instance.delete()


class WdhListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/vehicles/wdhs/
    """

    model = WeightDistributionHitch
    serializer_class = WeightDistributionHitchSerializer


class WdhDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = WeightDistributionHitch
    serializer_class = WeightDistributionHitchSerializer


class CaravanInventoryView(APIView):
    """
    GET /api/vehicles/caravans/<caravan_id>/inventory/
    PUT /api/vehicles/caravans/<caravan_id>/inventory/   { "items": [...] }
    The item list is replaced as a whole.
    """

    permission_classes = [permissions.IsAuthenticated]

    def _get_caravan(self, request, caravan_id):
        return Caravan.objects.filter(id=caravan_id, user=request.user).first()

    def get(self, request, caravan_id: int, *args, **kwargs):
        caravan = self._get_caravan(request, caravan_id)
        if caravan is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        inventory = CaravanInventory.objects.filter(caravan=caravan).first()
        return Response({"caravan": caravan.id, "items": inventory.items if inventory else []})

    def put(self, request, caravan_id: int, *args, **kwargs):
        caravan = self._get_caravan(request, caravan_id)
        if caravan is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        serializer = InventoryUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        items = serializer.validated_data["items"]
        CaravanInventory.objects.update_or_create(caravan=caravan, defaults={"items": items})
        logger.info(f"Inventory for caravan {caravan.id} replaced with {len(items)} item(s)")
        return Response({"caravan": caravan.id, "items": items})


def _as_dict(instance, fields):
    return {name: getattr(instance, name) for name in fields}


_CARAVAN_FIELDS = ("tare_mass", "atm", "gtm", "max_towball_download", "axle_group_rating", "water_tanks")
_VEHICLE_FIELDS = (
    "gvm",
    "gcm",
    "max_tow_capacity",
    "max_towball_mass",
    "kerb_weight",
    "front_axle_limit",
    "rear_axle_limit",
)
_WDH_FIELDS = ("max_capacity_kg", "min_capacity_kg")


class ComplianceView(APIView):
    """
    GET /api/vehicles/compliance/?caravan=<id>&vehicle=<id>&wdh=<id>&trip=<id>
    Weight compliance for stored records. Anything not given falls back to
    the user's active preferences (the active WDH, else the caravan's own); inventory and
    water levels are the stored ones; occupants come from the trip if given.

    POST /api/vehicles/compliance/
    Same calculation over a posted payload; nothing is read or stored.
    """

    permission_classes = [permissions.IsAuthenticated]

    def _lookup(self, request, model, param):
        raw = request.query_params.get(param)
        if raw in (None, ""):
            return None, False
        try:
            pk = int(raw)
        except (TypeError, ValueError):
            return None, True
        obj = model.objects.filter(id=pk, user=request.user).first()
        return obj, obj is None

    def get(self, request, *args, **kwargs):
        profile = UserProfile.for_user(request.user)

        caravan, missing = self._lookup(request, Caravan, "caravan")
        if missing:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        caravan = caravan or profile.active_caravan
        if caravan is None:
            return Response(
                {"detail": "No caravan selected. Pass ?caravan=<id> or set an active caravan."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        vehicle, missing = self._lookup(request, Vehicle, "vehicle")
        if missing:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        vehicle = vehicle or profile.active_vehicle

        wdh, missing = self._lookup(request, WeightDistributionHitch, "wdh")
        if missing:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        wdh = wdh or profile.active_wdh or caravan.wdh

        trip, missing = self._lookup(request, Trip, "trip")
        if missing:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)

        inventory = CaravanInventory.objects.filter(caravan=caravan).first()
        result = calculate_compliance(
            caravan=_as_dict(caravan, _CARAVAN_FIELDS),
            vehicle=_as_dict(vehicle, _VEHICLE_FIELDS) if vehicle else None,
            wdh=_as_dict(wdh, _WDH_FIELDS) if wdh else None,
            inventory=inventory.items if inventory else [],
            water_levels=profile.caravan_water_levels.get(str(caravan.id)),
            occupants=trip.occupants if trip else [],
        )
        result["caravan_id"] = caravan.id
        result["vehicle_id"] = vehicle.id if vehicle else None
        result["wdh_id"] = wdh.id if wdh else None
        return Response(result)

    def post(self, request, *args, **kwargs):
        serializer = ComplianceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = calculate_compliance(
            caravan=data["caravan"],
            vehicle=data.get("vehicle"),
            wdh=data.get("wdh"),
            inventory=data.get("inventory", []),
            water_levels=data.get("water_levels"),
            occupants=data.get("occupants", []),
            measured_towball_download=data.get("measured_towball_download"),
        )
        return Response(result)


class FuelLogListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/vehicles/fuel-logs/   (?vehicle=<id> filters the list)
    """

    model = FuelLogEntry
    serializer_class = FuelLogEntrySerializer

    def get_queryset(self):
        qs = super().get_queryset()
        vehicle_id = self.request.query_params.get("vehicle")
        if vehicle_id and vehicle_id.isdigit():
            qs = qs.filter(vehicle_id=int(vehicle_id))
        return qs


class FuelLogDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = FuelLogEntry
    serializer_class = FuelLogEntrySerializer


class MaintenanceTaskListCreateView(OwnedQuerysetMixin, generics.ListCreateAPIView):
    """
    GET/POST /api/vehicles/maintenance/   (?asset=<id> filters the list)
    """

    model = MaintenanceTask
    serializer_class = MaintenanceTaskSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        asset_id = self.request.query_params.get("asset")
        if asset_id:
            qs = qs.filter(asset_id=asset_id)
        return qs


class MaintenanceTaskDetailView(OwnedQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    model = MaintenanceTask
    serializer_class = MaintenanceTaskSerializer
