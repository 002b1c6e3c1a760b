"""Location API views.

Reads are open to any authenticated caller and only ever show active
locations; writes require an administrator.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import serializers, status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.locations.dtos import CreateLocationDTO, UpdateLocationDTO
from modules.locations.filters import LocationFilter
from modules.locations.repositories.django_repository import LocationDjangoRepository
from modules.locations.serializers import LocationSerializer
from modules.locations.services import LocationService

ADMIN_ACTIONS = {"create", "partial_update", "destroy"}


class RegionQuerySerializer(serializers.Serializer):
    region = serializers.CharField()


class RegionCityQuerySerializer(RegionQuerySerializer):
    city = serializers.CharField()


class LocationViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Location look-ups and administration."""

    serializer_class = LocationSerializer
    filterset_class = LocationFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = LocationService(repository=LocationDjangoRepository())

    def get_queryset(self):
        return self._service.list_active_locations()

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAdminUser()]
        return [IsAuthenticated()]

    # ------------------------------------------------------------------
    # Cascading search projections
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def regions(self, request: Request) -> Response:
        """GET /api/v1/locations/regions/"""
        return Response(self._service.get_all_regions())

    @action(detail=False, methods=["get"])
    def cities(self, request: Request) -> Response:
        """GET /api/v1/locations/cities/?region=..."""
        query = RegionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(self._service.get_cities_by_region(query.validated_data["region"]))

    @action(detail=False, methods=["get"], url_path="by-city")
    def by_city(self, request: Request) -> Response:
        """GET /api/v1/locations/by-city/?region=...&city=..."""
        query = RegionCityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        locations = self._service.get_locations_by_region_and_city(
            query.validated_data["region"], query.validated_data["city"]
        )
        return Response(LocationSerializer(locations, many=True).data)

    # ------------------------------------------------------------------
    # Retrieve / Create / Update / Deactivate
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/locations/{pk}/"""
        location = self._service.get_location(str(pk))
        return Response(LocationSerializer(location).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/locations/"""
        dto = CreateLocationDTO.model_validate(request.data)
        location = self._service.create_location(dto)
        return Response(LocationSerializer(location).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/locations/{pk}/"""
        dto = UpdateLocationDTO.model_validate(request.data)
        location = self._service.update_location(str(pk), dto)
        return Response(LocationSerializer(location).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/locations/{pk}/ (deactivates, never deletes)."""
        self._service.deactivate_location(str(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)
