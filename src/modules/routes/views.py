"""Route API views.

Discovery (list, search, detail, tiers) is open to any authenticated
caller; catalog and pricing administration require staff.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.capacities.dtos import UpsertPricingDTO
from modules.capacities.repositories.django_repository import RouteCapacityDjangoRepository
from modules.capacities.serializers import RouteCapacitySerializer
from modules.capacities.services import CapacityService
from modules.core.identity import Caller
from modules.locations.repositories.django_repository import LocationDjangoRepository
from modules.routes.dtos import CreateRouteDTO, RouteSearchDTO, UpdateRouteDTO
from modules.routes.repositories.django_repository import RouteDjangoRepository
from modules.routes.serializers import RouteSerializer, VisibilitySerializer
from modules.routes.services import RouteCatalogService

ADMIN_ACTIONS = {"admin", "create", "partial_update", "destroy", "visibility", "pricing"}


class RouteViewSet(ViewSet):
    """ViewSet for the route catalog.

    Results are never paginated: the catalog is small and the search
    page shows every match.
    """

    serializer_class = RouteSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        route_repository = RouteDjangoRepository()
        self._service = RouteCatalogService(
            repository=route_repository,
            location_repository=LocationDjangoRepository(),
        )
        self._capacity_service = CapacityService(
            repository=RouteCapacityDjangoRepository(),
            route_repository=route_repository,
        )

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAdminUser()]
        return [IsAuthenticated()]

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/routes/"""
        routes = self._service.list_active_visible_routes()
        return Response(RouteSerializer(routes, many=True).data)

    @action(detail=False, methods=["get"])
    def search(self, request: Request) -> Response:
        """GET /api/v1/routes/search/?a_end_region=...&tier=..."""
        criteria = RouteSearchDTO.model_validate(request.query_params.dict())
        routes = self._service.filter_routes(criteria)
        return Response(RouteSerializer(routes, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/routes/{pk}/"""
        route = self._service.get_route(str(pk), include_hidden=request.user.is_staff)
        return Response(RouteSerializer(route).data)

    @action(detail=True, methods=["get"])
    def capacities(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/routes/{pk}/capacities/"""
        self._service.get_route(str(pk), include_hidden=request.user.is_staff)
        capacities = self._capacity_service.get_capacities_for_route(str(pk))
        return Response(RouteCapacitySerializer(capacities, many=True).data)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def admin(self, request: Request) -> Response:
        """GET /api/v1/routes/admin/ (hidden routes included)."""
        routes = self._service.list_admin_routes()
        return Response(RouteSerializer(routes, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/routes/"""
        dto = CreateRouteDTO.model_validate(request.data)
        route = self._service.create_route(dto)
        return Response(RouteSerializer(route).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/routes/{pk}/"""
        dto = UpdateRouteDTO.model_validate(request.data)
        route = self._service.update_route(str(pk), dto)
        return Response(RouteSerializer(route).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/routes/{pk}/ (deactivates, never deletes)."""
        self._service.deactivate_route(str(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"])
    def visibility(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/routes/{pk}/visibility/"""
        body = VisibilitySerializer(data=request.data)
        body.is_valid(raise_exception=True)
        route = self._service.set_visibility(str(pk), body.validated_data["is_visible"])
        return Response(RouteSerializer(route).data)

    @action(detail=True, methods=["put"])
    def pricing(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/routes/{pk}/pricing/

        Body: ``{"tiers": [{"tier", "price_per_unit", "available_units"}]}``.
        """
        dto = UpsertPricingDTO.model_validate(request.data)
        capacities = self._capacity_service.upsert_pricing(
            Caller.from_user(request.user), str(pk), dto
        )
        return Response(RouteCapacitySerializer(capacities, many=True).data)
