"""Route capacity administration API.

Per-route listing and the bulk pricing upsert live on the route
resource (``/routes/{id}/capacities/`` and ``/routes/{id}/pricing/``);
this viewset covers single-row administration.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.capacities.dtos import CreateCapacityDTO, UpdateCapacityDTO
from modules.capacities.repositories.django_repository import RouteCapacityDjangoRepository
from modules.capacities.serializers import RouteCapacitySerializer
from modules.capacities.services import CapacityService
from modules.core.identity import Caller
from modules.routes.repositories.django_repository import RouteDjangoRepository


def build_capacity_service() -> CapacityService:
    return CapacityService(
        repository=RouteCapacityDjangoRepository(),
        route_repository=RouteDjangoRepository(),
    )


class CapacityViewSet(ViewSet):
    permission_classes = [IsAdminUser]
    serializer_class = RouteCapacitySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_capacity_service()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/capacities/{pk}/"""
        capacity = self._service.get_capacity(str(pk))
        return Response(RouteCapacitySerializer(capacity).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/capacities/"""
        dto = CreateCapacityDTO.model_validate(request.data)
        capacity = self._service.create_capacity(Caller.from_user(request.user), dto)
        return Response(
            RouteCapacitySerializer(capacity).data, status=status.HTTP_201_CREATED
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/capacities/{pk}/"""
        dto = UpdateCapacityDTO.model_validate(request.data)
        capacity = self._service.update_capacity(
            Caller.from_user(request.user), str(pk), dto
        )
        return Response(RouteCapacitySerializer(capacity).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/capacities/{pk}/"""
        self._service.delete_capacity(Caller.from_user(request.user), str(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)
