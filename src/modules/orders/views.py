"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ``GenericViewSet``.
Domain exceptions propagate to ``api_exception_handler``; the view only
builds DTOs, resolves the ``Caller`` and renders results.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.capacities.repositories.django_repository import RouteCapacityDjangoRepository
from modules.capacities.services import CapacityService
from modules.core.identity import Caller
from modules.orders.dtos import (
    CreateOrderDTO,
    UpdateOrderDTO,
    UpdatePaymentDTO,
    UpdateStatusDTO,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderListSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.routes.repositories.django_repository import RouteDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through the
    service/repository layer.  Filters and ordering only apply to the
    administrator listing (``/orders/all/``).
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        capacity_repository = RouteCapacityDjangoRepository()
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            capacity_repository=capacity_repository,
            capacity_service=CapacityService(
                repository=capacity_repository,
                route_repository=RouteDjangoRepository(),
            ),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttle scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "all_orders"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def _caller(self, request: Request) -> Caller:
        return Caller.from_user(request.user)

    # ------------------------------------------------------------------
    # Create / Replace
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Body: ``{"items": [{"route_id", "route_capacity_id", "quantity"}]}``.
        """
        dto = CreateOrderDTO.model_validate(request.data)
        order = self._service.create_order(self._caller(request), dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/ (replaces every item of a PENDING order)."""
        dto = UpdateOrderDTO.model_validate(request.data)
        order = self._service.update_order(self._caller(request), str(pk), dto)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ (the caller's own orders, newest first)."""
        orders = self._service.get_user_orders(self._caller(request))
        page = self.paginate_queryset(orders)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=["get"], url_path="all")
    def all_orders(self, request: Request) -> Response:
        """GET /api/v1/orders/all/ (administrators; filterable, paginated)."""
        queryset = self.filter_queryset(self._service.get_all_orders(self._caller(request)))
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(self._caller(request), str(pk))
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/status/ (administrator override)."""
        dto = UpdateStatusDTO.model_validate(request.data)
        order = self._service.update_status(self._caller(request), str(pk), dto)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["patch"])
    def payment(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/payment/

        ``COMPLETED`` settles the order: inventory is taken and a PENDING
        order becomes CONFIRMED.
        """
        dto = UpdatePaymentDTO.model_validate(request.data)
        order = self._service.update_payment_status(self._caller(request), str(pk), dto)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        order = self._service.request_cancellation(self._caller(request), str(pk))
        return Response(OrderSerializer(order).data)
