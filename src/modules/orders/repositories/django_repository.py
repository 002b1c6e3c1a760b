"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` to ensure
the Order aggregate (Order + OrderItems) is persisted atomically.

Concurrency control on status and payment updates uses
``select_for_update()`` (no ``version`` field exists on the model).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_ITEM_RELATIONS = (
    "items__route__a_end",
    "items__route__b_end",
    "items__route_capacity",
)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create / replace (aggregate root + children)
    # ------------------------------------------------------------------

    @staticmethod
    def _write_items(order: Order, items: List[Dict[str, Any]]) -> Decimal:
        total = Decimal("0.00")
        for item_data in items:
            item = OrderItem(
                order=order,
                route_id=item_data["route_id"],
                route_capacity_id=item_data["route_capacity_id"],
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
            )
            item.save()
            total += item.total_price
        return total

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(user_id=data["user_id"], currency=data["currency"])
        order.save()

        items = data.get("items", [])
        order.total_amount = self._write_items(order, items)
        order.save(update_fields=["total_amount"])

        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    @transaction.atomic
    def replace_items(self, order: Order, items: List[Dict[str, Any]]) -> Order:
        deleted, _ = OrderItem.objects.filter(order=order).delete()
        order.total_amount = self._write_items(order, items)
        order.save(update_fields=["total_amount"])

        logger.info(
            "order.items_replaced",
            order_id=str(order.id),
            removed=deleted,
            added=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def query(self) -> QuerySet:
        return (
            Order.objects.select_related("user")
            .prefetch_related(*_ITEM_RELATIONS)
            .order_by("-created_at", "-id")
        )

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded items, routes and tiers.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("user")
                .prefetch_related(*_ITEM_RELATIONS)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Lock the order row (SELECT FOR UPDATE) for the rest of the transaction."""
        try:
            return (
                Order.objects.select_for_update(of=("self",))
                .select_related("user")
                .prefetch_related(*_ITEM_RELATIONS)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = self.query()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_user(self, user_id: int) -> List[Order]:
        return self.list({"user_id": user_id})

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity
