"""Django ORM implementation of the RouteCapacity repository.

The decrement is a single conditional ``UPDATE``:

    UPDATE route_capacities
       SET available_units = available_units - q
     WHERE id = :id AND available_units >= q

so two concurrent settlements over the same row are serialized by the
database and the loser sees zero affected rows instead of a negative
stock.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from modules.capacities.models import RouteCapacity
from modules.capacities.repositories.interfaces import IRouteCapacityRepository

logger = structlog.get_logger(__name__)


class RouteCapacityDjangoRepository(IRouteCapacityRepository):
    """Concrete RouteCapacity repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[RouteCapacity]:
        try:
            return RouteCapacity.objects.select_related("route").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[RouteCapacity]:
        queryset = RouteCapacity.objects.ordered_by_tier()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: RouteCapacity) -> RouteCapacity:
        entity.save()
        logger.info("capacity.saved", capacity_id=str(entity.id))
        return entity

    def list_for_route(self, route_id: str) -> List[RouteCapacity]:
        return list(RouteCapacity.objects.filter(route_id=route_id).ordered_by_tier())

    def get_by_route_and_tier(self, route_id: str, tier: str) -> Optional[RouteCapacity]:
        return RouteCapacity.objects.filter(route_id=route_id, tier=tier).first()

    @transaction.atomic
    def upsert(
        self, route_id: str, tier: str, price_per_unit: Decimal, available_units: int
    ) -> Tuple[RouteCapacity, bool]:
        return RouteCapacity.objects.update_or_create(
            route_id=route_id,
            tier=tier,
            defaults={
                "price_per_unit": price_per_unit,
                "available_units": available_units,
            },
        )

    def decrement(self, id: str, quantity: int) -> bool:
        updated = RouteCapacity.objects.filter(
            id=id, available_units__gte=quantity
        ).update(available_units=F("available_units") - quantity)
        return updated == 1

    def delete(self, entity: RouteCapacity) -> None:
        entity.delete()
