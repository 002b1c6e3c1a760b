"""Django ORM implementation of the Route repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Exists, OuterRef, Prefetch, QuerySet

from modules.capacities.models import RouteCapacity
from modules.routes.dtos import RouteSearchDTO
from modules.routes.models import Route
from modules.routes.repositories.interfaces import IRouteRepository

logger = structlog.get_logger(__name__)

# Search criterion -> ORM look-up on the route's endpoints.
_ENDPOINT_LOOKUPS = {
    "a_end_region": "a_end__region",
    "a_end_city": "a_end__city",
    "a_end_id": "a_end_id",
    "b_end_region": "b_end__region",
    "b_end_city": "b_end__city",
    "b_end_id": "b_end_id",
}


def _with_relations(queryset: QuerySet, capacities: QuerySet | None = None) -> QuerySet:
    if capacities is None:
        capacities = RouteCapacity.objects.all()
    return queryset.select_related("a_end", "b_end").prefetch_related(
        Prefetch("capacities", queryset=capacities.ordered_by_tier())
    )


class RouteDjangoRepository(IRouteRepository):
    """Concrete Route repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Route]:
        try:
            return _with_relations(Route.objects.filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Route]:
        queryset = Route.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(_with_relations(queryset).order_by("name"))

    @transaction.atomic
    def save(self, entity: Route) -> Route:
        entity.save()
        logger.info("route.saved", route_id=str(entity.id))
        return entity

    def list_active_visible(self) -> List[Route]:
        return self.list({"is_active": True, "is_visible": True})

    def list_active(self) -> List[Route]:
        return self.list({"is_active": True})

    def search(self, criteria: RouteSearchDTO) -> List[Route]:
        lookups = {
            orm_lookup: getattr(criteria, field)
            for field, orm_lookup in _ENDPOINT_LOOKUPS.items()
            if getattr(criteria, field) is not None
        }
        qualifying = RouteCapacity.objects.available()
        if criteria.tier is not None:
            qualifying = qualifying.filter(tier=criteria.tier)

        queryset = (
            Route.objects.filter(is_active=True, is_visible=True, **lookups)
            .filter(Exists(qualifying.filter(route=OuterRef("pk"))))
            .order_by("name")
        )
        routes = list(_with_relations(queryset, capacities=qualifying))
        logger.info(
            "route.search",
            criteria=criteria.model_dump(mode="json", exclude_none=True),
            count=len(routes),
        )
        return routes

    def active_pair_exists(
        self, a_end_id: str, b_end_id: str, exclude_id: Optional[str] = None
    ) -> bool:
        queryset = Route.objects.filter(is_active=True, a_end_id=a_end_id, b_end_id=b_end_id)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()
