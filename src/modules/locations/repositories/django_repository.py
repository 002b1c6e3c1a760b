"""Django ORM implementation of the Location repository.

Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and the Service Layer decides how a missing entity
surfaces to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.locations.models import Location
from modules.locations.repositories.interfaces import ILocationRepository

logger = structlog.get_logger(__name__)


class LocationDjangoRepository(ILocationRepository):
    """Concrete Location repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Location]:
        try:
            return Location.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Location]:
        queryset = Location.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Location) -> Location:
        entity.save()
        logger.info("location.saved", location_id=str(entity.id))
        return entity

    # ------------------------------------------------------------------
    # Search projections (active locations only)
    # ------------------------------------------------------------------

    def list_active(self) -> QuerySet:
        return Location.objects.filter(is_active=True).order_by("region", "city", "name")

    def distinct_regions(self) -> List[str]:
        return list(
            Location.objects.filter(is_active=True)
            .order_by("region")
            .values_list("region", flat=True)
            .distinct()
        )

    def distinct_cities(self, region: str) -> List[str]:
        return list(
            Location.objects.filter(is_active=True, region=region)
            .order_by("city")
            .values_list("city", flat=True)
            .distinct()
        )

    def list_by_region_and_city(self, region: str, city: str) -> List[Location]:
        return list(
            Location.objects.filter(is_active=True, region=region, city=city).order_by(
                "name"
            )
        )
