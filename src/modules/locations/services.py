"""Location service layer (Use Cases).

Read projections feed the cascading region -> city -> location pickers
of the route search; write operations are administrative.  Deactivation
is the only form of deletion.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.locations.exceptions import LocationNotFound
from modules.locations.models import Location

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.locations.dtos import CreateLocationDTO, UpdateLocationDTO
    from modules.locations.repositories.interfaces import ILocationRepository

logger = structlog.get_logger(__name__)


class LocationService:
    """Application service for Location use-cases."""

    def __init__(self, repository: ILocationRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_active_locations(self) -> QuerySet:
        """Active locations, region then city then name, as a lazy queryset for API filtering."""
        return self._repo.list_active()

    def get_location(self, id: str) -> Location:
        """Retrieve a single location by ID.

        Raises:
            LocationNotFound: if the location does not exist.
        """
        location = self._repo.get_by_id(id)
        if not location:
            raise LocationNotFound(f"Location {id} not found.")
        return location

    def get_all_regions(self) -> List[str]:
        return self._repo.distinct_regions()

    def get_cities_by_region(self, region: str) -> List[str]:
        return self._repo.distinct_cities(region)

    def get_locations_by_region_and_city(self, region: str, city: str) -> List[Location]:
        return self._repo.list_by_region_and_city(region, city)

    # ------------------------------------------------------------------
    # Commands (administrator)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_location(self, dto: CreateLocationDTO) -> Location:
        location = Location(
            name=dto.name,
            type=dto.type,
            region=dto.region,
            city=dto.city,
            latitude=dto.latitude,
            longitude=dto.longitude,
        )
        location = self._repo.save(location)
        logger.info("location.created", location_id=str(location.id))
        return location

    @transaction.atomic
    def update_location(self, id: str, dto: UpdateLocationDTO) -> Location:
        """Apply the supplied fields to an existing location.

        Raises:
            LocationNotFound: if the location does not exist.
        """
        location = self.get_location(id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(location, field, value)
        location = self._repo.save(location)
        logger.info("location.updated", location_id=str(id))
        return location

    @transaction.atomic
    def deactivate_location(self, id: str) -> Location:
        """Soft-delete: hide the location from every search projection.

        Routes already referencing it keep their foreign key.

        Raises:
            LocationNotFound: if the location does not exist.
        """
        location = self.get_location(id)
        if location.is_active:
            location.is_active = False
            location = self._repo.save(location)
            logger.info("location.deactivated", location_id=str(id))
        return location
