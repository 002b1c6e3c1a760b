"""Location repository interface.

Extends ``IRepository[Location]`` with the distinct-value projections
that feed the cascading region -> city -> location pickers.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.locations.models import Location


class ILocationRepository(IRepository["Location"]):
    """Repository contract for Location."""

    @abstractmethod
    def list_active(self) -> QuerySet:
        """Active locations ordered by region, city, name (lazy, filterable)."""

    @abstractmethod
    def distinct_regions(self) -> List[str]:
        """Distinct regions of active locations, alphabetical."""

    @abstractmethod
    def distinct_cities(self, region: str) -> List[str]:
        """Distinct cities of active locations in *region*, alphabetical."""

    @abstractmethod
    def list_by_region_and_city(self, region: str, city: str) -> List[Location]:
        """Active locations in *region* / *city*, ordered by name."""
