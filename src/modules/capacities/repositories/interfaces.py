"""Route capacity repository interface."""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.capacities.models import RouteCapacity


class IRouteCapacityRepository(IRepository["RouteCapacity"]):
    """Repository contract for RouteCapacity."""

    @abstractmethod
    def list_for_route(self, route_id: str) -> List[RouteCapacity]:
        """Rows of *route_id* ordered by tier rank."""

    @abstractmethod
    def get_by_route_and_tier(self, route_id: str, tier: str) -> Optional[RouteCapacity]:
        """The (route, tier) row or ``None``."""

    @abstractmethod
    def upsert(
        self, route_id: str, tier: str, price_per_unit: Decimal, available_units: int
    ) -> Tuple[RouteCapacity, bool]:
        """Set price and units of the (route, tier) row, creating it if needed.

        Returns the row and whether it was created.
        """

    @abstractmethod
    def decrement(self, id: str, quantity: int) -> bool:
        """Subtract *quantity* only if enough units remain.

        Returns ``False`` (and changes nothing) when fewer than *quantity*
        units are available.
        """

    @abstractmethod
    def delete(self, entity: RouteCapacity) -> None:
        """Hard-delete a capacity row."""
