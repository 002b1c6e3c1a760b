"""Route repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.routes.dtos import RouteSearchDTO
    from modules.routes.models import Route


class IRouteRepository(IRepository["Route"]):
    """Repository contract for Route.

    Every list method returns routes ordered by name with endpoints and
    capacities loaded.
    """

    @abstractmethod
    def list_active_visible(self) -> List[Route]:
        """Active, visible routes with all of their capacity tiers."""

    @abstractmethod
    def list_active(self) -> List[Route]:
        """Active routes, hidden ones included."""

    @abstractmethod
    def search(self, criteria: RouteSearchDTO) -> List[Route]:
        """Active, visible routes matching *criteria* that still have stock.

        The nested capacities only contain tiers with units left (and only
        the requested tier when one is given); routes left with no tier are
        dropped.
        """

    @abstractmethod
    def active_pair_exists(
        self, a_end_id: str, b_end_id: str, exclude_id: Optional[str] = None
    ) -> bool:
        """Whether an active route already connects *a_end_id* to *b_end_id*."""
