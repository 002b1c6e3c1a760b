"""Order repository interface.

Extends ``IRepository[Order]`` with the aggregate writes (order plus
items in one go, full item replacement) and the row lock used by every
state change.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Mutations must
    be atomic and must keep ``total_amount`` equal to the item totals.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` must include ``user_id``, ``currency`` and ``items`` (list
        of dicts with ``route_id``, ``route_capacity_id``, ``quantity``,
        ``unit_price``).
        """

    @abstractmethod
    def replace_items(self, order: Order, items: List[Dict[str, Any]]) -> Order:
        """Delete every item of *order*, insert *items* and recompute the total."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock until commit."""

    @abstractmethod
    def list_for_user(self, user_id: int) -> List[Order]:
        """Orders placed by *user_id*, newest first."""

    @abstractmethod
    def query(self) -> QuerySet:
        """Lazy queryset over all orders for API-level filtering and pagination."""
