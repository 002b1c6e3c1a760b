"""Capacity inventory service layer (Use Cases).

Business rules enforced:
- Pricing writes are absolute: ``upsert_pricing`` sets price and units per
  tier, so replaying the same payload leaves the same rows.
- ``available_units`` only ever shrinks through ``decrement_availability``,
  which refuses (never clamps) a decrement that would go negative.
- Pricing is an administrator operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction
from django.db.models import ProtectedError

from modules.capacities.exceptions import (
    CapacityAlreadyExists,
    CapacityInUse,
    DuplicateTier,
    InsufficientAvailability,
    RouteCapacityNotFound,
)
from modules.capacities.models import RouteCapacity
from modules.core.exceptions import Unauthorized, ValidationFailed
from modules.routes.exceptions import RouteNotFound

if TYPE_CHECKING:
    from modules.capacities.dtos import (
        CreateCapacityDTO,
        UpdateCapacityDTO,
        UpsertPricingDTO,
    )
    from modules.capacities.repositories.interfaces import IRouteCapacityRepository
    from modules.core.identity import Caller
    from modules.routes.models import Route
    from modules.routes.repositories.interfaces import IRouteRepository

logger = structlog.get_logger(__name__)


class CapacityService:
    """Application service for the per-route capacity inventory."""

    def __init__(
        self,
        repository: IRouteCapacityRepository,
        route_repository: IRouteRepository,
    ) -> None:
        self._repo = repository
        self._route_repo = route_repository

    def _require_route(self, route_id: str) -> Route:
        route = self._route_repo.get_by_id(route_id)
        if not route:
            raise RouteNotFound(f"Route {route_id} not found.")
        return route

    @staticmethod
    def _require_admin(caller: Caller) -> None:
        if not caller.is_admin:
            raise Unauthorized("Administrator role required.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_capacities_for_route(self, route_id: str) -> List[RouteCapacity]:
        """Return the route's tiers, 10G first.

        Raises:
            RouteNotFound: if the route does not exist.
        """
        self._require_route(route_id)
        return self._repo.list_for_route(route_id)

    def get_capacity(self, id: str) -> RouteCapacity:
        capacity = self._repo.get_by_id(id)
        if not capacity:
            raise RouteCapacityNotFound(f"Route capacity {id} not found.")
        return capacity

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def upsert_pricing(
        self, caller: Caller, route_id: str, dto: UpsertPricingDTO
    ) -> List[RouteCapacity]:
        """Create or overwrite price and stock for every supplied tier.

        Tiers not mentioned in the payload are left as they are.

        Raises:
            Unauthorized: caller is not an administrator.
            RouteNotFound: if the route does not exist.
            DuplicateTier: the payload names a tier twice.
        """
        self._require_admin(caller)
        self._require_route(route_id)

        tiers = [entry.tier for entry in dto.tiers]
        if len(tiers) != len(set(tiers)):
            raise DuplicateTier("Each tier may appear only once per pricing update.")

        log = logger.bind(route_id=str(route_id), user_id=caller.user_id)
        for entry in dto.tiers:
            capacity, created = self._repo.upsert(
                route_id=route_id,
                tier=entry.tier,
                price_per_unit=entry.price_per_unit,
                available_units=entry.available_units,
            )
            log.info(
                "capacity.pricing_set",
                capacity_id=str(capacity.id),
                tier=str(entry.tier),
                created=created,
            )
        return self._repo.list_for_route(route_id)

    def decrement_availability(self, route_capacity_id: str, quantity: int) -> None:
        """Atomically remove *quantity* units from a capacity row.

        Must run inside the caller's transaction so a failure rolls back
        everything done before it.

        Raises:
            ValidationFailed: quantity is not positive.
            RouteCapacityNotFound: the row does not exist.
            InsufficientAvailability: fewer than *quantity* units remain.
        """
        if quantity < 1:
            raise ValidationFailed("Quantity must be at least 1.")

        log = logger.bind(capacity_id=str(route_capacity_id), quantity=quantity)
        if self._repo.decrement(route_capacity_id, quantity):
            log.info("capacity.decremented")
            return

        capacity = self._repo.get_by_id(route_capacity_id)
        if not capacity:
            raise RouteCapacityNotFound(f"Route capacity {route_capacity_id} not found.")
        log.warning("capacity.insufficient", available=capacity.available_units)
        raise InsufficientAvailability(
            f"Route capacity {route_capacity_id}: requested {quantity}, "
            f"available {capacity.available_units}."
        )

    @transaction.atomic
    def create_capacity(self, caller: Caller, dto: CreateCapacityDTO) -> RouteCapacity:
        """Add a single tier to a route.

        Raises:
            Unauthorized: caller is not an administrator.
            RouteNotFound: if the route does not exist.
            CapacityAlreadyExists: the route already has this tier.
        """
        self._require_admin(caller)
        route = self._require_route(str(dto.route_id))
        if self._repo.get_by_route_and_tier(str(route.id), dto.tier):
            raise CapacityAlreadyExists(
                f"Route {route.id} already has a {dto.tier} capacity."
            )
        capacity = RouteCapacity(
            route=route,
            tier=dto.tier,
            price_per_unit=dto.price_per_unit,
            available_units=dto.available_units,
        )
        capacity = self._repo.save(capacity)
        logger.info(
            "capacity.created", capacity_id=str(capacity.id), route_id=str(route.id)
        )
        return capacity

    @transaction.atomic
    def update_capacity(
        self, caller: Caller, id: str, dto: UpdateCapacityDTO
    ) -> RouteCapacity:
        self._require_admin(caller)
        capacity = self.get_capacity(id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(capacity, field, value)
        capacity = self._repo.save(capacity)
        logger.info("capacity.updated", capacity_id=str(id))
        return capacity

    @transaction.atomic
    def delete_capacity(self, caller: Caller, id: str) -> None:
        """Remove a tier from its route.

        Raises:
            CapacityInUse: order items still reference the row.
        """
        self._require_admin(caller)
        capacity = self.get_capacity(id)
        try:
            self._repo.delete(capacity)
        except ProtectedError as exc:
            raise CapacityInUse(
                f"Route capacity {id} is referenced by existing orders."
            ) from exc
        logger.info("capacity.deleted", capacity_id=str(id))
