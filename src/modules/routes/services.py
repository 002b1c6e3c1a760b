"""Route catalog service layer (Use Cases).

Ordinary callers only ever see active, visible routes; administrators
manage the full catalog.  Deactivation is the only form of deletion.

Business rules enforced:
- A end and B end exist and differ.
- At most one active route per (A end, B end) pair, checked on create
  and whenever an update leaves the route active.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.routes.exceptions import (
    EndpointNotFound,
    InvalidRouteEndpoints,
    RouteAlreadyExists,
    RouteNotFound,
)
from modules.routes.models import Route

if TYPE_CHECKING:
    from modules.locations.models import Location
    from modules.locations.repositories.interfaces import ILocationRepository
    from modules.routes.dtos import CreateRouteDTO, RouteSearchDTO, UpdateRouteDTO
    from modules.routes.repositories.interfaces import IRouteRepository

logger = structlog.get_logger(__name__)


class RouteCatalogService:
    """Application service for Route use-cases."""

    def __init__(
        self,
        repository: IRouteRepository,
        location_repository: ILocationRepository,
    ) -> None:
        self._repo = repository
        self._location_repo = location_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_active_visible_routes(self) -> List[Route]:
        return self._repo.list_active_visible()

    def filter_routes(self, criteria: RouteSearchDTO) -> List[Route]:
        return self._repo.search(criteria)

    def list_admin_routes(self) -> List[Route]:
        return self._repo.list_active()

    def get_route(self, id: str, include_hidden: bool = False) -> Route:
        """Retrieve a single route.

        Without ``include_hidden`` an inactive or invisible route is
        reported as missing.

        Raises:
            RouteNotFound: if the route does not exist (or is hidden).
        """
        route = self._repo.get_by_id(id)
        if not route:
            raise RouteNotFound(f"Route {id} not found.")
        if not include_hidden and not (route.is_active and route.is_visible):
            raise RouteNotFound(f"Route {id} not found.")
        return route

    # ------------------------------------------------------------------
    # Commands (administrator)
    # ------------------------------------------------------------------

    def _require_endpoint(self, location_id: str) -> Location:
        location = self._location_repo.get_by_id(location_id)
        if not location:
            raise EndpointNotFound(f"Location {location_id} not found.")
        return location

    def _ensure_pair_free(self, a_end_id: str, b_end_id: str, exclude_id: str | None = None) -> None:
        if self._repo.active_pair_exists(a_end_id, b_end_id, exclude_id=exclude_id):
            logger.warning("route.duplicate_pair", a_end_id=a_end_id, b_end_id=b_end_id)
            raise RouteAlreadyExists(
                f"An active route from {a_end_id} to {b_end_id} already exists."
            )

    @transaction.atomic
    def create_route(self, dto: CreateRouteDTO) -> Route:
        """Create a route between two existing locations.

        Raises:
            EndpointNotFound: either endpoint does not exist.
            RouteAlreadyExists: an active route already links the pair.
        """
        a_end = self._require_endpoint(str(dto.a_end_id))
        b_end = self._require_endpoint(str(dto.b_end_id))
        self._ensure_pair_free(str(a_end.id), str(b_end.id))

        route = Route(
            name=dto.name,
            a_end=a_end,
            b_end=b_end,
            distance=dto.distance,
            is_visible=dto.is_visible,
        )
        route = self._repo.save(route)
        logger.info("route.created", route_id=str(route.id))
        return self._repo.get_by_id(str(route.id)) or route

    @transaction.atomic
    def update_route(self, id: str, dto: UpdateRouteDTO) -> Route:
        """Apply the supplied fields; ``is_active=True`` reactivates.

        Raises:
            RouteNotFound: if the route does not exist.
            EndpointNotFound: a new endpoint does not exist.
            InvalidRouteEndpoints: the update would make both ends equal.
            RouteAlreadyExists: the resulting active pair is taken.
        """
        route = self.get_route(id, include_hidden=True)
        changes = dto.model_dump(exclude_none=True)

        if "a_end_id" in changes:
            changes["a_end"] = self._require_endpoint(str(changes.pop("a_end_id")))
        if "b_end_id" in changes:
            changes["b_end"] = self._require_endpoint(str(changes.pop("b_end_id")))
        for field, value in changes.items():
            setattr(route, field, value)

        if route.a_end_id == route.b_end_id:
            raise InvalidRouteEndpoints("A end and B end must be different locations.")
        if route.is_active:
            self._ensure_pair_free(str(route.a_end_id), str(route.b_end_id), exclude_id=str(route.id))

        self._repo.save(route)
        logger.info("route.updated", route_id=str(id), fields=sorted(changes))
        return self.get_route(id, include_hidden=True)

    @transaction.atomic
    def set_visibility(self, id: str, is_visible: bool) -> Route:
        route = self.get_route(id, include_hidden=True)
        route.is_visible = is_visible
        self._repo.save(route)
        logger.info("route.visibility_changed", route_id=str(id), is_visible=is_visible)
        return route

    @transaction.atomic
    def deactivate_route(self, id: str) -> Route:
        """Soft-delete: the route disappears from search and can no longer be ordered."""
        route = self.get_route(id, include_hidden=True)
        if route.is_active:
            route.is_active = False
            self._repo.save(route)
            logger.info("route.deactivated", route_id=str(id))
        return route
