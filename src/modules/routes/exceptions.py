"""Route domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound, ValidationFailed


class RouteNotFound(NotFound):
    """The requested route does not exist."""


class EndpointNotFound(NotFound):
    """The A end or B end location of a route does not exist."""


class RouteAlreadyExists(Conflict):
    """An active route already connects the same A end and B end."""


class InvalidRouteEndpoints(ValidationFailed):
    """A end and B end are the same location."""
