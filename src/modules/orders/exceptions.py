"""Order domain exceptions.

Raised by the Service Layer when business rules are violated and
rendered by ``modules.core.exceptions.api_exception_handler``.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound, Unauthorized, ValidationFailed


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class OrderAccessDenied(Unauthorized):
    """The caller neither owns the order nor holds the required role."""


class InsufficientCapacity(Conflict):
    """Requested quantity exceeds the units available when ordering."""

    code = "INSUFFICIENT_CAPACITY"


class InsufficientCapacityAtSettlement(Conflict):
    """Units ran out between ordering and payment completion."""

    code = "INSUFFICIENT_CAPACITY_AT_SETTLEMENT"


class OrderNotEditable(Conflict):
    """The order's status no longer allows this change."""

    code = "ORDER_NOT_EDITABLE"


class InvalidOrderItem(ValidationFailed):
    """An item references a capacity that does not belong to its route."""


class RouteNotOrderable(ValidationFailed):
    """An item references a deactivated route."""


class InvalidPaymentTransition(ValidationFailed):
    """The payment status cannot move to the requested value."""
