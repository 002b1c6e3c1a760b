"""Capacity inventory exceptions."""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound, ValidationFailed


class RouteCapacityNotFound(NotFound):
    """The requested route capacity does not exist."""


class CapacityAlreadyExists(Conflict):
    """The route already sells this tier."""


class CapacityInUse(Conflict):
    """Order items still reference the capacity, so it cannot be deleted."""


class DuplicateTier(ValidationFailed):
    """The same tier appears more than once in a pricing payload."""


class InsufficientAvailability(Conflict):
    """A decrement would drive ``available_units`` below zero.

    Only raised while settling a payment, hence the settlement code.
    """

    code = "INSUFFICIENT_CAPACITY_AT_SETTLEMENT"
