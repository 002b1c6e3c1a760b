"""Route capacity repositories package."""

from modules.capacities.repositories.django_repository import RouteCapacityDjangoRepository
from modules.capacities.repositories.interfaces import IRouteCapacityRepository

__all__ = ["IRouteCapacityRepository", "RouteCapacityDjangoRepository"]
