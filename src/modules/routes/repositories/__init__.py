"""Route repositories package."""

from modules.routes.repositories.django_repository import RouteDjangoRepository
from modules.routes.repositories.interfaces import IRouteRepository

__all__ = ["IRouteRepository", "RouteDjangoRepository"]
