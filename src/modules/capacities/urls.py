"""Route capacity URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.capacities.views import CapacityViewSet

router = DefaultRouter(trailing_slash=True)
router.register("capacities", CapacityViewSet, basename="capacity")

urlpatterns = router.urls
