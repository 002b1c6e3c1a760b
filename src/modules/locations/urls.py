"""Location URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.locations.views import LocationViewSet

router = DefaultRouter(trailing_slash=True)
router.register("locations", LocationViewSet, basename="location")

urlpatterns = router.urls
