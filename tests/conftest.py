from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.capacities.constants import CapacityTier
from modules.capacities.models import RouteCapacity
from modules.capacities.repositories.django_repository import RouteCapacityDjangoRepository
from modules.capacities.services import CapacityService
from modules.core.identity import Caller
from modules.locations.models import Location, LocationType
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.routes.models import Route
from modules.routes.repositories.django_repository import RouteDjangoRepository

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Accounts and callers
# ---------------------------------------------------------------------------


@pytest.fixture()
def user():
    return User.objects.create_user(
        username="buyer@example.com", email="buyer@example.com", password="testpass123"
    )


@pytest.fixture()
def other_user():
    return User.objects.create_user(
        username="other@example.com", email="other@example.com", password="testpass123"
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="admin@example.com",
        email="admin@example.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture()
def caller(user):
    return Caller.from_user(user)


@pytest.fixture()
def other_caller(other_user):
    return Caller.from_user(other_user)


@pytest.fixture()
def admin_caller(admin_user):
    return Caller.from_user(admin_user)


@pytest.fixture()
def auth_client(user):
    """APIClient force-authenticated as an ordinary buyer."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    """APIClient force-authenticated as a staff user."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_location():
    def _make(name, region, city, type=LocationType.DC, is_active=True):
        return Location.objects.create(
            name=name,
            type=type,
            region=region,
            city=city,
            latitude=Decimal("10.000000"),
            longitude=Decimal("20.000000"),
            is_active=is_active,
        )

    return _make


@pytest.fixture()
def nyc(make_location):
    return make_location("NYC01 Data Center", "North America", "New York")


@pytest.fixture()
def lon(make_location):
    return make_location("LON01 Data Center", "Europe", "London")


@pytest.fixture()
def route(nyc, lon):
    return Route.objects.create(name="NYC-LON-01", a_end=nyc, b_end=lon)


@pytest.fixture()
def ten_g(route):
    return RouteCapacity.objects.create(
        route=route,
        tier=CapacityTier.TEN_G,
        price_per_unit=Decimal("100.00"),
        available_units=5,
    )


@pytest.fixture()
def hundred_g(route):
    return RouteCapacity.objects.create(
        route=route,
        tier=CapacityTier.HUNDRED_G,
        price_per_unit=Decimal("800.00"),
        available_units=2,
    )


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture()
def capacity_service():
    return CapacityService(
        repository=RouteCapacityDjangoRepository(),
        route_repository=RouteDjangoRepository(),
    )


@pytest.fixture()
def order_service(capacity_service):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        capacity_repository=RouteCapacityDjangoRepository(),
        capacity_service=capacity_service,
    )


@pytest.fixture()
def order_items(route, ten_g):
    """A single TEN_G line of three units."""
    return [{"route_id": route.id, "route_capacity_id": ten_g.id, "quantity": 3}]
