from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.models import CompanyProfile
from modules.capacities.constants import CapacityTier
from modules.capacities.models import RouteCapacity
from modules.locations.models import Location, LocationType
from modules.routes.models import Route

LOCATIONS = [
    ("NYC01 Data Center", LocationType.DC, "North America", "New York", "40.712800", "-74.006000"),
    ("MIA01 Cable Landing Station", LocationType.CLS, "North America", "Miami", "25.761700", "-80.191800"),
    ("ATL01 Point of Presence", LocationType.POP, "North America", "Atlanta", "33.749000", "-84.388000"),
    ("LAX01 Data Center", LocationType.DC, "North America", "Los Angeles", "34.052200", "-118.243700"),
    ("SFO01 Cable Landing Station", LocationType.CLS, "North America", "San Francisco", "37.774900", "-122.419400"),
    ("LON01 Data Center", LocationType.DC, "Europe", "London", "51.507400", "-0.127800"),
    ("AMS01 Point of Presence", LocationType.POP, "Europe", "Amsterdam", "52.367600", "4.904100"),
    ("FRA01 Data Center", LocationType.DC, "Europe", "Frankfurt", "50.110900", "8.682100"),
    ("TOK01 Cable Landing Station", LocationType.CLS, "Asia Pacific", "Tokyo", "35.676200", "139.650300"),
    ("SIN01 Data Center", LocationType.DC, "Asia Pacific", "Singapore", "1.352100", "103.819800"),
]

# (name, A end index, B end index, distance in km)
ROUTES = [
    ("NYC-LON-01", 0, 5, "5585.30"),
    ("MIA-LON-01", 1, 5, "7141.80"),
    ("SFO-TOK-01", 4, 8, "8278.30"),
    ("LAX-SIN-01", 3, 9, "17003.20"),
    ("NYC-ATL-01", 0, 2, "1200.50"),
    ("ATL-MIA-01", 2, 1, "974.60"),
    ("LON-AMS-01", 5, 6, "491.20"),
    ("AMS-FRA-01", 6, 7, "577.80"),
    ("TOK-SIN-01", 8, 9, "5315.70"),
]

# tier -> (price range, units range)
TIER_RANGES = {
    CapacityTier.TEN_G: ((1000, 6000), (5, 25)),
    CapacityTier.HUNDRED_G: ((8000, 28000), (2, 12)),
    CapacityTier.FOUR_HUNDRED_G: ((25000, 75000), (1, 6)),
}

ACCOUNTS = [
    (
        "admin@pathdrive.com",
        "admin123",
        "Administrator",
        True,
        ("PathDrive Inc.", "Network Infrastructure Provider", "123 Tech Street, San Francisco, CA 94105"),
    ),
    (
        "user@example.com",
        "user123",
        "Sample User",
        False,
        ("Example Corp", "Technology Company", "456 Business Ave, New York, NY 10001"),
    ),
]


class Command(BaseCommand):
    help = "Seed database with a development route catalog and sample accounts."

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_accounts()
        locations = self._seed_locations()
        routes = self._seed_routes(locations)
        capacities_created = self._seed_capacities(routes)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"locations={len(locations)}, "
                f"routes={len(routes)}, "
                f"capacities={capacities_created}"
            )
        )

    def _seed_accounts(self) -> int:
        User = get_user_model()
        created = 0
        for email, password, name, is_staff, company in ACCOUNTS:
            if User.objects.filter(username=email).exists():
                continue
            user = User.objects.create_user(
                email,
                email=email,
                password=password,
                first_name=name,
                is_staff=is_staff,
            )
            company_name, company_details, billing_address = company
            CompanyProfile.objects.create(
                user=user,
                company_name=company_name,
                company_details=company_details,
                billing_address=billing_address,
            )
            created += 1
        return created

    def _seed_locations(self) -> list[Location]:
        self.stdout.write("Creating locations...")
        locations: list[Location] = []
        for name, type_, region, city, latitude, longitude in LOCATIONS:
            location, _ = Location.objects.get_or_create(
                name=name,
                defaults={
                    "type": type_,
                    "region": region,
                    "city": city,
                    "latitude": Decimal(latitude),
                    "longitude": Decimal(longitude),
                },
            )
            locations.append(location)
        self.stdout.write(self.style.SUCCESS("Creating locations... Done!"))
        return locations

    def _seed_routes(self, locations: list[Location]) -> list[Route]:
        self.stdout.write("Creating routes...")
        routes: list[Route] = []
        for name, a_index, b_index, distance in ROUTES:
            route, _ = Route.objects.get_or_create(
                name=name,
                defaults={
                    "a_end": locations[a_index],
                    "b_end": locations[b_index],
                    "distance": Decimal(distance),
                },
            )
            routes.append(route)
        self.stdout.write(self.style.SUCCESS("Creating routes... Done!"))
        return routes

    def _seed_capacities(self, routes: list[Route]) -> int:
        self.stdout.write("Creating route capacities...")
        created = 0
        for route in routes:
            for tier, (prices, units) in TIER_RANGES.items():
                _, was_created = RouteCapacity.objects.get_or_create(
                    route=route,
                    tier=tier,
                    defaults={
                        "price_per_unit": Decimal(random.randint(*prices)),
                        "available_units": random.randint(*units),
                    },
                )
                created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating route capacities... Done!"))
        return created
