"""RouteCapacity: the sellable inventory unit of a route.

Business rules implemented:
- One row per (route, tier) (unique constraint).
- ``price_per_unit`` must be greater than zero.
- ``available_units`` can never go negative: ``PositiveIntegerField`` plus a
  database check constraint, and the decrement is a conditional UPDATE.
- ``updated_at`` tracks the last pricing change; availability decrements
  are bulk updates and leave it untouched.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.capacities.constants import TIER_RANK, CapacityTier
from modules.core.models import BaseModel


class RouteCapacityQuerySet(models.QuerySet):
    def with_tier_rank(self) -> RouteCapacityQuerySet:
        return self.annotate(
            tier_rank=models.Case(
                *[
                    models.When(tier=tier, then=models.Value(rank))
                    for tier, rank in TIER_RANK.items()
                ],
                output_field=models.IntegerField(),
            )
        )

    def ordered_by_tier(self) -> RouteCapacityQuerySet:
        """Order TEN_G < HUNDRED_G < FOUR_HUNDRED_G."""
        return self.with_tier_rank().order_by("tier_rank")

    def available(self) -> RouteCapacityQuerySet:
        return self.filter(available_units__gt=0)


class RouteCapacity(BaseModel):
    route = models.ForeignKey(
        "routes.Route",
        on_delete=models.CASCADE,
        related_name="capacities",
    )
    tier = models.CharField(max_length=20, choices=CapacityTier.choices)
    price_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    available_units = models.PositiveIntegerField(default=0)

    objects = RouteCapacityQuerySet.as_manager()

    class Meta:
        db_table = "route_capacities"
        verbose_name_plural = "route capacities"
        constraints = [
            models.UniqueConstraint(
                fields=["route", "tier"],
                name="route_capacities_route_tier_uniq",
            ),
            models.CheckConstraint(
                check=models.Q(available_units__gte=0),
                name="route_capacities_units_non_negative",
            ),
            models.CheckConstraint(
                check=models.Q(price_per_unit__gt=0),
                name="route_capacities_price_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.route_id} {self.get_tier_display()} ({self.available_units} left)"
