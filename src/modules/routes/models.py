"""Route model: a directed circuit between two locations.

Business rules implemented:
- A end and B end must be different locations (check constraint).
- The (A end, B end) pair is unique among *active* routes (partial unique
  constraint), so a deactivated route does not block re-creating the pair.
- ``is_visible`` gates discovery in the public search; ``is_active`` gates
  whether the route can be ordered at all.  Deactivation is the soft delete.
- Locations are referenced with PROTECT: a location backing a route is never
  removed underneath it.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class Route(BaseModel):
    name = models.CharField(max_length=255)
    a_end = models.ForeignKey(
        "locations.Location",
        on_delete=models.PROTECT,
        related_name="routes_from",
    )
    b_end = models.ForeignKey(
        "locations.Location",
        on_delete=models.PROTECT,
        related_name="routes_to",
    )
    distance = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Route length in kilometres.",
    )
    is_active = models.BooleanField(default=True)
    is_visible = models.BooleanField(default=True)

    class Meta:
        db_table = "routes"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active", "is_visible"], name="routes_searchable_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                check=~models.Q(a_end=models.F("b_end")),
                name="routes_distinct_endpoints",
            ),
            models.UniqueConstraint(
                fields=["a_end", "b_end"],
                condition=models.Q(is_active=True),
                name="routes_active_pair_uniq",
            ),
        ]

    @property
    def is_orderable(self) -> bool:
        return self.is_active

    def __str__(self) -> str:
        return self.name
