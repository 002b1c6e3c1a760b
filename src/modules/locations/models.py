"""Location model: a network endpoint a route can terminate on.

Business rules implemented:
- Type is one of POP (point of presence), DC (data center) or
  CLS (cable landing station).
- Locations are never hard-deleted; deactivation (``is_active=False``)
  hides them from every search projection.
- Latitude and longitude are bounded to valid WGS84 ranges.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class LocationType(models.TextChoices):
    POP = "POP", "Point of Presence"
    DC = "DC", "Data Center"
    CLS = "CLS", "Cable Landing Station"


class Location(BaseModel):
    """Network endpoint (A end or B end of a route)."""

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=3, choices=LocationType.choices)
    region = models.CharField(max_length=100)
    city = models.CharField(max_length=100)
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        validators=[
            MinValueValidator(Decimal("-90")),
            MaxValueValidator(Decimal("90")),
        ],
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        validators=[
            MinValueValidator(Decimal("-180")),
            MaxValueValidator(Decimal("180")),
        ],
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "locations"
        ordering = ["region", "city", "name"]
        indexes = [
            models.Index(
                fields=["is_active", "region", "city"],
                name="locations_active_geo_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.type}, {self.city})"
