import decimal

import django.core.validators
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Location",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("POP", "Point of Presence"),
                            ("DC", "Data Center"),
                            ("CLS", "Cable Landing Station"),
                        ],
                        max_length=3,
                    ),
                ),
                ("region", models.CharField(max_length=100)),
                ("city", models.CharField(max_length=100)),
                (
                    "latitude",
                    models.DecimalField(
                        decimal_places=6,
                        max_digits=9,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("-90")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("90")),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.DecimalField(
                        decimal_places=6,
                        max_digits=9,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("-180")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("180")),
                        ],
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "locations",
                "ordering": ["region", "city", "name"],
                "indexes": [
                    models.Index(
                        fields=["is_active", "region", "city"],
                        name="locations_active_geo_idx",
                    )
                ],
            },
        ),
    ]
