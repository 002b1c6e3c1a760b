import decimal

import django.core.validators
import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("routes", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="RouteCapacity",
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
                (
                    "tier",
                    models.CharField(
                        choices=[
                            ("TEN_G", "10G"),
                            ("HUNDRED_G", "100G"),
                            ("FOUR_HUNDRED_G", "400G"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "price_per_unit",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0.01"))
                        ],
                    ),
                ),
                ("available_units", models.PositiveIntegerField(default=0)),
                (
                    "route",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="capacities",
                        to="routes.route",
                    ),
                ),
            ],
            options={
                "db_table": "route_capacities",
                "verbose_name_plural": "route capacities",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("route", "tier"),
                        name="route_capacities_route_tier_uniq",
                    ),
                    models.CheckConstraint(
                        check=models.Q(("available_units__gte", 0)),
                        name="route_capacities_units_non_negative",
                    ),
                    models.CheckConstraint(
                        check=models.Q(("price_per_unit__gt", 0)),
                        name="route_capacities_price_positive",
                    ),
                ],
            },
        ),
    ]
