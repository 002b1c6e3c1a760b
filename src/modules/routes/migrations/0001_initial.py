import decimal

import django.core.validators
import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("locations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Route",
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
                    "distance",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Route length in kilometres.",
                        max_digits=10,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0"))
                        ],
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("is_visible", models.BooleanField(default=True)),
                (
                    "a_end",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="routes_from",
                        to="locations.location",
                    ),
                ),
                (
                    "b_end",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="routes_to",
                        to="locations.location",
                    ),
                ),
            ],
            options={
                "db_table": "routes",
                "ordering": ["name"],
                "indexes": [
                    models.Index(
                        fields=["is_active", "is_visible"],
                        name="routes_searchable_idx",
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        check=models.Q(("a_end", models.F("b_end")), _negated=True),
                        name="routes_distinct_endpoints",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("is_active", True)),
                        fields=("a_end", "b_end"),
                        name="routes_active_pair_uniq",
                    ),
                ],
            },
        ),
    ]
