"""Route capacity DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.capacities.models import RouteCapacity


class RouteCapacitySerializer(serializers.ModelSerializer):
    tier_label = serializers.CharField(source="get_tier_display", read_only=True)

    class Meta:
        model = RouteCapacity
        fields = [
            "id",
            "route_id",
            "tier",
            "tier_label",
            "price_per_unit",
            "available_units",
            "updated_at",
        ]
        read_only_fields = fields
