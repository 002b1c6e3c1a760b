"""Route DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.capacities.serializers import RouteCapacitySerializer
from modules.locations.serializers import LocationSummarySerializer
from modules.routes.models import Route


class RouteSerializer(serializers.ModelSerializer):
    """Route with both endpoints and its (possibly filtered) capacity tiers."""

    a_end = LocationSummarySerializer(read_only=True)
    b_end = LocationSummarySerializer(read_only=True)
    capacities = RouteCapacitySerializer(many=True, read_only=True)

    class Meta:
        model = Route
        fields = [
            "id",
            "name",
            "a_end",
            "b_end",
            "distance",
            "is_active",
            "is_visible",
            "capacities",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class VisibilitySerializer(serializers.Serializer):
    is_visible = serializers.BooleanField()
