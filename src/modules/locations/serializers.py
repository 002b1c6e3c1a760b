"""Location DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.locations.models import Location


class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = [
            "id",
            "name",
            "type",
            "region",
            "city",
            "latitude",
            "longitude",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LocationSummarySerializer(serializers.ModelSerializer):
    """Compact endpoint representation nested inside routes."""

    class Meta:
        model = Location
        fields = ["id", "name", "type", "region", "city", "latitude", "longitude"]
        read_only_fields = fields
