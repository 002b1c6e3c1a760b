"""Order DRF serializers (read side).

Writes go through the Pydantic DTOs in ``dtos.py``; these serializers
only render orders, including the route and tier behind every line.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.capacities.models import RouteCapacity
from modules.locations.serializers import LocationSummarySerializer
from modules.orders.models import Order, OrderItem
from modules.routes.models import Route


class OrderedRouteSerializer(serializers.ModelSerializer):
    a_end = LocationSummarySerializer(read_only=True)
    b_end = LocationSummarySerializer(read_only=True)

    class Meta:
        model = Route
        fields = ["id", "name", "a_end", "b_end", "distance"]
        read_only_fields = fields


class OrderedCapacitySerializer(serializers.ModelSerializer):
    tier_label = serializers.CharField(source="get_tier_display", read_only=True)

    class Meta:
        model = RouteCapacity
        fields = ["id", "tier", "tier_label"]
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with the price snapshot taken when it was written."""

    route = OrderedRouteSerializer(read_only=True)
    route_capacity = OrderedCapacitySerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "route",
            "route_capacity",
            "quantity",
            "unit_price",
            "total_price",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_id",
            "status",
            "payment_status",
            "total_amount",
            "currency",
            "payment_reference",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Order row for the dashboards: items with route ends and tier, no payment reference."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_id",
            "status",
            "payment_status",
            "total_amount",
            "currency",
            "created_at",
            "items",
        ]
        read_only_fields = fields
