"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Field names follow the public JSON
contract (camelCase).
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.serializers import ProductSerializer

# Upper bound of the order_items.quantity column
MAX_QUANTITY = 2147483647

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class ItemRequestSerializer(serializers.Serializer):
    """Validates the shape of one requested item.

    Positivity is a business rule checked by ``OrderService`` (422); only the
    type and the storable upper bound are enforced here.
    """

    productId = serializers.CharField()
    quantity = serializers.IntegerField(max_value=MAX_QUANTITY)


class OrderRequestSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    items = ItemRequestSerializer(many=True)
    couponCode = serializers.CharField(
        required=False, default="", allow_blank=True, allow_null=True
    )

    def validate_couponCode(self, value):
        return value or ""


# ---------------------------------------------------------------------------
# Output Serializers
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.Serializer):
    productId = serializers.CharField(source="product_id", read_only=True)
    quantity = serializers.IntegerField(read_only=True)


class EnrichedOrderSerializer(serializers.Serializer):
    """Renders an ``EnrichedOrderDTO``: the order and its products."""

    id = serializers.CharField(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    products = ProductSerializer(many=True, read_only=True)
