"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views) and renders the
``ProductDTO`` objects returned by the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    """Read serializer for the Product resource."""

    id = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        coerce_to_string=False,
        read_only=True,
    )
