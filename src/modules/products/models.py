"""Product model: the authoritative catalog.

The catalog is read-only from the order flow's point of view.  ``name`` is
indexed for look-ups by name.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import Document


class Product(Document):
    """Catalog entry with a 12-byte hex identifier."""

    category = models.CharField(max_length=100)
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = "products"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["name"], name="products_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"
