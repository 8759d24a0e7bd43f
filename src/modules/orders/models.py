"""Order and OrderItem models.

- An order is written exactly once, by ``OrderService.create_order``, and is
  never updated afterwards.
- Items keep the position they had in the request (``position``).
- ``product_id`` is a plain 12-byte identifier, not a foreign key: the
  catalog is validated before the write, not locked during it.
- ``quantity`` is always strictly positive (database check constraint).
"""

from __future__ import annotations

from django.db import models

from modules.core.identifiers import OBJECT_ID_LENGTH
from modules.core.models import Document


class Order(Document):
    """Order aggregate root."""

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Order {self.id}"


class OrderItem(models.Model):
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    position = models.PositiveIntegerField()
    product_id = models.CharField(max_length=OBJECT_ID_LENGTH, db_index=True)
    quantity = models.PositiveIntegerField()

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_items_quantity_positive",
            ),
            models.UniqueConstraint(
                fields=["order", "position"],
                name="order_items_order_position_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity} x {self.product_id}"
