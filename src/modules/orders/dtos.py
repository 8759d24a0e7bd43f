"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``ItemRequestDTO``: one requested line item.
- ``OrderRequestDTO``: input for order creation.
- ``OrderItemDTO`` / ``OrderDTO``: the persisted order as seen by services.
- ``EnrichedOrderDTO``: output, the order plus the resolved products.

Quantities are deliberately *not* range-checked here: a non-positive
quantity is a business-rule violation reported by ``OrderService``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from pydantic import BaseModel, ConfigDict

from modules.products.dtos import ProductDTO

if TYPE_CHECKING:
    from modules.orders.models import Order


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class ItemRequestDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int


class OrderRequestDTO(BaseModel):
    """Immutable DTO for order creation requests.

    An empty ``coupon_code`` means no coupon was supplied.
    """

    model_config = ConfigDict(frozen=True)

    items: List[ItemRequestDTO]
    coupon_code: str = ""


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int


class OrderDTO(BaseModel):
    """A persisted order."""

    model_config = ConfigDict(frozen=True)

    id: str
    items: List[OrderItemDTO]

    @classmethod
    def from_entity(cls, order: Order) -> OrderDTO:
        """Build a DTO from an Order instance (items are read in position order)."""
        return cls(
            id=order.id,
            items=[
                OrderItemDTO(product_id=item.product_id, quantity=item.quantity)
                for item in order.items.all()
            ],
        )


class EnrichedOrderDTO(BaseModel):
    """The created order plus the catalog records of its products.

    ``products`` keeps the order returned by the catalog lookup, which is not
    necessarily the order of ``items``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    items: List[OrderItemDTO]
    products: List[ProductDTO]

    @classmethod
    def from_order(cls, order: OrderDTO, products: Sequence[ProductDTO]) -> EnrichedOrderDTO:
        return cls(id=order.id, items=list(order.items), products=list(products))
