"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  Repositories
hand ``ProductDTO`` instances to services so that the order flow never
touches Django models directly.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.products.models import Product


class ProductDTO(BaseModel):
    """Read-only view of a catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    name: str
    price: Decimal

    @classmethod
    def from_entity(cls, product: Product) -> ProductDTO:
        return cls(
            id=product.id,
            category=product.category,
            name=product.name,
            price=product.price,
        )
