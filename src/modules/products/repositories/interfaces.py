"""Catalog repository interface.

The order flow depends only on ``find_products``; the product endpoints use
``list_products`` and ``get_product``.  Implementations receive the request
context on every call and must honour its cancellation/deadline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Mapping, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from modules.core.context import RequestContext
    from modules.products.dtos import ProductDTO


class ICatalogRepository(ABC):
    """Repository contract for the product catalog (read-only)."""

    @abstractmethod
    def find_products(
        self, ctx: RequestContext, ids: Sequence[str]
    ) -> Tuple[List[str], List[ProductDTO]]:
        """Resolve a batch of identifiers in a single round-trip.

        Returns ``(missing, found)``: the requested identifiers absent from
        the catalog, and the products that exist.  Duplicated identifiers
        are resolved once.

        Raises:
            ServiceError: ``BAD_REQUEST`` for a malformed identifier,
                ``INTERNAL`` for store failures.
        """

    @abstractmethod
    def get_product(self, ctx: RequestContext, id: str) -> ProductDTO:
        """Retrieve one product.

        Raises:
            ServiceError: ``BAD_REQUEST`` for a malformed identifier,
                ``NOT_FOUND`` when absent.
        """

    @abstractmethod
    def list_products(
        self,
        ctx: RequestContext,
        page: int,
        per_page: int,
        filters: Optional[Mapping[str, str]] = None,
    ) -> List[ProductDTO]:
        """Return one page of *per_page* products.

        Pages start at 1; a page below 1 is treated as the first page and a
        page past the end is empty.
        """
