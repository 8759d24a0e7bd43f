"""Product service layer (Use Cases).

Read-only access to the catalog for the product endpoints, delegating
persistence to the injected ``ICatalogRepository``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Mapping, Optional

import structlog

if TYPE_CHECKING:
    from modules.core.context import RequestContext
    from modules.products.dtos import ProductDTO
    from modules.products.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)

DEFAULT_PER_PAGE = 20


class ProductService:
    """Application service for catalog queries.

    Receives an ``ICatalogRepository`` via constructor injection (DIP).
    """

    def __init__(
        self, repository: ICatalogRepository, per_page: int = DEFAULT_PER_PAGE
    ) -> None:
        self._repo = repository
        self._per_page = per_page

    def list_products(
        self,
        ctx: RequestContext,
        page: int = 1,
        filters: Optional[Mapping[str, str]] = None,
    ) -> List[ProductDTO]:
        """Return one page of products, optionally filtered."""
        return self._repo.list_products(ctx, page, self._per_page, filters)

    def get_product(self, ctx: RequestContext, id: str) -> ProductDTO:
        """Retrieve a single product by ID.

        Raises:
            ServiceError: ``BAD_REQUEST`` for a malformed ID, ``NOT_FOUND``
                if the product does not exist.
        """
        product = self._repo.get_product(ctx, id)
        logger.info("product.retrieved", product_id=product.id)
        return product
