"""Django ORM implementation of the catalog repository.

Satisfies ``ICatalogRepository`` using Django's QuerySet API.  Identifiers
are validated before any query is issued; each query runs inside
``store_call`` so cancellation and driver failures map onto ``ServiceError``.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple

import structlog

from modules.core.context import RequestContext
from modules.core.exceptions import ErrorKind, ServiceError
from modules.core.identifiers import parse_object_id
from modules.core.repositories.guards import store_call
from modules.products.dtos import ProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(ICatalogRepository):
    """Concrete catalog repository backed by Django ORM."""

    def find_products(
        self, ctx: RequestContext, ids: Sequence[str]
    ) -> Tuple[List[str], List[ProductDTO]]:
        requested = list(dict.fromkeys(parse_object_id(id) for id in ids))

        with store_call(ctx, "products query"):
            products = list(Product.objects.filter(id__in=requested))

        found = {product.id for product in products}
        missing = [id for id in requested if id not in found]
        logger.debug(
            "products.resolved",
            requested=len(requested),
            found=len(found),
            missing=len(missing),
        )
        return missing, [ProductDTO.from_entity(p) for p in products]

    def get_product(self, ctx: RequestContext, id: str) -> ProductDTO:
        product_id = parse_object_id(id)

        with store_call(ctx, "product query"):
            product = Product.objects.filter(id=product_id).first()

        if product is None:
            raise ServiceError(ErrorKind.NOT_FOUND, f"product {product_id} not found")
        return ProductDTO.from_entity(product)

    def list_products(
        self,
        ctx: RequestContext,
        page: int,
        per_page: int,
        filters: Optional[Mapping[str, str]] = None,
    ) -> List[ProductDTO]:
        page = max(page, 1)
        queryset = Product.objects.all()
        if filters:
            queryset = ProductFilter(data=filters, queryset=queryset).qs

        offset = (page - 1) * per_page
        with store_call(ctx, "products listing"):
            products = list(queryset[offset : offset + per_page])

        return [ProductDTO.from_entity(p) for p in products]
