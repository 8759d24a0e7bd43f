"""In-memory catalog repository.

Used by service tests and local experiments that must run without a
database.  Behaves like ``ProductDjangoRepository``: identifiers are
validated, the context is checked, and results come back in identifier
order.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from modules.core.context import RequestContext
from modules.core.exceptions import ErrorKind, ServiceError
from modules.core.identifiers import parse_object_id
from modules.products.dtos import ProductDTO
from modules.products.repositories.interfaces import ICatalogRepository


class InMemoryCatalogRepository(ICatalogRepository):
    def __init__(self, products: Iterable[ProductDTO] = ()) -> None:
        self._products: Dict[str, ProductDTO] = {p.id: p for p in products}
        self.find_calls: List[List[str]] = []

    def add(self, product: ProductDTO) -> None:
        self._products[product.id] = product

    def find_products(
        self, ctx: RequestContext, ids: Sequence[str]
    ) -> Tuple[List[str], List[ProductDTO]]:
        self.find_calls.append(list(ids))
        requested = list(dict.fromkeys(parse_object_id(id) for id in ids))
        ctx.check()

        found = [self._products[id] for id in sorted(requested) if id in self._products]
        missing = [id for id in requested if id not in self._products]
        return missing, found

    def get_product(self, ctx: RequestContext, id: str) -> ProductDTO:
        product_id = parse_object_id(id)
        ctx.check()
        try:
            return self._products[product_id]
        except KeyError:
            raise ServiceError(
                ErrorKind.NOT_FOUND, f"product {product_id} not found"
            ) from None

    def list_products(
        self,
        ctx: RequestContext,
        page: int,
        per_page: int,
        filters: Optional[Mapping[str, str]] = None,
    ) -> List[ProductDTO]:
        ctx.check()
        products = [self._products[id] for id in sorted(self._products)]
        filters = filters or {}
        if filters.get("category"):
            category = filters["category"].lower()
            products = [p for p in products if p.category.lower() == category]
        if filters.get("name"):
            name = filters["name"].lower()
            products = [p for p in products if name in p.name.lower()]

        offset = (max(page, 1) - 1) * per_page
        return products[offset : offset + per_page]
