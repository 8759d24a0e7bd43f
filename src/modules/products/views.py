"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.  Service
errors propagate to ``api_exception_handler``, which maps their kind to a
status code; the view never swallows exceptions.
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.context import current_context
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

FILTER_PARAMS = ("category", "name")


def _parse_page(raw: str | None) -> int:
    try:
        return max(int(raw or 1), 1)
    except ValueError:
        return 1


class ProductViewSet(GenericViewSet):
    """ViewSet for catalog queries.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    """

    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            per_page=settings.PRODUCTS_PER_PAGE,
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("page", OpenApiTypes.INT, description="1-based page"),
            OpenApiParameter("category", OpenApiTypes.STR),
            OpenApiParameter("name", OpenApiTypes.STR),
        ],
    )
    def list(self, request: Request) -> Response:
        """GET /api/product?page=N"""
        page = _parse_page(request.query_params.get("page"))
        filters = {
            key: request.query_params[key]
            for key in FILTER_PARAMS
            if request.query_params.get(key)
        }
        products = self._service.list_products(current_context(), page, filters)
        return Response(ProductSerializer(products, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/product/{pk}"""
        product = self._service.get_product(current_context(), pk or "")
        return Response(ProductSerializer(product).data)
