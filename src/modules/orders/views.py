"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.  Service errors
propagate to ``api_exception_handler``, which maps their kind to a status
code; the view never swallows exceptions.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.context import current_context
from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.orders.dtos import ItemRequestDTO, OrderRequestDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import EnrichedOrderSerializer, OrderRequestSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for order placement.

    Uses ``OrderService`` with injected repositories (DIP).
    """

    serializer_class = OrderRequestSerializer
    throttle_scope = "order_creation"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            catalog_repository=ProductDjangoRepository(),
            coupon_repository=CouponDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )

    @extend_schema(
        request=OrderRequestSerializer,
        responses={200: EnrichedOrderSerializer},
    )
    def create(self, request: Request) -> Response:
        """POST /api/order

        Returns the created order with the catalog records of its products.
        """
        serializer = OrderRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        dto = OrderRequestDTO(
            items=[
                ItemRequestDTO(product_id=item["productId"], quantity=item["quantity"])
                for item in data["items"]
            ],
            coupon_code=data.get("couponCode", ""),
        )

        result = self._service.create_order(current_context(), dto)
        return Response(EnrichedOrderSerializer(result).data, status=status.HTTP_200_OK)
