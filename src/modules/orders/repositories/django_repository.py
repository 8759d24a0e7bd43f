"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  The order row
and its item rows are written in one ``transaction.atomic()`` block so the
aggregate is never half-persisted; no other table takes part in it.
"""

from __future__ import annotations

from typing import Sequence

import structlog
from django.db import transaction

from modules.core.context import RequestContext
from modules.core.identifiers import parse_object_id
from modules.core.repositories.guards import store_call
from modules.orders.dtos import ItemRequestDTO, OrderDTO, OrderItemDTO
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def create_order(
        self, ctx: RequestContext, items: Sequence[ItemRequestDTO]
    ) -> OrderDTO:
        parsed = [
            OrderItemDTO(product_id=parse_object_id(item.product_id), quantity=item.quantity)
            for item in items
        ]

        with store_call(ctx, "order insert", recheck=False), transaction.atomic():
            order = Order.objects.create()
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        position=position,
                        product_id=item.product_id,
                        quantity=item.quantity,
                    )
                    for position, item in enumerate(parsed)
                ]
            )
            ctx.check()

        logger.info("order.persisted", order_id=order.id, item_count=len(parsed))
        return OrderDTO(id=order.id, items=parsed)
