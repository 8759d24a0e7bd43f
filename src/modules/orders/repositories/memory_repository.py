"""In-memory order repository for tests and database-free runs."""

from __future__ import annotations

from typing import Dict, List, Sequence

from modules.core.context import RequestContext
from modules.core.identifiers import new_object_id, parse_object_id
from modules.orders.dtos import ItemRequestDTO, OrderDTO, OrderItemDTO
from modules.orders.repositories.interfaces import IOrderRepository


class InMemoryOrderRepository(IOrderRepository):
    def __init__(self) -> None:
        self.orders: Dict[str, OrderDTO] = {}
        self.create_calls: List[List[ItemRequestDTO]] = []

    def create_order(
        self, ctx: RequestContext, items: Sequence[ItemRequestDTO]
    ) -> OrderDTO:
        self.create_calls.append(list(items))
        parsed = [
            OrderItemDTO(product_id=parse_object_id(item.product_id), quantity=item.quantity)
            for item in items
        ]
        ctx.check()

        order = OrderDTO(id=new_object_id(), items=parsed)
        self.orders[order.id] = order
        return order
