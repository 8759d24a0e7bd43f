"""Order repository interface.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from modules.core.context import RequestContext
    from modules.orders.dtos import ItemRequestDTO, OrderDTO


class IOrderRepository(ABC):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create_order(
        self, ctx: RequestContext, items: Sequence[ItemRequestDTO]
    ) -> OrderDTO:
        """Persist a new order with *items* in the given order.

        The repository assigns the order identifier.  Product identifiers
        are parsed here; a malformed one aborts the write.

        Raises:
            ServiceError: ``BAD_REQUEST`` for a malformed product identifier,
                ``INTERNAL`` for store failures.
        """
