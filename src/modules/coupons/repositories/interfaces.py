"""Coupon repository interface.

The order flow only needs ``find_one_coupon``; ``insert_coupons`` feeds the
registry from the seed pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from modules.core.context import RequestContext
    from modules.coupons.dtos import CouponDTO


class ICouponRepository(ABC):
    """Repository contract for the coupon registry."""

    @abstractmethod
    def find_one_coupon(self, ctx: RequestContext, code: str) -> CouponDTO:
        """Look up a coupon by its exact code.

        Raises:
            ServiceError: ``NOT_FOUND`` when no coupon has *code*,
                ``INTERNAL`` for store failures.
        """

    @abstractmethod
    def insert_coupons(self, ctx: RequestContext, codes: Iterable[str]) -> int:
        """Insert *codes*, skipping those already registered.

        Returns the number of coupons actually added.
        """
