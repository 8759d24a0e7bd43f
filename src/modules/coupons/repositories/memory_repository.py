"""In-memory coupon repository for tests and database-free runs."""

from __future__ import annotations

from typing import Iterable, List, Set

from modules.core.context import RequestContext
from modules.core.exceptions import ErrorKind, ServiceError
from modules.coupons.dtos import CouponDTO
from modules.coupons.repositories.interfaces import ICouponRepository


class InMemoryCouponRepository(ICouponRepository):
    def __init__(self, codes: Iterable[str] = ()) -> None:
        self._codes: Set[str] = set(codes)
        self.find_calls: List[str] = []

    def find_one_coupon(self, ctx: RequestContext, code: str) -> CouponDTO:
        self.find_calls.append(code)
        ctx.check()
        if code not in self._codes:
            raise ServiceError(ErrorKind.NOT_FOUND, f"coupon {code!r} not found")
        return CouponDTO(code=code)

    def insert_coupons(self, ctx: RequestContext, codes: Iterable[str]) -> int:
        ctx.check()
        before = len(self._codes)
        self._codes.update(codes)
        return len(self._codes) - before
