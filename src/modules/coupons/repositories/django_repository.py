"""Django ORM implementation of the coupon repository."""

from __future__ import annotations

from typing import Iterable

import structlog

from modules.core.context import RequestContext
from modules.core.exceptions import ErrorKind, ServiceError
from modules.core.repositories.guards import store_call
from modules.coupons.dtos import CouponDTO
from modules.coupons.models import Coupon
from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)

INSERT_BATCH_SIZE = 1000


class CouponDjangoRepository(ICouponRepository):
    """Concrete coupon repository backed by Django ORM."""

    def find_one_coupon(self, ctx: RequestContext, code: str) -> CouponDTO:
        with store_call(ctx, "coupon query"):
            coupon = Coupon.objects.filter(code=code).first()

        if coupon is None:
            raise ServiceError(ErrorKind.NOT_FOUND, f"coupon {code!r} not found")
        return CouponDTO.from_entity(coupon)

    def insert_coupons(self, ctx: RequestContext, codes: Iterable[str]) -> int:
        coupons = [Coupon(code=code) for code in dict.fromkeys(codes)]
        if not coupons:
            return 0

        with store_call(ctx, "coupon insert"):
            before = Coupon.objects.count()
            Coupon.objects.bulk_create(
                coupons, batch_size=INSERT_BATCH_SIZE, ignore_conflicts=True
            )
            inserted = Coupon.objects.count() - before

        logger.info("coupons.inserted", submitted=len(coupons), inserted=inserted)
        return inserted
