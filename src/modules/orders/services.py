"""Order service layer (Use Cases).

Orchestrates order creation across three independent stores: the catalog,
the coupon registry and the order store.  The workflow is strictly
sequential and short-circuits on the first failure:

1. Every quantity must be positive.
2. All product ids are resolved against the catalog in one batch call.
3. The coupon, when one is given, must exist.
4. The order is persisted (the only write, and the last step).

There is no transaction across the stores: a product or coupon removed
between validation and persistence does not block the write.

Error classification:
- business-rule violations raise ``UNPROCESSABLE`` (422);
- collaborator errors are wrapped with context and keep their kind
  (a malformed id stays ``BAD_REQUEST``);
- a missing coupon (``NOT_FOUND`` from the registry) becomes
  ``UNPROCESSABLE``;
- infrastructure failures and cancellation are ``INTERNAL``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.core.exceptions import ErrorKind, ServiceError, is_kind
from modules.orders.dtos import EnrichedOrderDTO

if TYPE_CHECKING:
    from modules.core.context import RequestContext
    from modules.coupons.repositories.interfaces import ICouponRepository
    from modules.orders.dtos import OrderRequestDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  Holds no mutable
    state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        catalog_repository: ICatalogRepository,
        coupon_repository: ICouponRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._catalog_repo = catalog_repository
        self._coupon_repo = coupon_repository
        self._order_repo = order_repository

    def create_order(
        self, ctx: RequestContext, request: OrderRequestDTO
    ) -> EnrichedOrderDTO:
        """Validate *request* against the catalog and coupons, then persist it.

        Raises:
            ServiceError: ``UNPROCESSABLE`` for a non-positive quantity, an
                unknown product or an unknown coupon; ``BAD_REQUEST`` for a
                malformed product id; ``INTERNAL`` for store failures and
                cancelled or expired requests.
        """
        log = logger.bind(
            item_count=len(request.items),
            has_coupon=bool(request.coupon_code),
        )
        log.info("order.creation_started")

        # 1. Quantities
        for item in request.items:
            if item.quantity <= 0:
                log.info("order.rejected", reason="non_positive_quantity")
                raise ServiceError(ErrorKind.UNPROCESSABLE, "quantity must be positive")

        # 2. Catalog: one round-trip for the whole batch, duplicates included
        product_ids = [item.product_id for item in request.items]
        try:
            missing, products = self._catalog_repo.find_products(ctx, product_ids)
        except Exception as exc:
            raise ServiceError.wrap(exc, "failed to find products") from exc
        if missing:
            log.info("order.rejected", reason="unknown_products", missing=missing)
            raise ServiceError(
                ErrorKind.UNPROCESSABLE,
                f"product ids not found: {', '.join(missing)}",
                missing=missing,
            )

        ctx.check()

        # 3. Coupon (skipped entirely when no code is given)
        code = request.coupon_code
        if code:
            try:
                self._coupon_repo.find_one_coupon(ctx, code)
            except Exception as exc:
                if is_kind(exc, ErrorKind.NOT_FOUND):
                    log.info("order.rejected", reason="unknown_coupon")
                    raise ServiceError(
                        ErrorKind.UNPROCESSABLE,
                        f"coupon {code!r} not found",
                        missing=[code],
                    ) from exc
                raise ServiceError.wrap(exc, "failed to find one coupon") from exc

        ctx.check()

        # 4. Persist the request's own items
        try:
            order = self._order_repo.create_order(ctx, request.items)
        except Exception as exc:
            raise ServiceError.wrap(exc, "failed to create order") from exc

        log.info("order.created", order_id=order.id)
        return EnrichedOrderDTO.from_order(order, products)
