"""Async tasks for the coupon registry."""

from pathlib import Path
from typing import Optional

import structlog
from celery import shared_task
from django.conf import settings

from modules.core.context import RequestContext
from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.services import CouponSeedService

logger = structlog.get_logger(__name__)


@shared_task(name="coupons.load_coupons")
def load_coupons(path: Optional[str] = None) -> dict:
    """Load a valid-codes file into the registry in the background."""
    service = CouponSeedService(
        repository=CouponDjangoRepository(),
        data_dir=Path(settings.COUPON_DATA_DIR),
    )
    inserted = service.load_valid_codes(
        RequestContext.background(), Path(path) if path else None
    )
    logger.info("load_coupons.executed", inserted=inserted)
    return {"status": "ok", "inserted": inserted}
