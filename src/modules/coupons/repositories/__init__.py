"""Coupon repositories package."""

from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.repositories.interfaces import ICouponRepository
from modules.coupons.repositories.memory_repository import InMemoryCouponRepository

__all__ = ["CouponDjangoRepository", "ICouponRepository", "InMemoryCouponRepository"]
