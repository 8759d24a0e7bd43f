"""Coupon DTOs for the Service Layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.coupons.models import Coupon


class CouponDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str

    @classmethod
    def from_entity(cls, coupon: Coupon) -> CouponDTO:
        return cls(code=coupon.code)
