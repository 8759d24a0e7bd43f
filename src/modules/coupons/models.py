"""Coupon model: the registry of valid promotional codes.

Existence is the whole contract; there is no value or expiry.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import Document

COUPON_CODE_MAX_LENGTH = 32


class Coupon(Document):
    code = models.CharField(max_length=COUPON_CODE_MAX_LENGTH, unique=True)

    class Meta:
        db_table = "coupons"
        ordering = ["code"]

    def __str__(self) -> str:
        return self.code
