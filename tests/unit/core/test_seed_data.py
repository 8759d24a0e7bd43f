"""Unit tests for the seed_data management command."""

from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command

from modules.core.management.commands.seed_data import CATALOG, COUPONS
from modules.coupons.models import Coupon
from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestSeedData:
    def test_creates_catalog_and_coupons(self):
        out = StringIO()
        call_command("seed_data", stdout=out)

        assert Product.objects.count() == len(CATALOG)
        assert Coupon.objects.count() == len(COUPONS)
        assert f"products={len(CATALOG)}, coupons={len(COUPONS)}" in out.getvalue()

    def test_is_idempotent(self):
        call_command("seed_data", stdout=StringIO())
        out = StringIO()
        call_command("seed_data", stdout=out)

        assert Product.objects.count() == len(CATALOG)
        assert "products=0, coupons=0" in out.getvalue()
