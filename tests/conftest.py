from decimal import Decimal

import pytest

from django.core.cache import cache
from rest_framework.test import APIClient

from modules.coupons.models import Coupon
from modules.products.models import Product

TEST_API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _test_settings(settings):
    """Local-memory cache and a known API key; no Redis needed."""
    settings.CACHES = {
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}
    }
    settings.API_KEY = TEST_API_KEY
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient sending the configured key in the ``Api-Key`` header."""
    client = APIClient()
    client.credentials(HTTP_API_KEY=TEST_API_KEY)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def waffle():
    return Product.objects.create(
        category="Waffle", name="Waffle with Berries", price=Decimal("6.50")
    )


@pytest.fixture()
def brownie():
    return Product.objects.create(
        category="Brownie", name="Salted Caramel Brownie", price=Decimal("4.50")
    )


@pytest.fixture()
def coupon():
    return Coupon.objects.create(code="HAPPYHOURS")
