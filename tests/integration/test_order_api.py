"""Integration tests for POST /api/order.

Covers:
- Successful creation (200) with the enriched body.
- Error mapping: 400 (malformed body/id), 422 (quantity, unknown
  products, unknown coupon), 401 (no/invalid key), 500 (store failure).
- Throttling of order creation.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from django.db import DatabaseError
from rest_framework.throttling import ScopedRateThrottle

from modules.core.identifiers import new_object_id
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.integration

URL = "/api/order"


def _payload(*items, coupon_code=None):
    body = {"items": [{"productId": pid, "quantity": qty} for pid, qty in items]}
    if coupon_code is not None:
        body["couponCode"] = coupon_code
    return body


class TestCreateOrder:
    def test_returns_order_with_products(self, auth_client, waffle, brownie):
        response = auth_client.post(
            URL, _payload((waffle.id, 2), (brownie.id, 1)), format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["id"]) == 24
        assert data["items"] == [
            {"productId": waffle.id, "quantity": 2},
            {"productId": brownie.id, "quantity": 1},
        ]
        by_id = {p["id"]: p for p in data["products"]}
        assert by_id[waffle.id] == {
            "id": waffle.id,
            "category": "Waffle",
            "name": "Waffle with Berries",
            "price": 6.5,
        }
        assert Order.objects.filter(id=data["id"]).exists()
        assert OrderItem.objects.filter(order_id=data["id"]).count() == 2

    def test_accepts_valid_coupon(self, auth_client, waffle, coupon):
        response = auth_client.post(
            URL, _payload((waffle.id, 1), coupon_code="HAPPYHOURS"), format="json"
        )
        assert response.status_code == 200

    def test_empty_coupon_is_no_coupon(self, auth_client, waffle):
        response = auth_client.post(URL, _payload((waffle.id, 1), coupon_code=""), format="json")
        assert response.status_code == 200

    def test_null_coupon_is_no_coupon(self, auth_client, waffle):
        body = {"items": [{"productId": waffle.id, "quantity": 1}], "couponCode": None}
        response = auth_client.post(URL, body, format="json")
        assert response.status_code == 200

    def test_empty_items_create_an_empty_order(self, auth_client):
        response = auth_client.post(URL, {"items": []}, format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["products"] == []
        assert Order.objects.filter(id=data["id"]).exists()


class TestValidationErrors:
    def test_malformed_json_is_400(self, auth_client):
        response = auth_client.post(URL, data="{", content_type="application/json")
        assert response.status_code == 400

    def test_quantity_out_of_range_is_400(self, auth_client, waffle):
        response = auth_client.post(URL, _payload((waffle.id, 10**20)), format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        assert data["errors"][0]["attr"] == "items.0.quantity"
        assert Order.objects.count() == 0

    def test_malformed_product_id_is_400(self, auth_client):
        response = auth_client.post(URL, _payload(("not-hex", 1)), format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "bad_request"
        assert Order.objects.count() == 0

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_is_422(self, auth_client, waffle, quantity):
        response = auth_client.post(URL, _payload((waffle.id, quantity)), format="json")
        assert response.status_code == 422
        assert response.json()["errors"][0]["detail"] == "quantity must be positive"
        assert Order.objects.count() == 0

    def test_unknown_products_are_422_with_missing_ids(self, auth_client, waffle):
        ghost_1, ghost_2 = new_object_id(), new_object_id()
        response = auth_client.post(
            URL, _payload((ghost_1, 1), (waffle.id, 1), (ghost_2, 1)), format="json"
        )

        assert response.status_code == 422
        error = response.json()["errors"][0]
        assert error["code"] == "unprocessable"
        assert error["missing"] == [ghost_1, ghost_2]
        assert Order.objects.count() == 0

    def test_unknown_coupon_is_422(self, auth_client, waffle, coupon):
        response = auth_client.post(
            URL, _payload((waffle.id, 1), coupon_code="NOTACOUPON"), format="json"
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["missing"] == ["NOTACOUPON"]
        assert Order.objects.count() == 0


class TestInfrastructureErrors:
    def test_store_failure_is_500_with_generic_detail(self, auth_client, waffle):
        with patch.object(Order.objects, "create", side_effect=DatabaseError("secret dsn")):
            response = auth_client.post(URL, _payload((waffle.id, 1)), format="json")

        assert response.status_code == 500
        data = response.json()
        assert data["type"] == "server_error"
        assert data["errors"][0]["detail"] == "Internal server error."
        assert "secret dsn" not in response.content.decode()


class TestAuthAndThrottling:
    def test_missing_key_is_401(self, api_client, waffle):
        response = api_client.post(URL, _payload((waffle.id, 1)), format="json")
        assert response.status_code == 401
        assert Order.objects.count() == 0

    def test_wrong_key_is_401(self, api_client, waffle):
        api_client.credentials(HTTP_API_KEY="wrong")
        response = api_client.post(URL, _payload((waffle.id, 1)), format="json")
        assert response.status_code == 401

    def test_order_creation_is_throttled(self, auth_client, waffle, monkeypatch):
        monkeypatch.setattr(ScopedRateThrottle, "THROTTLE_RATES", {"order_creation": "2/minute"})

        for _ in range(2):
            response = auth_client.post(URL, _payload((waffle.id, 1)), format="json")
            assert response.status_code == 200

        response = auth_client.post(URL, _payload((waffle.id, 1)), format="json")
        assert response.status_code == 429
