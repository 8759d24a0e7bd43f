"""Unit tests for OrderService.create_order.

Runs against the in-memory repositories so every store interaction can be
observed.

Covers:
- Happy path: persisted items, products in the response.
- Quantity gate: rejected before any store is touched.
- Unknown products: one batch look-up, all missing ids reported.
- Coupon handling: optional, exact, unknown code is unprocessable.
- Error classification: malformed ids stay BAD_REQUEST, store failures
  and cancellation are INTERNAL, with context prefixes.
- No de-duplication of identical requests.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from modules.core.context import RequestContext
from modules.core.exceptions import ErrorKind, ServiceError, is_kind
from modules.core.identifiers import new_object_id
from modules.coupons.repositories import InMemoryCouponRepository
from modules.orders.dtos import EnrichedOrderDTO, ItemRequestDTO, OrderRequestDTO
from modules.orders.repositories import InMemoryOrderRepository
from modules.orders.services import OrderService
from modules.products.dtos import ProductDTO
from modules.products.repositories import InMemoryCatalogRepository

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def waffle_dto():
    return ProductDTO(
        id=new_object_id(), category="Waffle", name="Waffle with Berries", price=Decimal("6.50")
    )


@pytest.fixture()
def brownie_dto():
    return ProductDTO(
        id=new_object_id(), category="Brownie", name="Salted Caramel Brownie", price=Decimal("4.50")
    )


@pytest.fixture()
def catalog(waffle_dto, brownie_dto):
    return InMemoryCatalogRepository([waffle_dto, brownie_dto])


@pytest.fixture()
def coupons():
    return InMemoryCouponRepository(["HAPPYHOURS"])


@pytest.fixture()
def orders():
    return InMemoryOrderRepository()


@pytest.fixture()
def service(catalog, coupons, orders):
    return OrderService(catalog, coupons, orders)


@pytest.fixture()
def ctx():
    return RequestContext.with_timeout(10)


def _request(*items, coupon_code: str = "") -> OrderRequestDTO:
    return OrderRequestDTO(
        items=[ItemRequestDTO(product_id=pid, quantity=qty) for pid, qty in items],
        coupon_code=coupon_code,
    )


# ===========================================================================
# Happy path
# ===========================================================================


class TestCreateOrder:
    def test_creates_order_with_products(self, service, orders, ctx, waffle_dto):
        result = service.create_order(ctx, _request((waffle_dto.id, 2)))

        assert isinstance(result, EnrichedOrderDTO)
        assert len(result.id) == 24
        assert [(i.product_id, i.quantity) for i in result.items] == [(waffle_dto.id, 2)]
        assert result.products == [waffle_dto]
        assert orders.orders[result.id].items == result.items

    def test_persists_request_items_unchanged(self, service, ctx, waffle_dto, brownie_dto):
        request = _request((brownie_dto.id, 1), (waffle_dto.id, 3), (brownie_dto.id, 2))

        result = service.create_order(ctx, request)

        assert [(i.product_id, i.quantity) for i in result.items] == [
            (brownie_dto.id, 1),
            (waffle_dto.id, 3),
            (brownie_dto.id, 2),
        ]
        assert {p.id for p in result.products} == {waffle_dto.id, brownie_dto.id}
        assert len(result.products) == 2

    def test_valid_coupon_is_accepted(self, service, coupons, ctx, waffle_dto):
        result = service.create_order(
            ctx, _request((waffle_dto.id, 1), coupon_code="HAPPYHOURS")
        )
        assert result.items[0].product_id == waffle_dto.id
        assert coupons.find_calls == ["HAPPYHOURS"]

    def test_empty_coupon_skips_lookup(self, service, coupons, ctx, waffle_dto):
        service.create_order(ctx, _request((waffle_dto.id, 1)))
        assert coupons.find_calls == []

    def test_identical_requests_create_distinct_orders(self, service, orders, ctx, waffle_dto):
        first = service.create_order(ctx, _request((waffle_dto.id, 1)))
        second = service.create_order(ctx, _request((waffle_dto.id, 1)))

        assert first.id != second.id
        assert len(orders.orders) == 2

    def test_catalog_is_queried_once_with_all_ids(self, service, catalog, ctx, waffle_dto):
        service.create_order(ctx, _request((waffle_dto.id, 1), (waffle_dto.id, 2)))
        assert catalog.find_calls == [[waffle_dto.id, waffle_dto.id]]


# ===========================================================================
# Quantity gate
# ===========================================================================


class TestQuantityGate:
    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_is_unprocessable(
        self, service, catalog, coupons, orders, ctx, waffle_dto, quantity
    ):
        request = _request((waffle_dto.id, 1), (waffle_dto.id, quantity), coupon_code="HAPPYHOURS")

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, request)

        assert exc_info.value.kind is ErrorKind.UNPROCESSABLE
        assert str(exc_info.value) == "quantity must be positive"
        assert catalog.find_calls == []
        assert coupons.find_calls == []
        assert orders.create_calls == []

    def test_checked_before_id_format(self, service, orders, ctx):
        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request(("not-an-id", 0)))
        assert exc_info.value.kind is ErrorKind.UNPROCESSABLE


# ===========================================================================
# Unknown products
# ===========================================================================


class TestUnknownProducts:
    def test_all_missing_ids_are_reported(self, service, coupons, orders, ctx, waffle_dto):
        ghost_1, ghost_2 = new_object_id(), new_object_id()
        request = _request((ghost_1, 1), (waffle_dto.id, 1), (ghost_2, 1), coupon_code="HAPPYHOURS")

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, request)

        exc = exc_info.value
        assert exc.kind is ErrorKind.UNPROCESSABLE
        assert exc.missing == (ghost_1, ghost_2)
        assert ghost_1 in str(exc) and ghost_2 in str(exc)
        assert coupons.find_calls == []
        assert orders.create_calls == []

    def test_malformed_id_stays_bad_request(self, service, orders, ctx):
        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request(("xyz", 1)))

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert str(exc_info.value).startswith("failed to find products: ")
        assert orders.create_calls == []

    def test_catalog_failure_is_internal(self, coupons, orders, ctx, waffle_dto):
        catalog = MagicMock()
        catalog.find_products.side_effect = ServiceError(
            ErrorKind.INTERNAL, "products query failed: timeout"
        )
        service = OrderService(catalog, coupons, orders)

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1)))

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert str(exc_info.value) == "failed to find products: products query failed: timeout"
        assert orders.create_calls == []


# ===========================================================================
# Coupon
# ===========================================================================


class TestCoupon:
    def test_unknown_coupon_is_unprocessable(self, service, orders, ctx, waffle_dto):
        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1), coupon_code="NOPE"))

        exc = exc_info.value
        assert exc.kind is ErrorKind.UNPROCESSABLE
        assert exc.missing == ("NOPE",)
        assert is_kind(exc, ErrorKind.NOT_FOUND)
        assert orders.create_calls == []

    def test_coupon_lookup_is_exact(self, service, ctx, waffle_dto):
        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1), coupon_code="happyhours"))
        assert exc_info.value.kind is ErrorKind.UNPROCESSABLE

    def test_coupon_store_failure_is_internal(self, catalog, orders, ctx, waffle_dto):
        coupons = MagicMock()
        coupons.find_one_coupon.side_effect = ServiceError(
            ErrorKind.INTERNAL, "coupon query failed: reset"
        )
        service = OrderService(catalog, coupons, orders)

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1), coupon_code="HAPPYHOURS"))

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert str(exc_info.value).startswith("failed to find one coupon: ")
        assert orders.create_calls == []


# ===========================================================================
# Persistence and cancellation
# ===========================================================================


class TestPersistence:
    def test_store_failure_is_internal(self, catalog, coupons, ctx, waffle_dto):
        orders = MagicMock()
        orders.create_order.side_effect = ServiceError(
            ErrorKind.INTERNAL, "order insert failed: disk full"
        )
        service = OrderService(catalog, coupons, orders)

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1)))

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert str(exc_info.value) == "failed to create order: order insert failed: disk full"

    def test_cancelled_request_writes_nothing(self, service, orders, waffle_dto):
        ctx = RequestContext.background()
        ctx.cancel()

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1)))

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert orders.orders == {}

    def test_expired_request_is_internal(self, service, orders, waffle_dto):
        ctx = RequestContext.with_timeout(-1)

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1)))

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert "deadline exceeded" in str(exc_info.value)
        assert orders.orders == {}

    def test_cancellation_between_stages_stops_the_flow(
        self, catalog, coupons, orders, waffle_dto
    ):
        ctx = RequestContext.background()
        real_find = catalog.find_products

        def find_then_cancel(ctx_, ids):
            result = real_find(ctx_, ids)
            ctx_.cancel()
            return result

        catalog.find_products = find_then_cancel
        service = OrderService(catalog, coupons, orders)

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1), coupon_code="HAPPYHOURS"))

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert coupons.find_calls == []
        assert orders.create_calls == []


# ===========================================================================
# Foreign exceptions from collaborators
# ===========================================================================


class TestUnclassifiedStoreFailures:
    @pytest.mark.parametrize(
        "failing, method, prefix",
        [
            ("catalog", "find_products", "failed to find products: "),
            ("coupons", "find_one_coupon", "failed to find one coupon: "),
            ("orders", "create_order", "failed to create order: "),
        ],
    )
    def test_raw_exception_is_wrapped_as_internal(
        self, catalog, coupons, orders, ctx, waffle_dto, failing, method, prefix
    ):
        stores = {"catalog": catalog, "coupons": coupons, "orders": orders}
        broken = MagicMock()
        getattr(broken, method).side_effect = ConnectionError("store unreachable")
        stores[failing] = broken
        service = OrderService(stores["catalog"], stores["coupons"], stores["orders"])

        with pytest.raises(ServiceError) as exc_info:
            service.create_order(ctx, _request((waffle_dto.id, 1), coupon_code="HAPPYHOURS"))

        exc = exc_info.value
        assert exc.kind is ErrorKind.INTERNAL
        assert str(exc) == f"{prefix}store unreachable"
        assert isinstance(exc.__cause__, ConnectionError)

    def test_empty_order_is_persisted(self, service, orders, ctx):
        result = service.create_order(ctx, _request())

        assert result.items == []
        assert result.products == []
        assert result.id in orders.orders
