"""Tests for CheckoutService."""

import threading
from decimal import Decimal

import pytest

from shared.utils import ValidationException
from storefront.catalog import SEED_PRODUCTS, Catalog
from storefront.cart_store import CartStore
from storefront.checkout import CheckoutService
from storefront.exceptions import (
    EmptyCartError, InsufficientStockError, InvalidPaymentMethodError, ProductNotFoundError
)
from storefront.models import OrderStatus, PaymentMethod
from storefront.order_store import OrderStore
from storefront.pricing import PricingPolicy


class TestCheckoutValidation:
    @pytest.mark.parametrize("missing", ["fullName", "email", "address", "city", "zipCode", "country"])
    def test_each_address_field_required(self, checkout_service, cart_store, shipping_address, missing):
        cart_store.add("u1", "1", 1)
        shipping_address[missing] = ""

        with pytest.raises(ValidationException, match="Complete shipping address is required"):
            checkout_service.checkout("u1", shipping_address)
        assert cart_store.get("u1")

    def test_address_missing_entirely(self, checkout_service, cart_store):
        cart_store.add("u1", "1", 1)
        with pytest.raises(ValidationException):
            checkout_service.checkout("u1", None)

    def test_address_checked_before_cart(self, checkout_service):
        # empty cart, bad address: the address error wins
        with pytest.raises(ValidationException) as exc_info:
            checkout_service.checkout("u1", {"fullName": "Jane"})
        assert not isinstance(exc_info.value, EmptyCartError)

    def test_snake_case_address_accepted(self, checkout_service, cart_store):
        cart_store.add("u1", "1", 1)
        order = checkout_service.checkout("u1", {
            "full_name": "Jane Doe", "email": "jane@shophub.com", "address": "1 Main Street",
            "city": "Springfield", "zip_code": "12345", "country": "USA",
        })
        assert order.shipping_address.zip_code == "12345"

    def test_address_is_sanitized(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "1", 1)
        shipping_address["address"] = "  <b>1 Main</b> "
        order = checkout_service.checkout("u1", shipping_address)
        assert order.shipping_address.address == "&lt;b&gt;1 Main&lt;/b&gt;"

    def test_payment_method_required_when_asked(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "1", 1)
        with pytest.raises(InvalidPaymentMethodError) as exc_info:
            checkout_service.checkout("u1", shipping_address, require_payment_method=True)
        assert "paypal" in exc_info.value.valid_methods

    def test_unknown_payment_method(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "1", 1)
        with pytest.raises(InvalidPaymentMethodError):
            checkout_service.checkout("u1", shipping_address, payment_method="bitcoin")

    def test_empty_cart(self, checkout_service, shipping_address):
        with pytest.raises(EmptyCartError):
            checkout_service.checkout("u1", shipping_address)

    def test_cart_emptied_by_removal(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "1", 1)
        cart_store.remove("u1", "1")
        with pytest.raises(EmptyCartError):
            checkout_service.checkout("u1", shipping_address)

    def test_insufficient_stock_names_product(self, checkout_service, cart_store, order_store, shipping_address):
        cart_store.add("u1", "1", 1)
        cart_store.add("u1", "3", 26)  # Leather Backpack, stock 25

        with pytest.raises(InsufficientStockError) as exc_info:
            checkout_service.checkout("u1", shipping_address)

        err = exc_info.value
        assert err.product_id == "3"
        assert err.available == 25
        assert err.requested == 26
        assert "Leather Backpack" in err.detail
        assert "Available: 25" in err.detail
        assert len(order_store) == 0
        assert len(cart_store.get("u1")) == 2

    def test_quantity_equal_to_stock_is_allowed(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "3", 25)
        order = checkout_service.checkout("u1", shipping_address)
        assert order.items[0].quantity == 25

    def test_product_removed_from_catalog(self, shipping_address):
        full = Catalog()
        carts = CartStore(full)
        carts.add("u1", "1", 1)
        carts.add("u1", "2", 1)
        # same carts, smaller catalog
        carts.catalog = Catalog([p for p in SEED_PRODUCTS if p.id != "2"])
        service = CheckoutService(carts.catalog, carts, OrderStore())

        with pytest.raises(ProductNotFoundError) as exc_info:
            service.checkout("u1", shipping_address)
        assert exc_info.value.product_id == "2"


class TestCheckoutSuccess:
    def test_end_to_end_totals(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "5", 2)
        order = checkout_service.checkout("u1", shipping_address, payment_method="paypal")

        assert order.subtotal == Decimal("239.98")
        assert order.shipping == Decimal("0.00")
        assert order.tax == Decimal("19.20")
        assert order.total == Decimal("259.18")
        assert order.status == OrderStatus.PENDING
        assert order.payment_method == PaymentMethod.PAYPAL
        assert order.user_id == "u1"

    def test_line_items_snapshot(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "5", 2)
        cart_store.add("u1", "11", 1)
        order = checkout_service.checkout("u1", shipping_address)

        assert [(li.product_id, li.name, li.price, li.quantity) for li in order.items] == [
            ("5", "Running Shoes", Decimal("119.99"), 2),
            ("11", "Notebook Set", Decimal("19.99"), 1),
        ]
        assert sum(li.price * li.quantity for li in order.items) == order.subtotal

    def test_small_order_pays_shipping(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "10", 1)
        order = checkout_service.checkout("u1", shipping_address)

        assert order.subtotal == Decimal("24.99")
        assert order.shipping == Decimal("10.00")
        assert order.tax == Decimal("2.00")  # 1.9992
        assert order.total == Decimal("36.99")

    def test_commits_order_and_clears_cart(self, checkout_service, cart_store, order_store, shipping_address):
        cart_store.add("u1", "1", 1)
        cart_store.add("u2", "2", 1)
        order = checkout_service.checkout("u1", shipping_address)

        assert order_store.list_by_user("u1") == [order]
        assert cart_store.get("u1") == []
        assert not cart_store.has_cart("u1")
        assert cart_store.get("u2")

    def test_prices_frozen_after_catalog_change(self, cart_store, order_store, shipping_address):
        catalog = cart_store.catalog
        service = CheckoutService(catalog, cart_store, order_store)
        cart_store.add("u1", "1", 1)
        order = service.checkout("u1", shipping_address)

        repriced = [p.model_copy(update={"price": Decimal("1.00")}) if p.id == "1" else p
                    for p in SEED_PRODUCTS]
        service.catalog = Catalog(repriced)

        stored = order_store.get_by_id(order.id, "u1")
        assert stored.items[0].price == Decimal("129.99")
        assert stored.subtotal == Decimal("129.99")

    def test_stock_not_decremented(self, checkout_service, cart_store, catalog, shipping_address):
        cart_store.add("u1", "3", 25)
        checkout_service.checkout("u1", shipping_address)
        assert catalog.get("3").stock == 25

    def test_second_checkout_sees_empty_cart(self, checkout_service, cart_store, shipping_address):
        cart_store.add("u1", "1", 1)
        checkout_service.checkout("u1", shipping_address)
        with pytest.raises(EmptyCartError):
            checkout_service.checkout("u1", shipping_address)

    def test_concurrent_checkouts_commit_once(self, checkout_service, cart_store, order_store, shipping_address):
        cart_store.add("u1", "1", 1)
        results = []

        def worker():
            try:
                results.append(checkout_service.checkout("u1", shipping_address))
            except EmptyCartError as e:
                results.append(e)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(order_store.list_by_user("u1")) == 1
        assert sum(isinstance(r, EmptyCartError) for r in results) == 4

    def test_uses_configured_policy(self, catalog, cart_store, order_store, shipping_address):
        policy = PricingPolicy(
            free_shipping_threshold=Decimal("500"), shipping_fee=Decimal("5.00"), tax_rate=Decimal("0"),
        )
        service = CheckoutService(catalog, cart_store, order_store, policy)
        cart_store.add("u1", "2", 1)
        order = service.checkout("u1", shipping_address)

        assert order.shipping == Decimal("5.00")
        assert order.tax == Decimal("0.00")
        assert order.total == Decimal("304.99")


class TestCheckoutSummary:
    def test_summary(self, checkout_service, cart_store):
        cart_store.add("u1", "5", 2)
        cart_store.add("u1", "3", 30)
        summary = checkout_service.summary("u1")

        assert [line.product_id for line in summary.items] == ["5", "3"]
        assert summary.items[0].line_total == Decimal("239.98")
        assert summary.items[0].in_stock is True
        assert summary.items[1].in_stock is False
        assert summary.subtotal == Decimal("2939.68")
        assert summary.free_shipping_threshold == Decimal("100.00")
        assert "cash_on_delivery" in summary.available_payment_methods

    def test_summary_does_not_touch_cart(self, checkout_service, cart_store, order_store):
        cart_store.add("u1", "5", 1)
        checkout_service.summary("u1")

        assert len(cart_store.get("u1")) == 1
        assert len(order_store) == 0

    def test_summary_empty_cart(self, checkout_service):
        with pytest.raises(EmptyCartError):
            checkout_service.summary("u1")

    def test_summary_waits_for_cart_lock(self, checkout_service, cart_store):
        cart_store.add("u1", "5", 1)
        done = threading.Event()

        def worker():
            checkout_service.summary("u1")
            done.set()

        with cart_store.lock_for("u1"):
            thread = threading.Thread(target=worker)
            thread.start()
            assert not done.wait(0.2)
        thread.join(timeout=5)
        assert done.is_set()
