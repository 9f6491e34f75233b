"""Pytest fixtures for storefront tests."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from shared.security_config import limiter
from shared.utils import Settings
from storefront.cart_store import CartStore
from storefront.catalog import Catalog
from storefront.checkout import CheckoutService
from storefront.main import create_app
from storefront.order_store import OrderStore


SHIPPING_ADDRESS = {
    "fullName": "Jane Doe",
    "email": "jane@shophub.com",
    "address": "1 Main Street",
    "city": "Springfield",
    "zipCode": "12345",
    "country": "USA",
}


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def catalog():
    return Catalog()


@pytest.fixture
def cart_store(catalog):
    return CartStore(catalog)


@pytest.fixture
def order_store():
    return OrderStore()


@pytest.fixture
def checkout_service(catalog, cart_store, order_store):
    return CheckoutService(catalog, cart_store, order_store)


@pytest.fixture
def shipping_address():
    return dict(SHIPPING_ADDRESS)


@pytest.fixture
def users_file(tmp_path):
    return tmp_path / "users.json"


@pytest.fixture
def test_settings(users_file):
    return Settings(
        USERS_FILE=str(users_file),
        SECRET_KEY="test-secret",
        FREE_SHIPPING_THRESHOLD=Decimal("100.00"),
        SHIPPING_FEE=Decimal("10.00"),
        TAX_RATE=Decimal("0.08"),
    )


@pytest.fixture
def client(test_settings):
    """Fresh application (and stores) per test."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client
