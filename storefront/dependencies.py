from fastapi import Request

from shared.utils import Settings
from storefront.cart_store import CartStore
from storefront.catalog import Catalog
from storefront.checkout import CheckoutService
from storefront.order_store import OrderStore
from storefront.user_store import UserStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_order_store(request: Request) -> OrderStore:
    return request.app.state.order_store


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout_service


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store
