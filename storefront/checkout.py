import logging
from typing import Any, List, Mapping, Optional

from shared.security_config import sanitize_input
from shared.utils import ValidationException
from storefront.cart_store import CartStore
from storefront.catalog import Catalog
from storefront.exceptions import (
    EmptyCartError, InsufficientStockError, InvalidPaymentMethodError, ProductNotFoundError
)
from storefront.models import (
    CamelModel, Money, Order, OrderLineItem, PaymentMethod, ShippingAddress
)
from storefront.order_store import OrderStore
from storefront.pricing import DEFAULT_POLICY, OrderTotals, PricingPolicy, calculate_totals

logger = logging.getLogger(__name__)

SHIPPING_FIELDS = {
    "full_name": "fullName",
    "email": "email",
    "address": "address",
    "city": "city",
    "zip_code": "zipCode",
    "country": "country",
}
VALID_PAYMENT_METHODS = [m.value for m in PaymentMethod]


class SummaryLine(CamelModel):
    product_id: str
    name: str
    price: Money
    quantity: int
    line_total: Money
    in_stock: bool


class CheckoutSummary(CamelModel):
    items: List[SummaryLine]
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money
    free_shipping_threshold: Money
    available_payment_methods: List[str]


def parse_shipping_address(raw: Optional[Mapping[str, Any]]) -> ShippingAddress:
    """All six fields must be present and non-empty; camelCase or snake_case keys."""
    if not isinstance(raw, Mapping):
        raise ValidationException("Complete shipping address is required")

    values = {}
    for field_name, camel in SHIPPING_FIELDS.items():
        value = raw.get(camel, raw.get(field_name))
        if not isinstance(value, str) or not value.strip():
            raise ValidationException(
                "Complete shipping address is required", details={"missing": camel}
            )
        values[field_name] = sanitize_input(value)
    return ShippingAddress(**values)


def parse_payment_method(raw: Optional[str], required: bool) -> Optional[PaymentMethod]:
    if raw is None or raw == "":
        if required:
            raise InvalidPaymentMethodError(VALID_PAYMENT_METHODS)
        return None
    try:
        return PaymentMethod(raw)
    except ValueError:
        raise InvalidPaymentMethodError(VALID_PAYMENT_METHODS)


class CheckoutService:
    """
    Turns a user's cart into an order.

    Checks run in a fixed order (address, payment method, empty cart, unknown
    products, stock) and the first failure rejects the whole checkout. On
    success the order is appended before the cart is cleared, so an
    interruption between the two leaves an order and a stale cart, never a
    lost cart.
    """

    def __init__(self, catalog: Catalog, carts: CartStore, orders: OrderStore,
                 policy: PricingPolicy = DEFAULT_POLICY):
        self.catalog = catalog
        self.carts = carts
        self.orders = orders
        self.policy = policy

    def checkout(
        self,
        user_id: str,
        shipping_address: Optional[Mapping[str, Any]],
        payment_method: Optional[str] = None,
        require_payment_method: bool = False,
    ) -> Order:
        address = parse_shipping_address(shipping_address)
        method = parse_payment_method(payment_method, require_payment_method)

        with self.carts.lock_for(user_id):
            cart_items = self.carts.get(user_id)
            if not cart_items:
                raise EmptyCartError(user_id)

            line_items = []
            for item in cart_items:
                product = self.catalog.get(item.product_id)
                if product is None:
                    raise ProductNotFoundError(item.product_id)
                if product.stock < item.quantity:
                    raise InsufficientStockError(product.id, product.name, product.stock, item.quantity)
                line_items.append(OrderLineItem(
                    product_id=product.id,
                    name=product.name,
                    price=product.price,
                    quantity=item.quantity,
                ))

            totals = self.price(line_items)
            order = Order(
                user_id=user_id,
                items=line_items,
                subtotal=totals.subtotal,
                shipping=totals.shipping,
                tax=totals.tax,
                total=totals.total,
                shipping_address=address,
                payment_method=method,
            )

            self.orders.create(order)
            self.carts.clear(user_id)

        logger.info(
            f"Checkout completed: Order {order.id} - Total: ${order.total:.2f} ({len(line_items)} items)",
            extra={"order_id": order.id, "user_id": user_id, "total": str(order.total)},
        )
        return order

    def price(self, line_items: List[OrderLineItem]) -> OrderTotals:
        return calculate_totals(((li.price, li.quantity) for li in line_items), self.policy)

    def summary(self, user_id: str) -> CheckoutSummary:
        with self.carts.lock_for(user_id):
            cart_items = self.carts.get(user_id)
        if not cart_items:
            raise EmptyCartError(user_id)

        lines = []
        for item in cart_items:
            product = self.catalog.get(item.product_id)
            if product is None:
                continue
            lines.append(SummaryLine(
                product_id=product.id,
                name=product.name,
                price=product.price,
                quantity=item.quantity,
                line_total=product.price * item.quantity,
                in_stock=product.stock >= item.quantity,
            ))

        totals = calculate_totals(((line.price, line.quantity) for line in lines), self.policy)
        return CheckoutSummary(
            items=lines,
            subtotal=totals.subtotal,
            shipping=totals.shipping,
            tax=totals.tax,
            total=totals.total,
            free_shipping_threshold=self.policy.free_shipping_threshold,
            available_payment_methods=VALID_PAYMENT_METHODS,
        )
