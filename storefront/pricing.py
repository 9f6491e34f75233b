"""
Order pricing.

Totals are computed with ``Decimal`` so that cent-denominated prices add up
exactly. Each component (subtotal, shipping, tax) is rounded half away from
zero to the cent, and the total is the sum of the rounded components. Since
the subtotal of cent prices is already exact, this is the same value as
rounding the unrounded sum, and the total always matches what is displayed.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from pydantic import BaseModel

from shared.utils import Settings
from storefront.models import Money

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_cents(amount: Decimal) -> Decimal:
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


class PricingPolicy(BaseModel):
    free_shipping_threshold: Decimal = Decimal("100.00")
    shipping_fee: Decimal = Decimal("10.00")
    tax_rate: Decimal = Decimal("0.08")

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls, config: Settings) -> "PricingPolicy":
        return cls(
            free_shipping_threshold=config.FREE_SHIPPING_THRESHOLD,
            shipping_fee=config.SHIPPING_FEE,
            tax_rate=config.TAX_RATE,
        )


DEFAULT_POLICY = PricingPolicy()


class OrderTotals(BaseModel):
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money

    class Config:
        frozen = True


def calculate_totals(lines: Iterable[Tuple[Decimal, int]],
                     policy: PricingPolicy = DEFAULT_POLICY) -> OrderTotals:
    """Price (unit price, quantity) pairs. An empty sequence costs nothing."""
    lines = list(lines)
    if not lines:
        return OrderTotals(subtotal=ZERO, shipping=ZERO, tax=ZERO, total=ZERO)

    raw_subtotal = sum((Decimal(str(price)) * quantity for price, quantity in lines), Decimal(0))
    raw_shipping = Decimal(0) if raw_subtotal >= policy.free_shipping_threshold else policy.shipping_fee
    raw_tax = raw_subtotal * policy.tax_rate

    subtotal = to_cents(raw_subtotal)
    shipping = to_cents(raw_shipping)
    tax = to_cents(raw_tax)

    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
    )
