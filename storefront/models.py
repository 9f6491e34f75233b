from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, List, Tuple
import uuid

from pydantic import BaseModel, Field, PlainSerializer
from pydantic.alias_generators import to_camel


# Currency amounts stay Decimal in Python and go out as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Product(CamelModel):
    id: str
    name: str
    price: Money = Field(..., ge=0)
    image: Optional[str] = None
    description: str
    category: str
    stock: int = Field(..., ge=0)

    class Config:
        frozen = True


class CartItem(CamelModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class Cart(CamelModel):
    user_id: str
    items: List[CartItem] = []
    updated_at: datetime = Field(default_factory=utcnow)


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    CASH_ON_DELIVERY = "cash_on_delivery"


class OrderLineItem(CamelModel):
    product_id: str
    name: str
    price: Money
    quantity: int

    class Config:
        frozen = True


class ShippingAddress(CamelModel):
    full_name: str
    email: str
    address: str
    city: str
    zip_code: str
    country: str

    class Config:
        frozen = True


class Order(CamelModel):
    """Placed order. Frozen; a status change yields a new instance."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    items: Tuple[OrderLineItem, ...]
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money
    shipping_address: ShippingAddress
    payment_method: Optional[PaymentMethod] = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    class Config:
        frozen = True


class User(CamelModel):
    id: str
    email: str
    name: str
    password_hash: str
