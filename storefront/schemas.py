from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from shared.security_config import sanitize_input
from storefront.models import CamelModel, Money, Order, Product


# Auth
class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserRegister(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @field_validator('name')
    def sanitize_name(cls, v):
        return sanitize_input(v)


class UserResponse(CamelModel):
    id: str
    email: str
    name: str


class AuthResponse(CamelModel):
    user_id: str
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


# Products
class ProductListResponse(CamelModel):
    products: List[Product]
    total: int


# Cart
class CartItemAdd(CamelModel):
    product_id: str = Field(..., min_length=1)
    quantity: int


class CartItemUpdate(CamelModel):
    quantity: int


class CartLineResponse(CamelModel):
    product_id: str
    quantity: int
    product: Product


class CartResponse(CamelModel):
    user_id: str
    items: List[CartLineResponse]
    item_count: int
    subtotal: Money


# Orders / checkout
class OrderCreate(CamelModel):
    # validated by CheckoutService
    shipping_address: Optional[Dict[str, Any]] = None
    payment_method: Optional[str] = None


class OrderStatusUpdate(CamelModel):
    status: str

    @field_validator('status')
    def sanitize_status(cls, v):
        return sanitize_input(v)


class OrderTotalsSummary(CamelModel):
    item_count: int
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money


class CheckoutResponse(CamelModel):
    order: Order
    summary: OrderTotalsSummary
