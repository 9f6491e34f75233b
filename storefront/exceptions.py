from typing import List

from shared.utils import ValidationException


class EmptyCartError(ValidationException):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("Cart is empty")


class ProductNotFoundError(ValidationException):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found", details={"productId": product_id})


class InsufficientStockError(ValidationException):
    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}",
            details={
                "productId": product_id,
                "available": available,
                "requested": requested,
            },
        )


class InvalidPaymentMethodError(ValidationException):
    def __init__(self, valid_methods: List[str]):
        self.valid_methods = valid_methods
        super().__init__("Valid payment method is required", details={"validMethods": valid_methods})
