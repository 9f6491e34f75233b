import logging
import threading
import weakref
from typing import Dict, List

from shared.utils import NotFoundException, ValidationException
from storefront.catalog import Catalog
from storefront.models import Cart, CartItem, utcnow

logger = logging.getLogger(__name__)


class CartStore:
    """
    In-memory carts keyed by user id.

    Every read-modify-write runs under the owning user's re-entrant lock, which
    the checkout also holds for its whole validate/commit/clear sequence.
    A user's lock lives only while some caller references it.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._carts: Dict[str, Cart] = {}
        self._locks = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def lock_for(self, user_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
            return lock

    def has_cart(self, user_id: str) -> bool:
        return user_id in self._carts

    def get(self, user_id: str) -> List[CartItem]:
        with self.lock_for(user_id):
            cart = self._carts.get(user_id)
            if cart is None:
                return []
            return [item.model_copy() for item in cart.items]

    def add(self, user_id: str, product_id: str, quantity: int) -> List[CartItem]:
        if quantity is None or quantity < 1:
            raise ValidationException("Invalid product or quantity")
        product = self.catalog.get(product_id)
        if product is None:
            raise ValidationException("Product not found")

        with self.lock_for(user_id):
            cart = self._carts.get(user_id)
            if cart is None:
                cart = Cart(user_id=user_id)
                self._carts[user_id] = cart

            existing = self._find(cart, product_id)
            if existing is not None:
                existing.quantity += quantity
                logger.info(
                    f"Updated cart: {product.name} quantity now {existing.quantity}",
                    extra={"user_id": user_id, "product_id": product_id, "quantity": existing.quantity},
                )
            else:
                cart.items.append(CartItem(product_id=product_id, quantity=quantity))
                logger.info(
                    f"Added to cart: {product.name} x{quantity}",
                    extra={"user_id": user_id, "product_id": product_id, "quantity": quantity},
                )
            cart.updated_at = utcnow()
            return self.get(user_id)

    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> List[CartItem]:
        if quantity is None or quantity < 1:
            raise ValidationException("Quantity must be at least 1")

        with self.lock_for(user_id):
            cart = self._carts.get(user_id)
            if cart is None:
                raise NotFoundException("Cart not found")
            item = self._find(cart, product_id)
            if item is None:
                raise NotFoundException("Item not found in cart")

            item.quantity = quantity
            cart.updated_at = utcnow()
            logger.info(
                f"Updated quantity for product {product_id} to {quantity}",
                extra={"user_id": user_id, "product_id": product_id, "quantity": quantity},
            )
            return self.get(user_id)

    def remove(self, user_id: str, product_id: str) -> List[CartItem]:
        with self.lock_for(user_id):
            cart = self._carts.get(user_id)
            if cart is None:
                raise NotFoundException("Cart not found")

            cart.items = [item for item in cart.items if item.product_id != product_id]
            cart.updated_at = utcnow()
            logger.info(f"Removed product {product_id} from cart",
                        extra={"user_id": user_id, "product_id": product_id})
            return self.get(user_id)

    def clear(self, user_id: str) -> None:
        with self.lock_for(user_id):
            self._carts.pop(user_id, None)
        logger.info("Cleared cart", extra={"user_id": user_id})

    @staticmethod
    def _find(cart: Cart, product_id: str):
        for item in cart.items:
            if item.product_id == product_id:
                return item
        return None
