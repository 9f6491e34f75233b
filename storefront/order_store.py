import logging
import threading
from typing import List, Union

from shared.utils import NotFoundException, ValidationException
from storefront.models import Order, OrderStatus, utcnow

logger = logging.getLogger(__name__)

VALID_STATUSES = [s.value for s in OrderStatus]


class OrderStore:
    """
    Append-only order log of frozen orders.

    A status update swaps in a copy of the order; nothing else changes after creation.
    """

    def __init__(self):
        self._orders: List[Order] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._orders)

    def create(self, order: Order) -> Order:
        # Uniqueness of order.id is the caller's job (uuid4)
        with self._lock:
            self._orders.append(order)
        return order

    def list_by_user(self, user_id: str) -> List[Order]:
        with self._lock:
            return [o for o in self._orders if o.user_id == user_id]

    def get_by_id(self, order_id: str, user_id: str) -> Order:
        with self._lock:
            return self._orders[self._index_of(order_id, user_id)]

    def _index_of(self, order_id: str, user_id: str) -> int:
        for index, order in enumerate(self._orders):
            if order.id == order_id and order.user_id == user_id:
                return index
        raise NotFoundException("Order not found")

    def update_status(self, order_id: str, user_id: str, status: Union[str, OrderStatus]) -> Order:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise ValidationException("Invalid status", details={"validStatuses": VALID_STATUSES})

        with self._lock:
            index = self._index_of(order_id, user_id)
            order = self._orders[index].model_copy(update={"status": new_status, "updated_at": utcnow()})
            self._orders[index] = order

        logger.info(f"Order {order_id} status updated to: {new_status.value}",
                    extra={"order_id": order_id, "user_id": user_id, "status": new_status.value})
        return order
