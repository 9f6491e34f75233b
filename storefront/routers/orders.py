from typing import List, Optional

from fastapi import APIRouter, Depends, status

from shared.utils import SuccessResponse
from storefront.checkout import CheckoutService
from storefront.dependencies import get_checkout_service, get_order_store
from storefront.models import Order
from storefront.order_store import OrderStore
from storefront.schemas import OrderCreate, OrderStatusUpdate

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/{user_id}", response_model=SuccessResponse[List[Order]])
async def list_orders(user_id: str, orders: OrderStore = Depends(get_order_store)):
    return SuccessResponse(data=orders.list_by_user(user_id))


@router.get("/{user_id}/{order_id}", response_model=SuccessResponse[Order])
async def get_order(user_id: str, order_id: str, orders: OrderStore = Depends(get_order_store)):
    return SuccessResponse(data=orders.get_by_id(order_id, user_id))


@router.post("/{user_id}", response_model=SuccessResponse[Order], status_code=status.HTTP_201_CREATED)
async def create_order(
    user_id: str,
    order_in: Optional[OrderCreate] = None,
    checkout: CheckoutService = Depends(get_checkout_service),
):
    order_in = order_in or OrderCreate()
    order = checkout.checkout(
        user_id,
        order_in.shipping_address,
        payment_method=order_in.payment_method,
    )
    return SuccessResponse(data=order, message="Order created successfully")


@router.patch("/{user_id}/{order_id}/status", response_model=SuccessResponse[Order])
async def update_order_status(
    user_id: str,
    order_id: str,
    status_update: OrderStatusUpdate,
    orders: OrderStore = Depends(get_order_store),
):
    order = orders.update_status(order_id, user_id, status_update.status)
    return SuccessResponse(data=order, message="Order status updated")
