from typing import Optional

from fastapi import APIRouter, Depends, status

from shared.utils import SuccessResponse
from storefront.checkout import CheckoutService, CheckoutSummary
from storefront.dependencies import get_checkout_service
from storefront.schemas import CheckoutResponse, OrderCreate, OrderTotalsSummary

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/{user_id}", response_model=SuccessResponse[CheckoutResponse], status_code=status.HTTP_201_CREATED)
async def checkout(
    user_id: str,
    checkout_in: Optional[OrderCreate] = None,
    service: CheckoutService = Depends(get_checkout_service),
):
    checkout_in = checkout_in or OrderCreate()
    order = service.checkout(
        user_id,
        checkout_in.shipping_address,
        payment_method=checkout_in.payment_method,
        require_payment_method=True,
    )
    summary = OrderTotalsSummary(
        item_count=len(order.items),
        subtotal=order.subtotal,
        shipping=order.shipping,
        tax=order.tax,
        total=order.total,
    )
    return SuccessResponse(data=CheckoutResponse(order=order, summary=summary), message="Checkout successful")


@router.get("/{user_id}/summary", response_model=SuccessResponse[CheckoutSummary])
async def checkout_summary(user_id: str, service: CheckoutService = Depends(get_checkout_service)):
    return SuccessResponse(data=service.summary(user_id))
