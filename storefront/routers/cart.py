from typing import List

from fastapi import APIRouter, Depends

from shared.utils import SuccessResponse
from storefront.cart_store import CartStore
from storefront.catalog import Catalog
from storefront.dependencies import get_cart_store, get_catalog
from storefront.models import CartItem
from storefront.pricing import calculate_totals
from storefront.schemas import CartItemAdd, CartItemUpdate, CartLineResponse, CartResponse

router = APIRouter(prefix="/cart", tags=["cart"])


def build_cart_response(user_id: str, items: List[CartItem], catalog: Catalog) -> CartResponse:
    """Enrich cart lines with product details; lines whose product vanished are hidden."""
    lines = []
    for item in items:
        product = catalog.get(item.product_id)
        if product is None:
            continue
        lines.append(CartLineResponse(product_id=item.product_id, quantity=item.quantity, product=product))

    subtotal = calculate_totals((line.product.price, line.quantity) for line in lines).subtotal
    return CartResponse(
        user_id=user_id,
        items=lines,
        item_count=sum(line.quantity for line in lines),
        subtotal=subtotal,
    )


@router.get("/{user_id}", response_model=SuccessResponse[CartResponse])
async def get_cart(
    user_id: str,
    carts: CartStore = Depends(get_cart_store),
    catalog: Catalog = Depends(get_catalog),
):
    return SuccessResponse(data=build_cart_response(user_id, carts.get(user_id), catalog))


@router.post("/{user_id}/items", response_model=SuccessResponse[CartResponse])
async def add_to_cart(
    user_id: str,
    item: CartItemAdd,
    carts: CartStore = Depends(get_cart_store),
    catalog: Catalog = Depends(get_catalog),
):
    items = carts.add(user_id, item.product_id, item.quantity)
    return SuccessResponse(data=build_cart_response(user_id, items, catalog), message="Item added to cart")


@router.put("/{user_id}/items/{product_id}", response_model=SuccessResponse[CartResponse])
async def update_cart_item(
    user_id: str,
    product_id: str,
    update: CartItemUpdate,
    carts: CartStore = Depends(get_cart_store),
    catalog: Catalog = Depends(get_catalog),
):
    items = carts.set_quantity(user_id, product_id, update.quantity)
    return SuccessResponse(data=build_cart_response(user_id, items, catalog), message="Quantity updated")


@router.delete("/{user_id}/items/{product_id}", response_model=SuccessResponse[CartResponse])
async def remove_cart_item(
    user_id: str,
    product_id: str,
    carts: CartStore = Depends(get_cart_store),
    catalog: Catalog = Depends(get_catalog),
):
    items = carts.remove(user_id, product_id)
    return SuccessResponse(data=build_cart_response(user_id, items, catalog), message="Item removed from cart")


@router.delete("/{user_id}", response_model=SuccessResponse[dict])
async def clear_cart(user_id: str, carts: CartStore = Depends(get_cart_store)):
    carts.clear(user_id)
    return SuccessResponse(message="Cart cleared")
