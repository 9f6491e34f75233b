from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from shared.security_config import limiter
from shared.utils import SuccessResponse
from storefront.catalog import Catalog
from storefront.dependencies import get_catalog
from storefront.models import Product
from storefront.schemas import ProductListResponse

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=SuccessResponse[ProductListResponse])
@limiter.limit("60/minute")
async def list_products(
    request: Request,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    catalog: Catalog = Depends(get_catalog),
):
    products = catalog.list_products(
        category=category, search=search, min_price=min_price, max_price=max_price
    )
    return SuccessResponse(data=ProductListResponse(products=products, total=len(products)))


@router.get("/categories/list", response_model=SuccessResponse[List[str]])
async def list_categories(catalog: Catalog = Depends(get_catalog)):
    return SuccessResponse(data=catalog.categories())


@router.get("/{product_id}", response_model=SuccessResponse[Product])
@limiter.limit("60/minute")
async def get_product(product_id: str, request: Request, catalog: Catalog = Depends(get_catalog)):
    return SuccessResponse(data=catalog.require(product_id))
