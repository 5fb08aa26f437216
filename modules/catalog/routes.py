"""
Catalog Routes
================
Public product list (search, price range, sort) and product detail.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from common.api_client import ApiClient
from common.exceptions import ValidationError
from common.helpers import safe_decimal
from modules.auth.deps import get_api
from modules.catalog.models import ProductQuery, ProductSort
from modules.catalog.service import catalog_service

router = APIRouter(tags=["catalog"])


# ==========================================
# 🛍️ Product List
# ==========================================

@router.get("/products")
async def product_list(
    search: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None),
    max_price: Optional[str] = Query(None),
    sort: str = Query("latest"),
    api: ApiClient = Depends(get_api),
):
    try:
        sort_key = ProductSort(sort)
    except ValueError:
        sort_key = ProductSort.LATEST

    low = safe_decimal(min_price)
    high = safe_decimal(max_price)
    if (low is not None and low < 0) or (high is not None and high < 0):
        raise ValidationError("Price filters cannot be negative")

    query = ProductQuery(search=search, min_price=low, max_price=high, sort=sort_key)
    products = catalog_service.list_products(api, query)
    return {
        "success": True,
        "message": "",
        "data": {
            "products": products,
            "count": len(products),
            "query": query.model_dump(mode="json"),
        },
    }


# ==========================================
# 📦 Product Detail
# ==========================================

@router.get("/products/{product_id}")
async def product_detail(product_id: str, api: ApiClient = Depends(get_api)):
    product = catalog_service.get_product(api, product_id)
    return {
        "success": True,
        "message": "",
        "data": {"product": product, "in_stock": product.in_stock},
    }
