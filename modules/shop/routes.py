"""
Shop Routes
=============
Public: shop list, shop by id or slug, slug preview.
Vendor: create shop, my shop, my shop stats.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from common.api_client import ApiClient
from modules.auth.deps import get_api, require_login
from modules.shop.models import ShopCreate
from modules.shop.service import shop_service

router = APIRouter(tags=["shops"])


# ==========================================
# 🏪 Create Shop
# ==========================================

@router.post("/shops", status_code=201)
async def create_shop(data: ShopCreate, api: ApiClient = Depends(require_login)):
    shop = shop_service.create_shop(api, data)
    return {"success": True, "message": f"Shop {shop.name} created", "data": shop}


@router.get("/shops/slug-preview")
async def slug_preview(name: str = Query("")):
    return {"success": True, "message": "", "data": {"slug": shop_service.preview_slug(name)}}


# ==========================================
# 👤 My Shop
# ==========================================

@router.get("/shops/my")
async def my_shop(api: ApiClient = Depends(require_login)):
    shop = shop_service.get_my_shop(api)
    return {
        "success": True,
        "message": "" if shop else "You have not created a shop yet",
        "data": {"shop": shop, "has_shop": shop is not None},
    }


@router.get("/shops/my/stats")
async def my_shop_stats(api: ApiClient = Depends(require_login)):
    return {"success": True, "message": "", "data": shop_service.get_my_stats(api)}


# ==========================================
# 🔎 Browse Shops
# ==========================================

@router.get("/shops")
async def shop_list(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
    active: bool = Query(False),
    api: ApiClient = Depends(get_api),
):
    result = shop_service.list_shops(api, page, page_size, search, active)
    return {"success": True, "message": "", "data": result}


@router.get("/shops/slug/{slug}")
async def shop_by_slug(slug: str, api: ApiClient = Depends(get_api)):
    return {"success": True, "message": "", "data": shop_service.get_shop_by_slug(api, slug)}


@router.get("/shops/{shop_id}")
async def shop_detail(shop_id: str, api: ApiClient = Depends(get_api)):
    return {"success": True, "message": "", "data": shop_service.get_shop(api, shop_id)}
