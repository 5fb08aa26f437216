"""
Order Routes
==============
Buyer: order history, order detail, cancellation.
"""

from fastapi import APIRouter, Depends

from common.api_client import ApiClient
from modules.auth.deps import require_login
from modules.order.models import Order
from modules.order.service import order_service
from modules.order.workflow import buyer_can_cancel

router = APIRouter(tags=["orders"])


def _buyer_view(order: Order) -> dict:
    return {
        "order": order,
        "status_label": order.status_label,
        "can_cancel": buyer_can_cancel(order.status),
    }


# ==========================================
# 📋 My Orders
# ==========================================

@router.get("/orders")
async def my_orders(api: ApiClient = Depends(require_login)):
    orders = order_service.get_orders(api)
    return {"success": True, "message": "", "data": [_buyer_view(o) for o in orders]}


# ==========================================
# 🧾 Order Detail
# ==========================================

@router.get("/orders/{order_id}")
async def order_detail(order_id: str, api: ApiClient = Depends(require_login)):
    order = order_service.get_order(api, order_id)
    return {"success": True, "message": "", "data": _buyer_view(order)}


# ==========================================
# ❌ Cancel Order
# ==========================================

@router.post("/orders/{order_id}/cancel")
async def cancel_order(order_id: str, api: ApiClient = Depends(require_login)):
    order = order_service.cancel_order(api, order_id)
    return {"success": True, "message": "Order cancelled", "data": _buyer_view(order)}
