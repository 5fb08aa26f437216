"""
Order Module - Vendor Routes
==============================
Orders for the vendor's shop: list with status filter, status changes.
Only the legal next statuses are offered per order.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from common.api_client import ApiClient
from modules.auth.deps import require_login
from modules.order.models import Order, StatusUpdateRequest
from modules.order.service import order_service
from modules.order.workflow import next_statuses

router = APIRouter(tags=["order-vendor"])


def _vendor_view(order: Order) -> dict:
    return {
        "order": order,
        "status_label": order.status_label,
        "next_statuses": [s.value for s in next_statuses(order.status)],
    }


@router.get("/vendor/orders")
async def vendor_orders(
    status: Optional[str] = Query(None),
    api: ApiClient = Depends(require_login),
):
    orders = order_service.get_vendor_orders(api)
    counts = order_service.status_counts(orders)
    orders = order_service.filter_by_status(orders, status)
    return {
        "success": True,
        "message": "",
        "data": {
            "orders": [_vendor_view(o) for o in orders],
            "counts": counts,
            "status_filter": status or "all",
        },
    }


@router.post("/vendor/orders/{order_id}/status")
async def vendor_update_status(
    order_id: str,
    data: StatusUpdateRequest,
    api: ApiClient = Depends(require_login),
):
    order = order_service.update_status(api, order_id, data.status)
    return {
        "success": True,
        "message": f"Order marked as {order.status_label.lower()}",
        "data": _vendor_view(order),
    }
