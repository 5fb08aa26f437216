"""
Payment Routes
================
Checkout page data, order placement, hosted-payment return pages.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from common.api_client import ApiClient
from common.flash import flash
from modules.auth.deps import get_api, require_login
from modules.cart.state import CartState
from modules.customer.address_resolution import resolve_checkout_address
from modules.order.models import CheckoutRequest
from modules.payment.service import payment_service

router = APIRouter(tags=["payment"])


# ==========================================
# 🧾 Checkout Page
# ==========================================

@router.get("/checkout")
async def checkout_page(api: ApiClient = Depends(require_login)):
    """Cart snapshot, the resolved starting address and the payment options."""
    state = CartState(api)
    cart = state.refresh()
    resolution = resolve_checkout_address(api)
    can_checkout = cart is not None and not cart.is_empty
    return {
        "success": True,
        "message": "" if can_checkout else "Your cart is empty",
        "data": {
            "cart": cart,
            "can_checkout": can_checkout,
            "address": resolution.as_dict(),
            "payment_methods": payment_service.get_enabled_methods(),
        },
    }


# ==========================================
# 🛒 Place Order
# ==========================================

@router.post("/checkout")
async def place_order(data: CheckoutRequest, api: ApiClient = Depends(require_login)):
    result = payment_service.checkout(api, data)
    if result.checkout_url:
        message = "Redirecting to secure payment"
    else:
        message = f"Order {result.order.order_number} placed"
    return {"success": True, "message": message, "data": result.as_dict()}


# ==========================================
# 🏦 Hosted Payment: Return Pages
# ==========================================

@router.get("/payment/success")
async def payment_success(
    request: Request,
    session_id: Optional[str] = Query(None),
    api: ApiClient = Depends(get_api),
):
    """
    The payment page sends the buyer back here. One check, then redirect.
    A missing token is not an error: the verify call is refused and the
    outcome is unconfirmed.
    """
    outcome = payment_service.reconcile(api, session_id)
    flash(request, outcome.message, "success" if outcome.confirmed else "warning")
    return RedirectResponse(outcome.redirect_path, status_code=303)


@router.get("/payment/cancel")
async def payment_cancel(request: Request):
    flash(request, "Payment cancelled. Your cart is unchanged.", "info")
    return RedirectResponse("/cart", status_code=303)
