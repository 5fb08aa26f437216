"""
Cart Routes
=============
Cart view and item mutations (JSON, for the front-end).
Every mutation answers with the freshly refetched cart.
"""

from fastapi import APIRouter, Depends

from common.api_client import ApiClient
from modules.auth.deps import get_api, require_login
from modules.cart.models import AddToCartRequest, UpdateCartItemRequest
from modules.cart.state import CartState

router = APIRouter(tags=["cart"])


def _cart_payload(state: CartState, message: str = "") -> dict:
    return {
        "success": True,
        "message": message,
        "data": {
            "status": state.status.value,
            "cart": state.cart,
            "cart_count": state.count,
        },
    }


# ==========================================
# 🛒 View Cart
# ==========================================

@router.get("/cart")
async def view_cart(api: ApiClient = Depends(get_api)):
    """Anonymous visitors get an 'unauthenticated' status and no cart."""
    state = CartState(api)
    state.refresh()
    return _cart_payload(state)


# ==========================================
# ➕ Add Item
# ==========================================

@router.post("/cart/items")
async def add_cart_item(data: AddToCartRequest, api: ApiClient = Depends(require_login)):
    state = CartState(api)
    # Load current line quantities so the stock guard sees what is already in the cart
    state.refresh()
    state.add(data.product_id, data.quantity, stock_quantity=data.stock_quantity)
    return _cart_payload(state, "Added to cart")


# ==========================================
# ➕➖ Update Quantity
# ==========================================

@router.put("/cart/items/{item_id}")
async def update_cart_item(
    item_id: str,
    data: UpdateCartItemRequest,
    api: ApiClient = Depends(require_login),
):
    state = CartState(api)
    if data.quantity >= 1:
        state.refresh()
    state.update_quantity(item_id, data.quantity)
    return _cart_payload(state, "Cart updated")


# ==========================================
# 🗑️ Remove / Clear
# ==========================================

@router.delete("/cart/items/{item_id}")
async def remove_cart_item(item_id: str, api: ApiClient = Depends(require_login)):
    state = CartState(api)
    state.remove(item_id)
    return _cart_payload(state, "Item removed")


@router.delete("/cart")
async def clear_cart(api: ApiClient = Depends(require_login)):
    state = CartState(api)
    state.clear()
    return _cart_payload(state, "Cart cleared")
