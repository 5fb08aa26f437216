"""
Cart Module - Service Layer
==============================
Thin wrappers over the remote cart endpoints.
Local state (the mirror) lives in modules/cart/state.py.
"""

from typing import Optional

from common.api_client import ApiClient, ApiResponse
from modules.cart.models import Cart


class CartService:

    def fetch_cart(self, api: ApiClient) -> Optional[Cart]:
        """GET /cart. Returns None when the envelope carries no cart."""
        resp = api.get("/cart")
        if resp.success and resp.data:
            return Cart.model_validate(resp.data)
        return None

    def add_item(self, api: ApiClient, product_id: str, quantity: int) -> ApiResponse:
        return api.post("/cart/items", {"product_id": product_id, "quantity": quantity})

    def update_item(self, api: ApiClient, item_id: str, quantity: int) -> ApiResponse:
        return api.put(f"/cart/items/{item_id}", {"quantity": quantity})

    def remove_item(self, api: ApiClient, item_id: str) -> ApiResponse:
        return api.delete(f"/cart/items/{item_id}")

    def clear_cart(self, api: ApiClient) -> ApiResponse:
        return api.delete("/cart")


cart_service = CartService()
