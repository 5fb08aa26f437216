"""
Cart Module - Models
=====================
Server-side cart as returned by the remote API.
Product fields on each line are a snapshot taken when the cart was fetched.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class CartItem(BaseModel):
    id: str
    cart_id: Optional[str] = None
    product_id: str
    product_name: str = ""
    product_price: Decimal = Decimal("0")
    product_image_url: Optional[str] = None
    stock_quantity: int = 0
    is_active: bool = True
    shop_id: Optional[str] = None
    shop_name: str = ""
    quantity: int = Field(ge=1)
    subtotal: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def expected_subtotal(self) -> Decimal:
        return self.product_price * self.quantity


class Cart(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    items: List[CartItem] = Field(default_factory=list)
    item_count: int = 0
    subtotal: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("items", mode="before")
    @classmethod
    def _null_items(cls, v):
        # An empty cart arrives as "items": null
        return [] if v is None else v

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def get_item(self, item_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def consistency_errors(self) -> List[str]:
        """Invariant violations in a server payload (empty list when consistent)."""
        errors = []
        qty = sum(it.quantity for it in self.items)
        if self.item_count != qty:
            errors.append(f"item_count {self.item_count} != sum of quantities {qty}")
        total = sum((it.subtotal for it in self.items), Decimal("0"))
        if self.subtotal != total:
            errors.append(f"subtotal {self.subtotal} != sum of line subtotals {total}")
        for it in self.items:
            if it.subtotal != it.expected_subtotal:
                errors.append(f"line {it.id}: subtotal {it.subtotal} != {it.product_price} x {it.quantity}")
        return errors


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)
    # Stock as shown on the product page, used only as a client-side guard
    stock_quantity: Optional[int] = None


class UpdateCartItemRequest(BaseModel):
    quantity: int
