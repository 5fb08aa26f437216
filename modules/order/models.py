"""
Order Module - Models
======================
Order with frozen address and per-item price snapshots.
"""

import enum
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from modules.customer.address_models import Address, AddressInput


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    CARD = "card"
    CASH_ON_DELIVERY = "cash_on_delivery"


STATUS_LABELS = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
    OrderStatus.REFUNDED: "Refunded",
}


class OrderItem(BaseModel):
    id: Optional[str] = None
    order_id: Optional[str] = None
    product_id: str
    product_name: str = ""
    product_image_url: Optional[str] = None
    shop_id: Optional[str] = None
    shop_name: str = ""
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    created_at: Optional[datetime] = None


class Order(BaseModel):
    id: str
    user_id: Optional[str] = None
    order_number: str = ""
    status: OrderStatus
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    items: List[OrderItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    payment_method: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    @field_validator("items", mode="before")
    @classmethod
    def _null_items(cls, v):
        return [] if v is None else v

    @property
    def status_label(self) -> str:
        return STATUS_LABELS.get(self.status, self.status.value)

    @property
    def expected_total(self) -> Decimal:
        """subtotal + shipping + tax − discount."""
        return self.subtotal + self.shipping_cost + self.tax - self.discount

    @property
    def total_is_consistent(self) -> bool:
        return self.total == self.expected_total

    def contains_product(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)


class CheckoutRequest(BaseModel):
    """What the checkout form submits."""
    address_mode: str = "saved"
    shipping_address_id: Optional[str] = None
    shipping_address: Optional[AddressInput] = None
    billing_address: Optional[AddressInput] = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    use_same_address: bool = True
    notes: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: OrderStatus
