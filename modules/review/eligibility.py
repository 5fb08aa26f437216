"""
Review Module - Eligibility Gate
==================================
A buyer may review a product only once at least one of their orders that
contains it has been delivered. That order is what the review is
attributed to:

  - none   → composition blocked, with the reason shown
  - one    → selected automatically
  - several → the buyer picks one, and the pick must be among them

The "verified purchase" badge is decided by the API, not here.
"""

from typing import List, Optional

from common.api_client import ApiClient
from common.exceptions import ReviewNotAllowedError, ValidationError
from modules.order.models import Order, OrderStatus
from modules.order.service import OrderService, order_service

NO_DELIVERED_ORDER = "You can review this product once an order containing it has been delivered."
ALREADY_REVIEWED = "You have already reviewed this product."


def delivered_orders_with(orders: List[Order], product_id: str) -> List[Order]:
    return [
        o for o in orders
        if o.status == OrderStatus.DELIVERED and o.contains_product(product_id)
    ]


class ReviewEligibility:

    def __init__(self, product_id: str, orders: List[Order], existing_review_id: Optional[str] = None):
        self.product_id = product_id
        self.orders = orders
        self.existing_review_id = existing_review_id

    @property
    def can_review(self) -> bool:
        return bool(self.orders) and not self.existing_review_id

    @property
    def reason(self) -> str:
        if self.existing_review_id:
            return ALREADY_REVIEWED
        if not self.orders:
            return NO_DELIVERED_ORDER
        return ""

    @property
    def auto_selected(self) -> Optional[str]:
        return self.orders[0].id if len(self.orders) == 1 else None

    @property
    def needs_choice(self) -> bool:
        return len(self.orders) > 1

    def select(self, order_id: Optional[str] = None) -> str:
        """The order the review is attributed to. Raises when composition is blocked."""
        if not self.can_review:
            raise ReviewNotAllowedError(self.reason)
        if not order_id:
            if self.auto_selected:
                return self.auto_selected
            raise ValidationError("Please choose which order this review is for")
        if order_id not in {o.id for o in self.orders}:
            raise ValidationError("That order has no delivered purchase of this product")
        return order_id

    def as_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "can_review": self.can_review,
            "reason": self.reason,
            "auto_selected_order_id": self.auto_selected,
            "needs_choice": self.needs_choice,
            "existing_review_id": self.existing_review_id,
            "orders": [
                {"id": o.id, "order_number": o.order_number, "delivered_at": o.delivered_at}
                for o in self.orders
            ],
        }


def check_eligibility(
    api: ApiClient,
    product_id: str,
    orders: OrderService = order_service,
    existing_review_id: Optional[str] = None,
) -> ReviewEligibility:
    """
    Build the gate from the buyer's order history.
    The list endpoint may omit item lines, so delivered orders without
    items are read again through the detail endpoint.
    """
    history = [
        orders.get_order(api, o.id) if o.status == OrderStatus.DELIVERED and not o.items else o
        for o in orders.get_orders(api)
    ]
    return ReviewEligibility(product_id, delivered_orders_with(history, product_id), existing_review_id)
