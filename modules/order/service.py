"""
Order Module - Service Layer
===============================
Buyer order history / cancellation and vendor fulfillment.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Union

from common.api_client import ApiClient
from common.exceptions import (
    ApiRequestError, IllegalTransitionError, NotFoundError, ValidationError,
)
from modules.order.models import Order, OrderStatus
from modules.order.workflow import buyer_can_cancel, can_transition

logger = logging.getLogger("nepify.order")


class OrderService:

    # ==========================================
    # Buyer
    # ==========================================

    def get_orders(self, api: ApiClient) -> List[Order]:
        resp = api.get("/orders")
        return [Order.model_validate(o) for o in (resp.data or [])]

    def get_order(self, api: ApiClient, order_id: str) -> Order:
        resp = api.get(f"/orders/{order_id}")
        if not resp.data:
            raise NotFoundError("Order not found")
        return Order.model_validate(resp.data)

    def cancel_order(self, api: ApiClient, order_id: str) -> Order:
        """
        Buyer cancellation. Only offered while the order is confirmed;
        anything else is rejected before calling the API.
        """
        order = self.get_order(api, order_id)
        if not buyer_can_cancel(order.status):
            raise ValidationError(f"Orders that are {order.status.value} can no longer be cancelled")

        resp = api.post(f"/orders/{order_id}/cancel")
        if not resp.success:
            raise ApiRequestError(resp.error or resp.message or "Failed to cancel order")
        logger.info(f"Order {order.order_number or order_id} cancelled by buyer")
        if resp.data:
            return Order.model_validate(resp.data)
        return order.model_copy(update={"status": OrderStatus.CANCELLED})

    # ==========================================
    # Vendor
    # ==========================================

    def get_vendor_orders(self, api: ApiClient) -> List[Order]:
        resp = api.get("/vendor/orders")
        return [Order.model_validate(o) for o in (resp.data or [])]

    def filter_by_status(self, orders: List[Order], status: Optional[str]) -> List[Order]:
        if not status or status == "all":
            return orders
        return [o for o in orders if o.status.value == status]

    def status_counts(self, orders: List[Order]) -> Dict[str, int]:
        """Per-status counts for the vendor filter tabs (every status present, plus 'all')."""
        counts = Counter(o.status.value for o in orders)
        result = {"all": len(orders)}
        for status in OrderStatus:
            result[status.value] = counts.get(status.value, 0)
        return result

    def update_status(
        self,
        api: ApiClient,
        order_id: str,
        new_status: Union[str, OrderStatus],
    ) -> Order:
        """
        Vendor status change. The local table blocks illegal moves; the
        server may still reject, which is raised as-is and not retried.
        """
        try:
            new_status = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown order status: {new_status}")
        order = self._find_vendor_order(api, order_id)
        current = order.status

        if not can_transition(current, new_status):
            raise IllegalTransitionError(current.value, new_status.value)

        resp = api.patch(f"/vendor/orders/{order_id}/status", {"status": new_status.value})
        if not resp.success:
            raise ApiRequestError(resp.error or resp.message or "Failed to update order status")

        logger.info(f"Order {order.order_number or order_id}: {current.value} -> {new_status.value}")
        if isinstance(resp.data, dict) and resp.data.get("id"):
            return Order.model_validate(resp.data)
        return order.model_copy(update={"status": new_status})

    # ==========================================
    # Private helpers
    # ==========================================

    def _find_vendor_order(self, api: ApiClient, order_id: str) -> Order:
        for order in self.get_vendor_orders(api):
            if order.id == order_id:
                return order
        raise NotFoundError("Order not found in your shop")


order_service = OrderService()
