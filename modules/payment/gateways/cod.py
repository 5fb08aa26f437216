"""
Cash on Delivery
=================
The order is created and final in one call; nothing to verify later.
"""

import logging

from common.api_client import ApiClient
from modules.order.models import Order
from modules.payment.gateways import (
    BaseGateway, GatewayCreateResult, OrderPlacement, register_gateway,
)

logger = logging.getLogger("nepify.gateway.cod")


class CashOnDeliveryGateway(BaseGateway):
    name = "cash_on_delivery"
    label = "Cash on Delivery"

    def place_order(self, api: ApiClient, placement: OrderPlacement) -> GatewayCreateResult:
        resp = api.post("/orders", placement.to_body())
        if not resp.success:
            return GatewayCreateResult(
                success=False,
                error_message=resp.error or resp.message or "Failed to place order",
            )
        if not resp.data:
            return GatewayCreateResult(success=False, error_message="Order was not returned by the server")

        order = Order.model_validate(resp.data)
        logger.info(f"COD order placed: {order.order_number or order.id}")
        return GatewayCreateResult(success=True, order=order, next_path=f"/orders/{order.id}")


register_gateway(CashOnDeliveryGateway())
