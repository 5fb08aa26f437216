"""
Card (hosted payment page)
===========================
The API creates a provisional order plus a hosted checkout session and
returns its URL. The buyer pays off-site and comes back with a session_id,
which is checked against GET /orders/checkout/verify.

The provisional order's total is not shown here; the order is only
final once the payment provider confirms it server-side.
"""

import logging

from pydantic import ValidationError as PayloadError

from common.api_client import ApiClient
from common.exceptions import NepifyError
from modules.payment.gateways import (
    BaseGateway, GatewayCreateResult, GatewayVerifyResult,
    OrderPlacement, register_gateway,
)
from modules.payment.models import PaymentSession

logger = logging.getLogger("nepify.gateway.card")

CARD_CHECKOUT_ENDPOINT = "/orders/checkout/card"
CARD_VERIFY_ENDPOINT = "/orders/checkout/verify"


class CardGateway(BaseGateway):
    name = "card"
    label = "Card"
    redirects = True

    def place_order(self, api: ApiClient, placement: OrderPlacement) -> GatewayCreateResult:
        resp = api.post(CARD_CHECKOUT_ENDPOINT, placement.to_body())
        data = resp.data if isinstance(resp.data, dict) else {}
        checkout_url = data.get("checkout_url")
        if not resp.success:
            return GatewayCreateResult(
                success=False,
                error_message=resp.error or resp.message or "Could not start card payment",
            )
        if not checkout_url:
            return GatewayCreateResult(success=False, error_message="Could not start card payment")

        order_ref = (data.get("order") or {}).get("order_number", "")
        logger.info(f"Card checkout session created for order {order_ref or '?'}")
        return GatewayCreateResult(success=True, redirect_url=checkout_url)

    def verify_session(self, api: ApiClient, session_id: str) -> GatewayVerifyResult:
        try:
            resp = api.get(CARD_VERIFY_ENDPOINT, params={"session_id": session_id})
        except NepifyError as e:
            logger.warning(f"Card verify [{session_id}] failed: {e.message}")
            return GatewayVerifyResult(success=False, error_message=e.message)

        if not resp.success or not isinstance(resp.data, dict):
            return GatewayVerifyResult(
                success=False,
                error_message=resp.error or resp.message or "Session not verified",
            )

        try:
            session = PaymentSession.model_validate({"session_id": session_id, **resp.data})
        except PayloadError as e:
            logger.warning(f"Card verify [{session_id}]: unreadable session payload ({e.error_count()} invalid field(s))")
            return GatewayVerifyResult(success=False, error_message="Session not verified")
        logger.info(f"Card verify [{session_id}]: {session.payment_status} (order {session.order_number})")
        return GatewayVerifyResult(success=True, session=session)


register_gateway(CardGateway())
