"""
Payment Service
=================
Checkout dispatch + hosted-payment reconciliation.

Two payment methods, both registered in modules.payment.gateways:
  - cash_on_delivery: POST /orders, the order is final immediately
  - card: POST /orders/checkout/card, the buyer is sent to a hosted page

After a card payment the buyer lands on /payment/success?session_id=...
and the session is checked once. A failed or unclear check is reported as
UNCONFIRMED, never as a failure: the provider may still confirm the
payment server-side.
"""

import logging
from typing import List, Optional

from common.api_client import ApiClient
from common.exceptions import (
    AddressValidationError, ApiRequestError, EmptyCartError, ValidationError,
)
from modules.cart.state import CartState
from modules.customer.address_models import AddressInput
from modules.order.models import CheckoutRequest, PaymentMethod
from modules.payment.models import (
    CheckoutResult, PaymentOutcome, PaymentSession, ReconcileStatus,
)

# Import method modules to trigger register_gateway() calls
from modules.payment.gateways import OrderPlacement, get_all_gateway_names, get_gateway
import modules.payment.gateways.cod    # noqa: F401
import modules.payment.gateways.card   # noqa: F401

logger = logging.getLogger("nepify.payment")

UNCONFIRMED_MESSAGE = (
    "We couldn't confirm your payment yet. If it went through, your order "
    "will be updated shortly. Please check your orders page."
)


class PaymentService:

    # ==========================================
    # 🔧 Method Selection
    # ==========================================

    def get_enabled_methods(self) -> List[dict]:
        methods = []
        for name in get_all_gateway_names():
            gw = get_gateway(name)
            methods.append({"name": gw.name, "label": gw.label, "redirects": gw.redirects})
        return methods

    # ==========================================
    # 🧾 Order Body
    # ==========================================

    def build_placement(self, data: CheckoutRequest) -> OrderPlacement:
        """Validate the submitted checkout form and turn it into an order body."""
        if data.address_mode == "saved":
            if not data.shipping_address_id:
                raise ValidationError("Please choose a shipping address")
            shipping = {"shipping_address_id": data.shipping_address_id}
        elif data.address_mode == "new":
            shipping = {"shipping_address": self._clean_address(data.shipping_address).model_dump()}
        else:
            raise ValidationError(f"Unknown address mode: {data.address_mode}")

        billing = None
        if not data.use_same_address:
            if data.billing_address is None:
                raise ValidationError("Please enter a billing address or use the shipping address")
            billing = self._clean_address(data.billing_address).model_dump()
            billing["is_default"] = False

        notes = data.notes.strip() if data.notes else None
        return OrderPlacement(
            shipping=shipping,
            payment_method=data.payment_method.value,
            use_same_address=data.use_same_address,
            billing_address=billing,
            notes=notes or None,
        )

    # ==========================================
    # 🛒 Checkout
    # ==========================================

    def checkout(
        self,
        api: ApiClient,
        data: CheckoutRequest,
        cart_state: Optional[CartState] = None,
    ) -> CheckoutResult:
        """
        Place the order with the selected payment method.

        Raises:
            EmptyCartError: nothing in the cart (checked before any order call)
            ValidationError: address / form problems
            ApiRequestError: the API refused the order
        """
        cart_state = cart_state or CartState(api)
        cart = cart_state.refresh()
        if cart is None or cart.is_empty:
            raise EmptyCartError()

        placement = self.build_placement(data)
        gw = get_gateway(data.payment_method.value)
        if not gw:
            raise ValidationError(f"Payment method {data.payment_method.value} is not available")

        result = gw.place_order(api, placement)
        if not result.success:
            raise ApiRequestError(result.error_message or "Failed to place order")

        if data.payment_method == PaymentMethod.CARD:
            return CheckoutResult(
                payment_method=gw.name,
                checkout_url=result.redirect_url,
                redirect=result.redirect_url,
            )

        order = result.order
        if not order.total_is_consistent:
            logger.warning(
                f"Order {order.order_number}: total {order.total} != "
                f"subtotal+shipping+tax-discount {order.expected_total}"
            )
        # The server empties the cart once the order exists
        cart_state.refresh()
        return CheckoutResult(payment_method=gw.name, order=order, redirect=result.next_path)

    # ==========================================
    # 🔁 Payment Return
    # ==========================================

    def reconcile(self, api: ApiClient, session_id: Optional[str]) -> PaymentOutcome:
        """Check a hosted-payment session once. Never raises."""
        if not session_id or not session_id.strip():
            return PaymentOutcome(ReconcileStatus.UNCONFIRMED, UNCONFIRMED_MESSAGE)

        session_id = session_id.strip()
        gw = get_gateway(PaymentMethod.CARD.value)
        result = gw.verify_session(api, session_id)
        if not result.success:
            return PaymentOutcome(
                ReconcileStatus.UNCONFIRMED,
                UNCONFIRMED_MESSAGE,
                PaymentSession(session_id=session_id),
            )

        session = result.session
        ref = session.order_number or session.order_id
        label = f"Order {ref}" if ref else "Your order"
        if session.is_paid:
            message = f"Payment received. {label} is confirmed."
        else:
            message = f"{label} was placed. Payment status: {session.payment_status or 'pending'}."
        return PaymentOutcome(ReconcileStatus.CONFIRMED, message, session)

    # ==========================================
    # Private helpers
    # ==========================================

    def _clean_address(self, form: Optional[AddressInput]) -> AddressInput:
        form = form or AddressInput()
        missing = form.missing_fields()
        if missing:
            raise AddressValidationError(missing)
        return form.cleaned()


payment_service = PaymentService()
