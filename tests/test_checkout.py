"""Tests for checkout dispatch (cash on delivery / card) and payment return handling."""

import logging

import httpx
import pytest

from common.exceptions import (
    AddressValidationError, ApiRequestError, EmptyCartError, ValidationError,
)
from modules.customer.address_models import AddressInput
from modules.order.models import CheckoutRequest, PaymentMethod
from modules.payment.models import ReconcileStatus
from modules.payment.service import UNCONFIRMED_MESSAGE, payment_service
from conftest import envelope, make_cart, make_cart_item, make_order


@pytest.fixture
def server_cart(fake_api):
    store = {"cart": make_cart(make_cart_item())}
    fake_api.on("GET", "/cart", lambda call: envelope(store["cart"]))
    return store


def _new_address(**overrides):
    data = dict(full_name="Sita Sharma", phone="9800000000", address_line1="Thamel Marg 12", city="Kathmandu")
    data.update(overrides)
    return AddressInput(**data)


class TestCashOnDelivery:
    def test_order_created_directly(self, fake_api, api, server_cart):
        def place(call):
            server_cart["cart"] = make_cart()
            return (201, envelope(make_order("o42", status="pending")))

        fake_api.on("POST", "/orders", place)
        result = payment_service.checkout(api, CheckoutRequest(
            address_mode="saved", shipping_address_id="a1",
            payment_method=PaymentMethod.CASH_ON_DELIVERY,
        ))

        body = fake_api.calls_to("POST", "/orders")[0].json
        assert body == {
            "shipping_address_id": "a1",
            "payment_method": "cash_on_delivery",
            "use_same_address": True,
        }
        assert result.order.id == "o42"
        assert result.redirect == "/orders/o42"
        assert result.checkout_url is None
        assert fake_api.calls_to("POST", "/orders/checkout/card") == []
        # the cart is refetched once the order exists
        assert len(fake_api.calls_to("GET", "/cart")) == 2

    def test_new_address_sent_inline(self, fake_api, api, server_cart):
        fake_api.on("POST", "/orders", envelope(make_order("o1")), status=201)
        payment_service.checkout(api, CheckoutRequest(
            address_mode="new", shipping_address=_new_address(is_default=True),
            notes="  Leave at the gate ",
        ))
        body = fake_api.calls_to("POST", "/orders")[0].json
        assert "shipping_address_id" not in body
        assert body["shipping_address"]["city"] == "Kathmandu"
        assert body["shipping_address"]["is_default"] is True
        assert body["notes"] == "Leave at the gate"

    def test_separate_billing_address(self, fake_api, api, server_cart):
        fake_api.on("POST", "/orders", envelope(make_order("o1")), status=201)
        payment_service.checkout(api, CheckoutRequest(
            shipping_address_id="a1", use_same_address=False,
            billing_address=_new_address(city="Lalitpur", is_default=True),
        ))
        body = fake_api.calls_to("POST", "/orders")[0].json
        assert body["use_same_address"] is False
        assert body["billing_address"]["city"] == "Lalitpur"
        assert body["billing_address"]["is_default"] is False

    def test_inconsistent_total_logged(self, fake_api, api, server_cart, caplog):
        fake_api.on("POST", "/orders", envelope(make_order("o1", total="1")), status=201)
        with caplog.at_level(logging.WARNING, logger="nepify.payment"):
            payment_service.checkout(api, CheckoutRequest(shipping_address_id="a1"))
        assert "total 1" in caplog.text

    def test_server_rejection_surfaces(self, fake_api, api, server_cart):
        fake_api.on("POST", "/orders",
                    envelope(success=False, error="insufficient stock for Shawl: only 1 available"), status=400)
        with pytest.raises(ApiRequestError) as exc:
            payment_service.checkout(api, CheckoutRequest(shipping_address_id="a1"))
        assert exc.value.message == "insufficient stock for Shawl: only 1 available"


class TestCard:
    def test_redirect_url_without_total(self, fake_api, api, server_cart):
        fake_api.on("POST", "/orders/checkout/card", envelope({
            "order": make_order("o7", status="pending"),
            "checkout_url": "https://pay.example/cs_123",
        }), status=201)

        result = payment_service.checkout(api, CheckoutRequest(
            shipping_address_id="a1", payment_method=PaymentMethod.CARD,
        ))

        assert result.checkout_url == "https://pay.example/cs_123"
        assert result.redirect == "https://pay.example/cs_123"
        assert result.order is None
        assert fake_api.calls_to("POST", "/orders") == []
        assert fake_api.calls_to("POST", "/orders/checkout/card")[0].json["payment_method"] == "card"

    def test_missing_checkout_url_is_error(self, fake_api, api, server_cart):
        fake_api.on("POST", "/orders/checkout/card", envelope({"order": make_order()}), status=201)
        with pytest.raises(ApiRequestError):
            payment_service.checkout(api, CheckoutRequest(
                shipping_address_id="a1", payment_method=PaymentMethod.CARD,
            ))


class TestCheckoutGuards:
    def test_empty_cart_never_submits(self, fake_api, api):
        fake_api.on("GET", "/cart", envelope(make_cart()))
        with pytest.raises(EmptyCartError):
            payment_service.checkout(api, CheckoutRequest(shipping_address_id="a1"))
        assert fake_api.calls_to("POST", "/orders") == []

    def test_null_items_is_empty_cart(self, fake_api, api):
        fake_api.on("GET", "/cart", envelope({"id": "c1", "items": None, "item_count": 0, "subtotal": "0"}))
        with pytest.raises(EmptyCartError):
            payment_service.checkout(api, CheckoutRequest(shipping_address_id="a1"))
        assert fake_api.calls_to("POST", "/orders") == []

    def test_saved_mode_needs_address_id(self, api, server_cart):
        with pytest.raises(ValidationError):
            payment_service.checkout(api, CheckoutRequest(address_mode="saved"))

    def test_new_mode_missing_fields(self, fake_api, api, server_cart):
        with pytest.raises(AddressValidationError) as exc:
            payment_service.checkout(api, CheckoutRequest(
                address_mode="new", shipping_address=AddressInput(full_name="Sita"),
            ))
        assert "phone" in exc.value.missing
        assert fake_api.calls_to("POST", "/orders") == []

    def test_billing_required_when_not_same(self, api, server_cart):
        with pytest.raises(ValidationError):
            payment_service.checkout(api, CheckoutRequest(shipping_address_id="a1", use_same_address=False))


class TestReconcile:
    def test_paid_session_confirmed(self, fake_api, api):
        fake_api.on("GET", "/orders/checkout/verify", envelope({
            "session_id": "cs_1", "payment_status": "paid",
            "order_id": "o7", "order_number": "ORD-20260101-o7",
        }))
        outcome = payment_service.reconcile(api, "cs_1")

        assert outcome.status == ReconcileStatus.CONFIRMED
        assert outcome.redirect_path == "/orders/o7"
        assert "ORD-20260101-o7" in outcome.message
        assert fake_api.calls[0].params == {"session_id": "cs_1"}

    def test_unpaid_session_still_confirmed(self, fake_api, api):
        fake_api.on("GET", "/orders/checkout/verify", envelope({
            "session_id": "cs_1", "payment_status": "unpaid", "order_id": "o7", "order_number": "N1",
        }))
        outcome = payment_service.reconcile(api, "cs_1")
        assert outcome.confirmed
        assert "unpaid" in outcome.message

    def test_rejected_session_is_unconfirmed(self, fake_api, api):
        fake_api.on("GET", "/orders/checkout/verify",
                    envelope(success=False, error="failed to verify session"), status=500)
        outcome = payment_service.reconcile(api, "cs_bad")

        assert outcome.status == ReconcileStatus.UNCONFIRMED
        assert outcome.message == UNCONFIRMED_MESSAGE
        assert outcome.redirect_path == "/orders"

    def test_missing_session_id_makes_no_call(self, fake_api, api):
        outcome = payment_service.reconcile(api, "  ")
        assert outcome.status == ReconcileStatus.UNCONFIRMED
        assert fake_api.calls == []

    def test_transport_failure_is_unconfirmed(self):
        from common.api_client import ApiClient

        def handler(request):
            raise httpx.ConnectError("down", request=request)

        with ApiClient(base_url="http://api.test", token_provider=lambda: "t",
                       transport=httpx.MockTransport(handler)) as client:
            outcome = payment_service.reconcile(client, "cs_1")
        assert outcome.status == ReconcileStatus.UNCONFIRMED

    def test_zero_order_id_goes_to_order_list(self, fake_api, api):
        fake_api.on("GET", "/orders/checkout/verify", envelope({
            "session_id": "cs_1", "payment_status": "paid",
            "order_id": "00000000-0000-0000-0000-000000000000", "order_number": "",
        }))
        outcome = payment_service.reconcile(api, "cs_1")
        assert outcome.confirmed
        assert outcome.redirect_path == "/orders"

    def test_unreadable_session_is_unconfirmed(self, fake_api, api):
        fake_api.on("GET", "/orders/checkout/verify", envelope({
            "session_id": "cs_1", "payment_status": {"state": "paid"},
        }))
        outcome = payment_service.reconcile(api, "cs_1")
        assert outcome.status == ReconcileStatus.UNCONFIRMED
        assert outcome.message == UNCONFIRMED_MESSAGE
