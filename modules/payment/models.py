"""
Payment Module - Models
=========================
Hosted card-payment session status and the outcomes the storefront
reports after checkout or after the buyer returns from the payment page.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, field_validator

from modules.order.models import Order


class PaymentSession(BaseModel):
    """Session status as reported by GET /orders/checkout/verify."""
    session_id: str
    payment_status: str = ""     # paid | unpaid | no_payment_required
    order_id: Optional[str] = None
    order_number: str = ""

    @field_validator("order_id")
    @classmethod
    def _blank_order_id(cls, v):
        # An all-zero UUID means the session carried no order reference
        if v is None or not str(v).strip(' 0-'):
            return None
        return v

    @property
    def is_paid(self) -> bool:
        return self.payment_status in ("paid", "no_payment_required")


class ReconcileStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"


@dataclass
class CheckoutResult:
    """What POST /checkout hands back to the front-end."""
    payment_method: str
    order: Optional[Order] = None
    checkout_url: Optional[str] = None
    redirect: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "payment_method": self.payment_method,
            "order": self.order,
            "checkout_url": self.checkout_url,
            "redirect": self.redirect,
        }


@dataclass
class PaymentOutcome:
    """
    Result of reconciling a payment-page return.
    UNCONFIRMED is a normal outcome: the payment may still have gone
    through and the order will be updated server-side.
    """
    status: ReconcileStatus
    message: str
    session: Optional[PaymentSession] = None

    @property
    def confirmed(self) -> bool:
        return self.status == ReconcileStatus.CONFIRMED

    @property
    def redirect_path(self) -> str:
        if self.confirmed and self.session and self.session.order_id:
            return f"/orders/{self.session.order_id}"
        return "/orders"
