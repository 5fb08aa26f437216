"""
Payment Method Abstraction
============================
Each payment method implements place_order() and, when it redirects the
buyer elsewhere, verify_session().
Registry pattern for method lookup by name.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from common.api_client import ApiClient

logger = logging.getLogger("nepify.gateway")


@dataclass
class OrderPlacement:
    """Input for placing an order: the body sent to the remote API."""
    shipping: Dict[str, Any]             # shipping_address_id OR shipping_address
    payment_method: str
    use_same_address: bool = True
    billing_address: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        body = dict(self.shipping)
        body["payment_method"] = self.payment_method
        body["use_same_address"] = self.use_same_address
        if not self.use_same_address and self.billing_address:
            body["billing_address"] = self.billing_address
        if self.notes:
            body["notes"] = self.notes
        return body


@dataclass
class GatewayCreateResult:
    """Result of place_order()."""
    success: bool
    order: Optional[Any] = None          # Order, when the order is final right away
    redirect_url: Optional[str] = None   # hosted payment page, when the buyer must pay first
    next_path: Optional[str] = None      # where the storefront sends the buyer next
    error_message: Optional[str] = None


@dataclass
class GatewayVerifyResult:
    """Result of verify_session()."""
    success: bool
    session: Optional[Any] = None        # PaymentSession
    error_message: Optional[str] = None


class BaseGateway:
    """Abstract payment method interface."""
    name: str = ""
    label: str = ""
    redirects: bool = False

    def place_order(self, api: ApiClient, placement: OrderPlacement) -> GatewayCreateResult:
        raise NotImplementedError

    def verify_session(self, api: ApiClient, session_id: str) -> GatewayVerifyResult:
        raise NotImplementedError


# ── Registry ──

_GATEWAYS: Dict[str, BaseGateway] = {}


def register_gateway(gw: BaseGateway):
    _GATEWAYS[gw.name] = gw


def get_gateway(name: str) -> Optional[BaseGateway]:
    return _GATEWAYS.get(name)


def get_all_gateway_names() -> List[str]:
    return list(_GATEWAYS.keys())
