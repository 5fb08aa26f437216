"""Pytest fixtures for storefront tests."""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from config.settings import API_PREFIX
from common.api_client import ApiClient
from modules.auth.deps import get_api, get_bearer_token

API_BASE = "http://api.test"
TOKEN = "test-token"


def envelope(data: Any = None, message: str = "ok", success: bool = True, error: Optional[str] = None) -> dict:
    body = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


@dataclass
class Call:
    method: str
    path: str
    params: Dict[str, str]
    json: Any
    headers: Dict[str, str]


Payload = Union[dict, list, Callable[[Call], Any]]


class FakeApi:
    """
    In-memory stand-in for the remote REST API.

    Routes are registered per (method, path) without the /api/v1 prefix.
    A route answers with a fixed JSON body, or a callable taking the Call
    and returning either a body or a (status, body) tuple.
    Unregistered routes answer 404.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Payload]] = {}
        self.calls: List[Call] = []

    def on(self, method: str, path: str, payload: Payload = None, status: int = 200):
        self.routes[(method.upper(), path)] = (status, payload if payload is not None else envelope())
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        body = json.loads(request.content) if request.content else None
        call = Call(request.method, path, dict(request.url.params), body, dict(request.headers))
        self.calls.append(call)

        if (request.method, path) not in self.routes:
            return httpx.Response(404, json=envelope(success=False, message="not found", error="not found"))
        status, payload = self.routes[(request.method, path)]
        if callable(payload):
            result = payload(call)
            if isinstance(result, httpx.Response):
                return result
            if isinstance(result, tuple):
                status, result = result
            payload = result
        return httpx.Response(status, json=payload)

    def calls_to(self, method: str, path: str) -> List[Call]:
        return [c for c in self.calls if c.method == method and c.path == path]

    def client(self, token: Optional[str] = TOKEN) -> ApiClient:
        return ApiClient(
            base_url=API_BASE,
            token_provider=lambda: token,
            transport=httpx.MockTransport(self.handle),
        )


# ==========================================
# Payload builders
# ==========================================

def make_cart_item(item_id="i1", product_id="p1", price="500", quantity=2, stock=5, **extra) -> dict:
    item = {
        "id": item_id,
        "cart_id": "c1",
        "product_id": product_id,
        "product_name": f"Product {product_id}",
        "product_price": price,
        "stock_quantity": stock,
        "is_active": True,
        "shop_id": "s1",
        "shop_name": "Himalayan Crafts",
        "quantity": quantity,
        "subtotal": str(int(price) * quantity),
    }
    item.update(extra)
    return item


def make_cart(*items) -> dict:
    return {
        "id": "c1",
        "user_id": "u1",
        "items": list(items),
        "item_count": sum(i["quantity"] for i in items),
        "subtotal": str(sum(int(i["subtotal"]) for i in items)),
    }


def make_address(address_id="a1", is_default=True, **extra) -> dict:
    address = {
        "id": address_id,
        "user_id": "u1",
        "full_name": "Sita Sharma",
        "phone": "9800000000",
        "address_line1": "Thamel Marg 12",
        "city": "Kathmandu",
        "country": "Nepal",
        "is_default": is_default,
        "address_type": "shipping",
    }
    address.update(extra)
    return address


def make_order(order_id="o1", status="confirmed", product_ids=("p1",), **extra) -> dict:
    items = [
        {
            "id": f"{order_id}-{pid}",
            "order_id": order_id,
            "product_id": pid,
            "product_name": f"Product {pid}",
            "shop_id": "s1",
            "shop_name": "Himalayan Crafts",
            "quantity": 1,
            "unit_price": "500",
            "subtotal": "500",
        }
        for pid in product_ids
    ]
    subtotal = 500 * len(items)
    order = {
        "id": order_id,
        "user_id": "u1",
        "order_number": f"ORD-20260101-{order_id}",
        "status": status,
        "items": items,
        "subtotal": str(subtotal),
        "shipping_cost": "100",
        "tax": "0",
        "discount": "0",
        "total": str(subtotal + 100),
        "payment_method": "cash_on_delivery",
        "payment_status": "pending",
    }
    order.update(extra)
    return order


def make_product(product_id="p1", name="Pashmina Shawl", price="500", stock=5, **extra) -> dict:
    product = {
        "id": product_id,
        "shop_id": "s1",
        "name": name,
        "description": f"{name} from Nepal",
        "price": price,
        "stock_quantity": stock,
        "is_active": True,
        "created_at": "2026-01-01T10:00:00Z",
    }
    product.update(extra)
    return product


# ==========================================
# Fixtures
# ==========================================

@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def api(fake_api):
    client = fake_api.client()
    yield client
    client.close()


@pytest.fixture
def anon_api(fake_api):
    client = fake_api.client(token=None)
    yield client
    client.close()


@pytest.fixture
def app_client(fake_api):
    """TestClient whose per-request ApiClient talks to the fake API."""
    from main import app

    def _fake_get_api(token: Optional[str] = Depends(get_bearer_token)):
        client = fake_api.client(token)
        try:
            yield client
        finally:
            client.close()

    app.dependency_overrides[get_api] = _fake_get_api
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}
