"""Tests for the storefront HTTP surface."""

import httpx

from conftest import TOKEN, envelope, make_cart, make_cart_item, make_order, make_product


class TestHealth:
    def test_upstream_ok(self, fake_api, app_client):
        fake_api.on("GET", "/health", {"status": "ok", "message": "server is running"})
        data = app_client.get("/health").json()
        assert data == {"status": "ok", "version": "1.0.0", "api": "ok"}

    def test_upstream_down_still_answers(self, fake_api, app_client):
        def down(call):
            raise httpx.ConnectError("refused")

        fake_api.on("GET", "/health", down)
        response = app_client.get("/health")
        assert response.status_code == 200
        assert response.json()["api"] == "unreachable"


class TestErrorEnvelope:
    def test_login_required(self, fake_api, app_client):
        response = app_client.get("/orders")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Sign in required"}
        assert fake_api.calls == []

    def test_cookie_token_accepted(self, fake_api, app_client):
        fake_api.on("GET", "/orders", envelope([]))
        app_client.cookies.set("auth_token", TOKEN)
        response = app_client.get("/orders")
        assert response.status_code == 200
        assert fake_api.calls[0].headers["authorization"] == f"Bearer {TOKEN}"

    def test_server_status_and_message_pass_through(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/orders/o9", envelope(success=False, error="order not found"), status=404)
        response = app_client.get("/orders/o9", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "order not found"

    def test_transport_failure_is_generic(self, fake_api, app_client, auth_headers):
        def down(call):
            raise httpx.ConnectError("refused")

        fake_api.on("GET", "/orders", down)
        response = app_client.get("/orders", headers=auth_headers)
        assert response.status_code == 502
        assert response.json() == {"success": False, "message": "Request failed"}

    def test_body_validation(self, app_client, auth_headers):
        response = app_client.post("/cart/items", json={"quantity": 1}, headers=auth_headers)
        assert response.status_code == 422
        assert response.json()["success"] is False


class TestCatalogRoutes:
    def test_unreadable_product_payload(self, fake_api, app_client):
        fake_api.on("GET", "/products/p1", envelope(make_product("p1", price="not-a-number")))
        response = app_client.get("/products/p1")
        assert response.status_code == 502
        assert response.json() == {"success": False, "message": "Unexpected response from server"}

    def test_search_and_sort(self, fake_api, app_client):
        fake_api.on("GET", "/products", envelope([
            make_product("p1", "Pashmina Shawl", price="900"),
            make_product("p2", "Yak Wool Shawl", price="400"),
            make_product("p3", "Singing Bowl", price="1200"),
            make_product("p4", "Old Shawl", price="100", is_active=False),
        ]))
        data = app_client.get("/products", params={"search": "shawl", "sort": "price_asc"}).json()["data"]
        assert [p["id"] for p in data["products"]] == ["p2", "p1"]
        assert fake_api.calls[0].params["search"] == "shawl"

    def test_negative_price_rejected(self, app_client):
        response = app_client.get("/products", params={"min_price": "-5"})
        assert response.status_code == 400

    def test_product_detail(self, fake_api, app_client):
        fake_api.on("GET", "/products/p1", envelope(make_product("p1", stock=0)))
        data = app_client.get("/products/p1").json()["data"]
        assert data["in_stock"] is False


class TestCartRoutes:
    def test_anonymous_cart(self, fake_api, app_client):
        data = app_client.get("/cart").json()["data"]
        assert data["status"] == "unauthenticated"
        assert data["cart_count"] == 0
        assert fake_api.calls == []

    def test_null_items_reads_as_empty(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/cart", envelope({"id": "c1", "items": None, "item_count": 0, "subtotal": "0"}))
        response = app_client.get("/cart", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "empty"

    def test_add_item_returns_refetched_cart(self, fake_api, app_client, auth_headers):
        store = {"cart": make_cart(make_cart_item(quantity=2, price="500", stock=5))}

        def add(call):
            store["cart"] = make_cart(make_cart_item(quantity=3, price="500", stock=5))
            return envelope(message="item added")

        fake_api.on("GET", "/cart", lambda call: envelope(store["cart"]))
        fake_api.on("POST", "/cart/items", add)

        response = app_client.post("/cart/items", json={"product_id": "p1", "quantity": 1}, headers=auth_headers)
        data = response.json()["data"]
        assert data["cart_count"] == 3
        assert float(data["cart"]["subtotal"]) == 1500

    def test_add_over_stock(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/cart", envelope(make_cart(make_cart_item(quantity=2, stock=5))))
        response = app_client.post("/cart/items", json={"product_id": "p1", "quantity": 4}, headers=auth_headers)
        assert response.status_code == 400
        assert "Only 5 in stock" in response.json()["message"]


class TestCheckoutRoutes:
    def test_checkout_page(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/cart", envelope(make_cart(make_cart_item())))
        fake_api.on("GET", "/addresses/default", envelope(success=False), status=404)
        fake_api.on("GET", "/addresses", envelope([]))

        data = app_client.get("/checkout", headers=auth_headers).json()["data"]
        assert data["can_checkout"] is True
        assert data["address"]["mode"] == "new"
        assert data["address"]["form"]["is_default"] is True
        assert {m["name"] for m in data["payment_methods"]} == {"cash_on_delivery", "card"}

    def test_empty_cart(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/cart", envelope(make_cart()))
        response = app_client.post("/checkout", json={"shipping_address_id": "a1"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Your cart is empty"

    def test_cod_order(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/cart", envelope(make_cart(make_cart_item())))
        fake_api.on("POST", "/orders", envelope(make_order("o1", status="pending")), status=201)
        response = app_client.post("/checkout", json={
            "shipping_address_id": "a1", "payment_method": "cash_on_delivery",
        }, headers=auth_headers)
        data = response.json()["data"]
        assert data["redirect"] == "/orders/o1"
        assert data["order"]["id"] == "o1"

    def test_card_redirect(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/cart", envelope(make_cart(make_cart_item())))
        fake_api.on("POST", "/orders/checkout/card", envelope({
            "order": make_order("o2", status="pending"), "checkout_url": "https://pay.example/cs_9",
        }), status=201)
        data = app_client.post("/checkout", json={
            "shipping_address_id": "a1", "payment_method": "card",
        }, headers=auth_headers).json()["data"]
        assert data["checkout_url"] == "https://pay.example/cs_9"
        assert data["order"] is None


class TestPaymentReturn:
    def test_unconfirmed_session_goes_to_orders(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/orders/checkout/verify", envelope(success=False, error="bad session"), status=500)
        response = app_client.get(
            "/payment/success", params={"session_id": "cs_bad"},
            headers=auth_headers, follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/orders"

        notes = app_client.get("/notifications").json()["data"]
        assert notes[0]["category"] == "warning"
        assert "check your orders page" in notes[0]["text"]

    def test_confirmed_session_goes_to_order(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/orders/checkout/verify", envelope({
            "session_id": "cs_1", "payment_status": "paid", "order_id": "o7", "order_number": "N7",
        }))
        response = app_client.get(
            "/payment/success", params={"session_id": "cs_1"},
            headers=auth_headers, follow_redirects=False,
        )
        assert response.headers["location"] == "/orders/o7"
        notes = app_client.get("/notifications").json()["data"]
        assert notes[0]["category"] == "success"

    def test_return_without_token_is_unconfirmed(self, fake_api, app_client):
        fake_api.on("GET", "/orders/checkout/verify", envelope(success=False, error="unauthorized"), status=401)
        response = app_client.get(
            "/payment/success", params={"session_id": "cs_1"}, follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/orders"
        assert "authorization" not in fake_api.calls[0].headers
        notes = app_client.get("/notifications").json()["data"]
        assert notes[0]["category"] == "warning"

    def test_cancel(self, app_client):
        response = app_client.get("/payment/cancel", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/cart"
        notes = app_client.get("/notifications").json()["data"]
        assert "cart is unchanged" in notes[0]["text"]

    def test_notifications_read_once(self, app_client):
        app_client.get("/payment/cancel", follow_redirects=False)
        assert len(app_client.get("/notifications").json()["data"]) == 1
        assert app_client.get("/notifications").json()["data"] == []


class TestOrderRoutes:
    def test_buyer_view_offers_cancel(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/orders", envelope([make_order("o1"), make_order("o2", status="shipped")]))
        data = app_client.get("/orders", headers=auth_headers).json()["data"]
        assert [o["can_cancel"] for o in data] == [True, False]

    def test_vendor_orders_filtered(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/vendor/orders", envelope([
            make_order("o1", status="pending"), make_order("o2", status="shipped"),
        ]))
        data = app_client.get("/vendor/orders", params={"status": "shipped"}, headers=auth_headers).json()["data"]
        assert [o["order"]["id"] for o in data["orders"]] == ["o2"]
        assert data["orders"][0]["next_statuses"] == ["delivered"]
        assert data["counts"]["all"] == 2

    def test_vendor_illegal_status(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/vendor/orders", envelope([make_order("o2", status="shipped")]))
        response = app_client.post("/vendor/orders/o2/status", json={"status": "processing"}, headers=auth_headers)
        assert response.status_code == 400
        assert fake_api.calls_to("PATCH", "/vendor/orders/o2/status") == []


class TestReviewAndShopRoutes:
    def test_review_blocked(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/orders", envelope([make_order("o1", status="shipped")]))
        response = app_client.post("/reviews", json={"product_id": "p1", "rating": 5}, headers=auth_headers)
        assert response.status_code == 403

    def test_eligibility(self, fake_api, app_client, auth_headers):
        fake_api.on("GET", "/orders", envelope([make_order("o1", status="delivered")]))
        fake_api.on("GET", "/reviews/can-review/p1", envelope({"can_review": True}))
        data = app_client.get("/products/p1/reviews/eligibility", headers=auth_headers).json()["data"]
        assert data["can_review"] is True
        assert data["auto_selected_order_id"] == "o1"

    def test_product_without_reviews(self, fake_api, app_client):
        fake_api.on("GET", "/reviews/product/p1", envelope({
            "reviews": None, "total_reviews": 0, "page": 1, "limit": 10,
        }))
        response = app_client.get("/products/p1/reviews")
        assert response.status_code == 200
        assert response.json()["data"]["reviews"] == []

    def test_slug_preview(self, app_client):
        data = app_client.get("/shops/slug-preview", params={"name": "Everest Gear & Co"}).json()["data"]
        assert data["slug"] == "everest-gear-co"
