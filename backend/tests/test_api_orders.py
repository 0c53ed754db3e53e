import pytest

from conftest import CHECKOUT_DELIVERY, CHECKOUT_PICKUP
from core.exceptions import StaleOrderStatusError
from core.order_flow import OrderStatus, StatusChange
from database import SessionLocal
from models.order import OrderStatusHistory
from services import orders as order_service


def transition(client, headers, order_id, action, expected=None):
    body = {"action": action}
    if expected:
        body["expected_status"] = expected
    return client.post(f"/orders/{order_id}/transitions", headers=headers, json=body)


class TestCheckout:
    def test_places_order_and_clears_cart(self, client, cart_headers, menu):
        client.post("/cart/items", headers=cart_headers, json={
            "menu_item_id": menu["burger"], "quantity": 2, "variant_id": "double", "addon_ids": ["bacon"]})
        r = client.post("/orders/checkout", headers=cart_headers, json=CHECKOUT_DELIVERY)
        assert r.status_code == 201, r.text
        body = r.json()
        order = body["order"]

        assert order["status"] == "pending"
        assert order["order_code"].startswith("#") and len(order["order_code"]) == 4
        assert order["total"] == pytest.approx(40.99)
        assert order["vat_amount"] == 0.0
        assert order["items"][0]["price"] == 16.5
        assert order["items"][0]["line_total"] == 37.0
        assert order["allowed_actions"] == ["start_preparing", "cancel"]

        assert body["message"].startswith(f"New Order {order['order_code']}\nName: Jane Doe")
        assert "2x The Smoky Texas Stack (Double Patty) + Bacon" in body["message"]
        assert body["chat_url"].startswith("https://wa.me/")

        assert client.get("/cart", headers=cart_headers).json()["items"] == []

    def test_empty_cart_is_rejected(self, client, cart_headers):
        r = client.post("/orders/checkout", headers=cart_headers, json=CHECKOUT_PICKUP)
        assert r.status_code == 400
        assert r.json()["error_code"] == "EMPTY_CART"

    @pytest.mark.parametrize("change", [
        {"customer_name": "   "},
        {"customer_phone": ""},
        {"service_option": "delivery", "delivery_address": ""},
    ])
    def test_contact_validation(self, client, cart_headers, menu, change):
        client.post("/cart/items", headers=cart_headers, json={"menu_item_id": menu["fries"]})
        r = client.post("/orders/checkout", headers=cart_headers, json={**CHECKOUT_PICKUP, **change})
        assert r.status_code == 422
        # The cart is untouched by a rejected checkout
        assert len(client.get("/cart", headers=cart_headers).json()["items"]) == 1

    def test_closed_store(self, client, cart_headers, admin_headers, menu):
        client.put("/settings", headers=admin_headers, json={"is_open": False})
        client.post("/cart/items", headers=cart_headers, json={"menu_item_id": menu["fries"]})
        r = client.post("/orders/checkout", headers=cart_headers, json=CHECKOUT_PICKUP)
        assert r.status_code == 409
        assert r.json()["error_code"] == "STORE_CLOSED"

    def test_disabled_service_option(self, client, cart_headers, admin_headers, menu):
        client.put("/settings", headers=admin_headers, json={"is_delivery_enabled": False})
        client.post("/cart/items", headers=cart_headers, json={"menu_item_id": menu["fries"]})
        r = client.post("/orders/checkout", headers=cart_headers, json=CHECKOUT_DELIVERY)
        assert r.json()["error_code"] == "SERVICE_UNAVAILABLE"

    def test_vat_is_stored(self, client, admin_headers, place_order):
        client.put("/settings", headers=admin_headers, json={"vat_enabled": True, "vat_percentage": 15})
        order = place_order()
        assert order["vat_amount"] == pytest.approx(5.55)
        assert order["total"] == pytest.approx(42.55)

    def test_webhook_makes_order_await_confirmation(self, client, admin_headers, place_order, webhook_calls):
        client.put("/settings", headers=admin_headers, json={"webhook_url": "https://hooks.example.com/new"})
        order = place_order()
        assert order["status"] == "awaiting_confirmation"
        assert len(webhook_calls) == 1
        url, payload = webhook_calls[0]
        assert url == "https://hooks.example.com/new"
        assert payload["order_code"] == order["order_code"]
        assert payload["items"][0]["selected_addons"][0]["name"] == "Bacon"

    def test_no_webhook_call_without_url(self, place_order, webhook_calls):
        place_order()
        assert webhook_calls == []


class TestAdminOrders:
    def test_requires_admin(self, client, place_order):
        order = place_order()
        assert client.get("/orders").status_code in (401, 403)
        assert client.get(f"/orders/{order['id']}").status_code in (401, 403)

    def test_list_filter_and_detail(self, client, admin_headers, place_order):
        first = place_order()
        second = place_order()
        transition(client, admin_headers, first["id"], "cancel")

        r = client.get("/orders", headers=admin_headers)
        assert [o["id"] for o in r.json()] == [second["id"], first["id"]]
        r = client.get("/orders", headers=admin_headers, params={"status": "cancelled"})
        assert [o["id"] for o in r.json()] == [first["id"]]
        assert client.get("/orders", headers=admin_headers, params={"status": "lost"}).status_code == 422

        r = client.get(f"/orders/{second['id']}", headers=admin_headers)
        assert r.json()["order_code"] == second["order_code"]
        assert client.get("/orders/999", headers=admin_headers).json()["error_code"] == "ORDER_NOT_FOUND"

    def test_edit_contact_fields(self, client, admin_headers, place_order):
        order = place_order()
        r = client.patch(f"/orders/{order['id']}", headers=admin_headers,
                         json={"customer_phone": "5000 0000", "notes": "Ring twice"})
        assert r.status_code == 200
        assert r.json()["customer_phone"] == "5000 0000"
        assert r.json()["status"] == order["status"]

        r = client.patch(f"/orders/{order['id']}", headers=admin_headers, json={"service_option": "delivery"})
        assert r.status_code == 422


class TestWorkflow:
    def test_full_lifecycle(self, client, admin_headers, place_order):
        order = place_order()
        for action, status in [("start_preparing", "preparing"), ("mark_ready", "ready"),
                               ("complete", "completed")]:
            r = transition(client, admin_headers, order["id"], action)
            assert r.status_code == 200, r.text
            assert r.json()["status"] == status
        assert r.json()["allowed_actions"] == []

    def test_illegal_transition(self, client, admin_headers, place_order):
        order = place_order()
        r = transition(client, admin_headers, order["id"], "complete")
        assert r.status_code == 409
        assert r.json()["error_code"] == "INVALID_TRANSITION"
        assert client.get(f"/orders/{order['id']}/history", headers=admin_headers).json() == []

    def test_confirm_from_awaiting_confirmation(self, client, admin_headers, place_order):
        client.put("/settings", headers=admin_headers, json={"webhook_url": "https://hooks.example.com/new"})
        order = place_order()
        assert transition(client, admin_headers, order["id"], "complete").status_code == 409
        r = transition(client, admin_headers, order["id"], "confirm")
        assert r.json()["status"] == "pending"

    def test_second_admin_gets_conflict(self, client, admin_headers, place_order):
        order = place_order()
        first = transition(client, admin_headers, order["id"], "start_preparing", expected="pending")
        second = transition(client, admin_headers, order["id"], "start_preparing", expected="pending")
        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["error_code"] == "STATUS_CHANGED"
        history = client.get(f"/orders/{order['id']}/history", headers=admin_headers).json()
        assert len(history) == 1

    def test_conditional_update_catches_stale_read(self, place_order):
        order = place_order()
        stale, other = SessionLocal(), SessionLocal()
        try:
            loaded = order_service.get_order(stale, order["id"])
            order_service.transition(other, order["id"], "cancel")
            with pytest.raises(StaleOrderStatusError):
                order_service._commit_change(
                    stale, loaded, StatusChange(OrderStatus.PENDING, OrderStatus.PREPARING), None)
            assert other.query(OrderStatusHistory).filter_by(order_id=order["id"]).count() == 1
        finally:
            stale.close()
            other.close()

    def test_history_and_revert(self, client, admin_headers, place_order):
        order = place_order()
        oid = order["id"]
        transition(client, admin_headers, oid, "start_preparing")
        transition(client, admin_headers, oid, "mark_ready")

        history = client.get(f"/orders/{oid}/history", headers=admin_headers).json()
        assert [(h["old_status"], h["new_status"]) for h in history] == [
            ("preparing", "ready"), ("pending", "preparing")]
        assert [h["revertible"] for h in history] == [True, False]

        r = client.post(f"/orders/{oid}/revert", headers=admin_headers, json={"entry_id": history[1]["id"]})
        assert r.status_code == 409
        assert r.json()["error_code"] == "REVERT_NOT_LATEST"

        r = client.post(f"/orders/{oid}/revert", headers=admin_headers,
                        json={"entry_id": history[0]["id"], "expected_status": "ready"})
        assert r.status_code == 200, r.text
        assert r.json()["status"] == "preparing"

        history = client.get(f"/orders/{oid}/history", headers=admin_headers).json()
        assert len(history) == 3
        assert (history[0]["old_status"], history[0]["new_status"]) == ("ready", "preparing")
        assert all(h["old_status"] and h["new_status"] for h in history)
        assert [h["revertible"] for h in history] == [True, False, False]

    def test_revert_without_history(self, client, admin_headers, place_order):
        order = place_order()
        r = client.post(f"/orders/{order['id']}/revert", headers=admin_headers, json={})
        assert r.status_code == 409
        assert r.json()["error_code"] == "NOTHING_TO_REVERT"

    def test_revert_with_stale_expected_status(self, client, admin_headers, place_order):
        order = place_order()
        transition(client, admin_headers, order["id"], "start_preparing")
        r = client.post(f"/orders/{order['id']}/revert", headers=admin_headers,
                        json={"expected_status": "pending"})
        assert r.json()["error_code"] == "STATUS_CHANGED"


def test_order_code_widens_when_three_digits_are_taken(db, monkeypatch):
    monkeypatch.setattr(order_service, "ORDER_CODE_ATTEMPTS", 0)
    code = order_service.generate_order_code(db)
    assert code.startswith("#") and len(code) == 7
