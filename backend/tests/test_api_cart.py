import pytest


def add_burger(client, headers, menu, **overrides):
    payload = {"menu_item_id": menu["burger"], "quantity": 2, "variant_id": "double", "addon_ids": ["bacon"]}
    payload.update(overrides)
    return client.post("/cart/items", headers=headers, json=payload)


class TestCart:
    def test_requires_session_header(self, client):
        assert client.get("/cart").status_code == 422
        assert client.get("/cart", headers={"X-Cart-Session": "   "}).status_code == 400

    def test_empty_cart(self, client, cart_headers):
        r = client.get("/cart", headers=cart_headers, params={"service_option": "delivery"})
        assert r.json() == {"items": [], "subtotal": 0.0, "vat_amount": 0.0, "delivery_fee": 0.0, "total": 0.0}

    def test_add_configured_line(self, client, cart_headers, menu):
        r = add_burger(client, cart_headers, menu)
        assert r.status_code == 201, r.text
        cart = r.json()
        line = cart["items"][0]
        assert line["unit_price"] == 16.5
        assert line["variant"]["name"] == "Double Patty"
        assert [a["name"] for a in line["addons"]] == ["Bacon"]
        assert line["line_total"] == 37.0
        assert cart["total"] == 37.0

    def test_delivery_fee_follows_service_option(self, client, cart_headers, menu):
        add_burger(client, cart_headers, menu)
        r = client.get("/cart", headers=cart_headers, params={"service_option": "delivery"})
        assert r.json()["delivery_fee"] == 3.99
        assert r.json()["total"] == pytest.approx(40.99)
        r = client.get("/cart", headers=cart_headers, params={"service_option": "pickup"})
        assert r.json()["delivery_fee"] == 0.0

    def test_identical_adds_make_separate_lines(self, client, cart_headers, menu):
        add_burger(client, cart_headers, menu)
        r = add_burger(client, cart_headers, menu)
        items = r.json()["items"]
        assert len(items) == 2
        assert items[0]["line_id"] != items[1]["line_id"]

    def test_survives_reload_in_order(self, client, cart_headers, menu):
        add_burger(client, cart_headers, menu)
        client.post("/cart/items", headers=cart_headers, json={"menu_item_id": menu["fries"], "quantity": 1})
        first = client.get("/cart", headers=cart_headers).json()
        second = client.get("/cart", headers=cart_headers).json()
        assert [i["line_id"] for i in first["items"]] == [i["line_id"] for i in second["items"]]
        assert [i["name"] for i in second["items"]] == ["The Smoky Texas Stack", "Loaded Fries"]

    def test_sessions_are_isolated(self, client, cart_headers, menu):
        add_burger(client, cart_headers, menu)
        r = client.get("/cart", headers={"X-Cart-Session": "session-b"})
        assert r.json()["items"] == []

    def test_quantity_update_and_removal(self, client, cart_headers, menu):
        line_id = add_burger(client, cart_headers, menu).json()["items"][0]["line_id"]

        r = client.patch(f"/cart/items/{line_id}", headers=cart_headers, json={"quantity": 3})
        assert r.json()["items"][0]["quantity"] == 3
        assert r.json()["subtotal"] == pytest.approx(55.5)

        r = client.patch(f"/cart/items/{line_id}", headers=cart_headers, json={"quantity": -3})
        assert r.json()["items"] == []

    def test_fractional_quantity_keeps_line(self, client, cart_headers, menu):
        line_id = add_burger(client, cart_headers, menu).json()["items"][0]["line_id"]

        r = client.patch(f"/cart/items/{line_id}", headers=cart_headers, json={"quantity": 0.5})
        assert r.status_code == 422
        assert client.get("/cart", headers=cart_headers).json()["items"][0]["quantity"] == 2

    def test_delete_line_and_clear(self, client, cart_headers, menu):
        line_id = add_burger(client, cart_headers, menu).json()["items"][0]["line_id"]
        add_burger(client, cart_headers, menu)

        r = client.delete(f"/cart/items/{line_id}", headers=cart_headers)
        assert len(r.json()["items"]) == 1
        r = client.delete("/cart/items/not-a-line", headers=cart_headers)
        assert len(r.json()["items"]) == 1

        r = client.delete("/cart", headers=cart_headers)
        assert r.json()["items"] == []

    def test_vat_uses_current_settings(self, client, cart_headers, admin_headers, menu):
        client.put("/settings", headers=admin_headers, json={"vat_enabled": True, "vat_percentage": 15})
        add_burger(client, cart_headers, menu)
        cart = client.get("/cart", headers=cart_headers).json()
        assert cart["vat_amount"] == pytest.approx(5.55)
        assert cart["total"] == pytest.approx(42.55)


class TestCartRejections:
    def test_quantity_must_be_positive(self, client, cart_headers, menu):
        assert add_burger(client, cart_headers, menu, quantity=0).status_code == 422

    def test_variant_required_when_item_has_variants(self, client, cart_headers, menu):
        r = add_burger(client, cart_headers, menu, variant_id=None)
        assert r.status_code == 422
        assert r.json()["error_code"] == "ValidationError"

    def test_unknown_variant_or_addon(self, client, cart_headers, menu):
        assert add_burger(client, cart_headers, menu, variant_id="triple").status_code == 422
        assert add_burger(client, cart_headers, menu, addon_ids=["truffle"]).status_code == 422

    def test_out_of_stock_and_missing_items(self, client, cart_headers, menu):
        r = client.post("/cart/items", headers=cart_headers, json={"menu_item_id": menu["brownie"]})
        assert r.status_code == 422
        r = client.post("/cart/items", headers=cart_headers, json={"menu_item_id": 999})
        assert r.status_code == 404
