import asyncio

import httpx

from services.webhook import OrderWebhookClient, order_webhook


class TestSettings:
    def test_defaults(self, client):
        r = client.get("/settings")
        assert r.status_code == 200
        body = r.json()
        assert body["is_open"] is True
        assert body["vat_enabled"] is False
        assert body["schedule"]["monday"] == {"isOpen": True, "open": "11:00", "close": "22:00"}
        assert body["closed_dates"] == []

    def test_put_replaces_everything(self, client, admin_headers):
        r = client.put("/settings", headers=admin_headers, json={
            "restaurant_name": "Smoky Grill",
            "business_phone": "5766 5303",
            "vat_enabled": True,
            "vat_percentage": 15,
            "closed_dates": [{"date": "2026-12-25", "reason": "Christmas"}],
        })
        assert r.status_code == 200, r.text
        assert client.get("/settings").json()["restaurant_name"] == "Smoky Grill"

        client.put("/settings", headers=admin_headers, json={"restaurant_name": "Smoky Grill"})
        body = client.get("/settings").json()
        assert body["vat_enabled"] is False
        assert body["business_phone"] is None
        assert body["closed_dates"] == []

    def test_put_requires_admin(self, client):
        assert client.put("/settings", json={"is_open": False}).status_code in (401, 403)

    def test_put_validates(self, client, admin_headers):
        r = client.put("/settings", headers=admin_headers, json={"vat_percentage": 150})
        assert r.status_code == 422

    def test_webhook_test_without_url(self, client, admin_headers):
        r = client.post("/settings/webhook/test", headers=admin_headers)
        assert r.status_code == 400

    def test_webhook_test_reports_result(self, client, admin_headers, monkeypatch):
        client.put("/settings", headers=admin_headers, json={"webhook_url": "https://hooks.example.com/t"})
        sent = []

        async def fake_post(url, payload):
            sent.append((url, payload))
            return httpx.Response(202, request=httpx.Request("POST", url))

        monkeypatch.setattr(order_webhook, "post", fake_post)
        r = client.post("/settings/webhook/test", headers=admin_headers)
        assert r.json() == {"delivered": True, "status_code": 202}
        assert sent[0][1]["type"] == "test"


class TestWebhookClient:
    def test_delivery_failure_is_swallowed(self, monkeypatch):
        client = OrderWebhookClient(timeout=1)

        async def failing_post(url, payload):
            raise httpx.ConnectError("refused")

        monkeypatch.setattr(client, "post", failing_post)
        assert asyncio.run(client.deliver_order("https://hooks.example.com", {"order_code": "#1"})) is False
        assert asyncio.run(client.deliver_order(None, {"order_code": "#1"})) is False

    def test_rejected_test_call(self, monkeypatch):
        client = OrderWebhookClient(timeout=1)
        request = httpx.Request("POST", "https://hooks.example.com")
        response = httpx.Response(500, request=request)

        async def rejected_post(url, payload):
            raise httpx.HTTPStatusError("server error", request=request, response=response)

        monkeypatch.setattr(client, "post", rejected_post)
        result = asyncio.run(client.send_test("https://hooks.example.com", "Grill"))
        assert result.delivered is False
        assert result.status_code == 500
