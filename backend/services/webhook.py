# services/webhook.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from config import settings
from schemas.settings import WebhookTestResult

logger = logging.getLogger(__name__)


class OrderWebhookClient:
    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.WEBHOOK_TIMEOUT_SECONDS

    async def post(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(url, json=payload, headers={"Content-Type": "application/json"})
            response.raise_for_status()
            return response

    async def deliver_order(self, url: Optional[str], payload: Dict[str, Any]) -> bool:
        # Best effort: the order already exists, a failed delivery is only logged
        if not url:
            return False
        try:
            await self.post(url, payload)
            logger.info("Order %s delivered to webhook", payload.get("order_code"))
            return True
        except httpx.HTTPError as e:
            logger.error("Failed to trigger webhook for order %s: %s", payload.get("order_code"), e)
            return False

    async def send_test(self, url: str, restaurant_name: str) -> WebhookTestResult:
        payload = {
            "type": "test",
            "restaurant_name": restaurant_name,
            "sent_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = await self.post(url, payload)
            return WebhookTestResult(delivered=True, status_code=response.status_code)
        except httpx.HTTPStatusError as e:
            logger.warning("Webhook test rejected by %s: %s", url, e.response.status_code)
            return WebhookTestResult(delivered=False, status_code=e.response.status_code)
        except httpx.HTTPError as e:
            logger.warning("Webhook test to %s failed: %s", url, e)
            return WebhookTestResult(delivered=False)


order_webhook = OrderWebhookClient()
