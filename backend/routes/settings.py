# backend/routes/settings.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_change_feed, get_settings_provider, get_store_settings
from models.users import User
from schemas.settings import StoreSettingsIn, StoreSettingsOut, WebhookTestResult
from services.realtime import ChangeFeed
from services.settings_store import StoreSettingsProvider, save_settings
from services.webhook import order_webhook
from utils.audit import client_ip, write_log
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/settings", tags=["Settings"])


# Current snapshot, used by the storefront for VAT and the open/closed banner
@router.get("", response_model=StoreSettingsOut)
def read_settings(store: StoreSettingsOut = Depends(get_store_settings)):
    return store


@router.put("", response_model=StoreSettingsOut)
def replace_settings(
    payload: StoreSettingsIn,
    request: Request,
    feed: ChangeFeed = Depends(get_change_feed),
    provider: StoreSettingsProvider = Depends(get_settings_provider),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    saved = save_settings(db, payload, feed=feed)
    # The provider follows the feed; this covers a provider built without one
    snapshot = provider.apply_external_update(saved.model_dump(mode="json"))

    write_log(db, user_id=current_user.id, action="SETTINGS_UPDATE", resource="settings",
              ip=client_ip(request), meta={"is_open": saved.is_open, "vat_enabled": saved.vat_enabled})
    return snapshot


@router.post("/webhook/test", response_model=WebhookTestResult)
async def test_webhook(
    store: StoreSettingsOut = Depends(get_store_settings),
    current_user: User = Depends(require_admin),
):
    if not store.webhook_url:
        raise HTTPException(status_code=400, detail="No webhook URL configured")
    return await order_webhook.send_test(store.webhook_url, store.restaurant_name)
