# backend/dependencies.py
# Shared application state handed to routes through Depends.
from fastapi import Header, HTTPException, Request

from schemas.settings import StoreSettingsOut
from services.realtime import ChangeFeed
from services.settings_store import StoreSettingsProvider


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


def get_settings_provider(request: Request) -> StoreSettingsProvider:
    return request.app.state.settings_provider


def get_store_settings(request: Request) -> StoreSettingsOut:
    return request.app.state.settings_provider.snapshot()


# Anonymous customers identify their cart with a client-generated key
def get_cart_session(x_cart_session: str = Header(..., alias="X-Cart-Session")) -> str:
    key = x_cart_session.strip()
    if not key or len(key) > 128:
        raise HTTPException(status_code=400, detail="Invalid X-Cart-Session header")
    return key
