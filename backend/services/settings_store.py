# services/settings_store.py
import logging
import threading
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from models.store_settings import StoreSettings
from schemas.settings import StoreSettingsIn, StoreSettingsOut
from services.realtime import ChangeEvent, ChangeFeed, DELETE, UPDATE

logger = logging.getLogger(__name__)

TABLE = "store_settings"


def get_or_create_settings_row(db: Session) -> StoreSettings:
    row = db.query(StoreSettings).order_by(StoreSettings.id.asc()).first()
    if not row:
        row = StoreSettings()
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def settings_record(row: StoreSettings) -> Dict[str, Any]:
    return StoreSettingsOut.model_validate(row).model_dump(mode="json")


def save_settings(db: Session, payload: StoreSettingsIn, feed: Optional[ChangeFeed] = None) -> StoreSettingsOut:
    """Replace every settings field with ``payload`` and broadcast the new row."""
    row = get_or_create_settings_row(db)
    for key, value in payload.model_dump(mode="json").items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)

    record = settings_record(row)
    if feed is not None:
        feed.publish(TABLE, UPDATE, record)
    return StoreSettingsOut.model_validate(record)


class StoreSettingsProvider:
    """Holds the current settings snapshot for one application instance.

    Readers get an immutable snapshot. Updates never merge: a change event
    or a refresh swaps the whole snapshot.
    """

    def __init__(self, feed: Optional[ChangeFeed] = None):
        self._lock = threading.Lock()
        self._snapshot = StoreSettingsOut()
        self._unsubscribe = feed.subscribe(TABLE, self._on_change) if feed else None

    def snapshot(self) -> StoreSettingsOut:
        with self._lock:
            return self._snapshot

    def refresh(self, db: Session) -> StoreSettingsOut:
        row = get_or_create_settings_row(db)
        return self.apply_external_update(settings_record(row))

    def apply_external_update(self, record: Dict[str, Any]) -> StoreSettingsOut:
        snapshot = StoreSettingsOut.model_validate(record)
        with self._lock:
            self._snapshot = snapshot
        logger.info("Store settings replaced (open=%s, vat=%s%%)",
                    snapshot.is_open, snapshot.vat_percentage if snapshot.vat_enabled else 0)
        return snapshot

    def _on_change(self, event: ChangeEvent) -> None:
        if event.event == DELETE or not event.record:
            return
        self.apply_external_update(event.record)

    def close(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
