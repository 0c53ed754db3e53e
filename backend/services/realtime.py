"""
In-process change feed.

Services publish a ``ChangeEvent`` after every committed write to orders or
store settings. Subscribers (the settings provider, websocket relays for
live admin dashboards) decide what to do with it; the usual reaction is to
replace their local copy with ``event.record``.
"""
import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event: str
    record: Dict[str, Any]
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "event": self.event,
            "new": self.record,
            "emitted_at": self.emitted_at.isoformat(),
        }


Subscriber = Callable[[ChangeEvent], None]


class ChangeFeed:
    def __init__(self):
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, table: str, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for ``table``; returns an unsubscribe function."""
        with self._lock:
            self._subscribers[table].append(callback)

        def _unsubscribe():
            with self._lock:
                if callback in self._subscribers.get(table, []):
                    self._subscribers[table].remove(callback)

        return _unsubscribe

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subscribers.get(table, []))

    def publish(self, table: str, event: str, record: Dict[str, Any]) -> ChangeEvent:
        change = ChangeEvent(table=table, event=event, record=record)
        with self._lock:
            callbacks = list(self._subscribers.get(table, []))
        for callback in callbacks:
            # The write is already committed; a broken observer must not undo it
            try:
                callback(change)
            except Exception:
                logger.exception("Change feed subscriber failed for %s %s", table, event)
        return change

    def close(self) -> None:
        with self._lock:
            self._subscribers.clear()
