# core/order_flow.py
# Order status workflow.
#
#   awaiting_confirmation -> pending -> preparing -> ready -> completed
#   any non-terminal status -> cancelled
#
# completed and cancelled are terminal for forward actions. A revert moves the
# order back to the old status of its most recent history entry and is itself
# recorded as a new history entry.
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Sequence, Tuple

from core.exceptions import InvalidTransitionError


class OrderStatus(str, enum.Enum):
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderAction(str, enum.Enum):
    CONFIRM = "confirm"
    START_PREPARING = "start_preparing"
    MARK_READY = "mark_ready"
    COMPLETE = "complete"
    CANCEL = "cancel"


TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})
ACTIVE_STATUSES: FrozenSet[OrderStatus] = frozenset(set(OrderStatus) - TERMINAL_STATUSES)

# action -> (allowed source statuses, target status)
TRANSITIONS: Dict[OrderAction, Tuple[FrozenSet[OrderStatus], OrderStatus]] = {
    OrderAction.CONFIRM: (frozenset({OrderStatus.AWAITING_CONFIRMATION}), OrderStatus.PENDING),
    OrderAction.START_PREPARING: (frozenset({OrderStatus.PENDING}), OrderStatus.PREPARING),
    OrderAction.MARK_READY: (frozenset({OrderStatus.PREPARING}), OrderStatus.READY),
    OrderAction.COMPLETE: (frozenset({OrderStatus.READY}), OrderStatus.COMPLETED),
    OrderAction.CANCEL: (ACTIVE_STATUSES, OrderStatus.CANCELLED),
}


@dataclass(frozen=True)
class StatusChange:
    old_status: OrderStatus
    new_status: OrderStatus


@dataclass(frozen=True)
class HistoryEntry:
    """Read-only view of a persisted status history row."""
    id: int
    old_status: Optional[str]
    new_status: str
    changed_at: Optional[datetime] = None


def initial_status(webhook_url: Optional[str]) -> OrderStatus:
    # Orders wait for external confirmation only when a webhook will deliver them
    if webhook_url and webhook_url.strip():
        return OrderStatus.AWAITING_CONFIRMATION
    return OrderStatus.PENDING


def is_terminal(status) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def allowed_actions(status) -> Tuple[OrderAction, ...]:
    current = OrderStatus(status)
    return tuple(a for a, (sources, _) in TRANSITIONS.items() if current in sources)


def plan_transition(current, action) -> StatusChange:
    current = OrderStatus(current)
    action = OrderAction(action)
    sources, target = TRANSITIONS[action]
    if current not in sources:
        raise InvalidTransitionError(
            f"Cannot {action.value} an order that is {current.value}",
            error_code="INVALID_TRANSITION",
            details={"status": current.value, "action": action.value},
        )
    return StatusChange(current, target)


def plan_revert(current, history: Sequence[HistoryEntry], entry_id: Optional[int] = None) -> StatusChange:
    """Work out the status change that undoes the latest history entry.

    ``history`` must be ordered newest first. Only its first entry can be
    reverted; naming an older ``entry_id`` is rejected.
    """
    current = OrderStatus(current)
    if not history:
        raise InvalidTransitionError("Order has no status changes to revert",
                                     error_code="NOTHING_TO_REVERT")
    latest = history[0]
    if entry_id is not None and entry_id != latest.id:
        raise InvalidTransitionError(
            "Only the most recent status change can be reverted",
            error_code="REVERT_NOT_LATEST",
            details={"entry_id": entry_id, "latest_entry_id": latest.id},
        )
    if not latest.old_status:
        raise InvalidTransitionError("Latest status change has no previous status",
                                     error_code="NOTHING_TO_REVERT")
    if OrderStatus(latest.new_status) != current:
        raise InvalidTransitionError(
            "Latest status change does not match the current status",
            error_code="HISTORY_OUT_OF_SYNC",
            details={"status": current.value, "latest_new_status": latest.new_status},
        )
    return StatusChange(current, OrderStatus(latest.old_status))
