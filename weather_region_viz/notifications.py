"""
Transient, auto-dismissing user notifications.

Newest first, capped at max_visible. Expiry is driven by prune(now) so the
center stays deterministic and never owns a timer of its own.
"""

import itertools
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class NotificationKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    id: str
    kind: NotificationKind
    title: str
    message: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "title": self.title,
            "message": self.message,
            "timestamp": self.created_at.isoformat(),
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationCenter:
    """Holds the visible notifications."""

    def __init__(
        self,
        max_visible: int = 5,
        auto_dismiss_s: float = 5.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.max_visible = max_visible
        self.auto_dismiss = timedelta(seconds=auto_dismiss_s)
        self._clock = clock
        self._items: List[Notification] = []
        self._ids = itertools.count(1)

    def push(self, kind: NotificationKind, title: str, message: str) -> Notification:
        notification = Notification(
            id=f"n{next(self._ids)}",
            kind=kind,
            title=title,
            message=message,
            created_at=self._clock(),
        )
        self._items = [notification] + self._items[: self.max_visible - 1]
        log = logger.warning if kind is NotificationKind.ERROR else logger.info
        log(f"🔔 [{kind.value}] {title}: {message}")
        return notification

    def success(self, title: str, message: str) -> Notification:
        return self.push(NotificationKind.SUCCESS, title, message)

    def error(self, title: str, message: str) -> Notification:
        return self.push(NotificationKind.ERROR, title, message)

    def warning(self, title: str, message: str) -> Notification:
        return self.push(NotificationKind.WARNING, title, message)

    def info(self, title: str, message: str) -> Notification:
        return self.push(NotificationKind.INFO, title, message)

    def dismiss(self, notification_id: str) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) != before

    def prune(self, now: Optional[datetime] = None) -> int:
        """Drop notifications older than auto_dismiss; returns how many went."""
        now = now or self._clock()
        before = len(self._items)
        self._items = [n for n in self._items if now - n.created_at < self.auto_dismiss]
        return before - len(self._items)

    def visible(self, now: Optional[datetime] = None) -> List[Notification]:
        self.prune(now)
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
