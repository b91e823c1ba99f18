"""Fire-and-forget user notifications.

Rendering is the view layer's job; this module only records what should be
shown, in a bounded queue that drops the oldest entries when full.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    title: str
    description: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        ...


class NotificationQueue:
    """Bounded in-memory notifier."""

    def __init__(self, maxlen: int = 50):
        self._items: deque[Notification] = deque(maxlen=maxlen)

    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        kind = NotificationKind(kind)
        if len(self._items) == self._items.maxlen:
            logger.debug("Notification queue full; dropping oldest entry")
        self._items.append(Notification(kind=kind, title=title, description=description))
        log = logger.warning if kind is NotificationKind.ERROR else logger.info
        log("Notification: %s", title, extra={"kind": kind.value, "description": description})

    def pending(self) -> list[Notification]:
        return list(self._items)

    def drain(self) -> list[Notification]:
        """Hand every queued notification to the caller and empty the queue."""
        items = list(self._items)
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)
