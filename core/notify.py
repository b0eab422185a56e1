# core/notify.py
"""
Notification channel: transient success/error messages.

Fire-and-forget. Notifications coexist, newest is appended after older ones,
and each one expires after a fixed interval. Delivery to the screen happens
through drain(), which the Streamlit layer calls once per rerun so a message
raised right before st.rerun() is still shown.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: NoticeKind
    message: str
    created_at: float

    def expired(self, now: float, ttl: float) -> bool:
        return now - self.created_at >= ttl


class Notifier:
    def __init__(
        self,
        ttl_seconds: float = 1.5,
        max_items: int = 20,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_items = max_items
        self._clock = clock
        self._items: List[Notification] = []
        self._pending: List[Notification] = []
        self._lock = threading.Lock()

    def notify(self, kind: NoticeKind | str, message: str) -> Notification:
        note = Notification(NoticeKind(kind), message, self._clock())
        with self._lock:
            self._items.append(note)
            self._pending.append(note)
            if len(self._items) > self.max_items:
                del self._items[: len(self._items) - self.max_items]
        log = logger.info if note.kind is NoticeKind.SUCCESS else logger.warning
        log("notify[%s]: %s", note.kind.value, message)
        return note

    def success(self, message: str) -> Notification:
        return self.notify(NoticeKind.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(NoticeKind.ERROR, message)

    def active(self) -> List[Notification]:
        """Notifications still on screen, oldest first."""
        now = self._clock()
        with self._lock:
            self._items = [n for n in self._items if not n.expired(now, self.ttl_seconds)]
            return list(self._items)

    def drain(self) -> List[Notification]:
        """Notifications raised since the last drain, oldest first."""
        with self._lock:
            out, self._pending = self._pending, []
        return out

    def latest(self, kind: Optional[NoticeKind | str] = None) -> Optional[Notification]:
        with self._lock:
            for note in reversed(self._items):
                if kind is None or note.kind == NoticeKind(kind):
                    return note
        return None
