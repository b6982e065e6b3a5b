# =============================================================================
# vanbox_core/notifications/channel.py
# Transient Notification Queue (success / error toasts)
# =============================================================================
"""
NotificationChannel - queue of short-lived user-facing messages.

Each message moves through:

    VISIBLE --(duration elapsed or dismiss())--> EXITING --(300 ms)--> removed

Time comes from an injectable monotonic clock so that views (and tests) can
advance the lifecycle with ``tick()``.
"""

from __future__ import annotations
import threading
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from vanbox_core.logging import get_logger

logger = get_logger(__name__)


class NotificationKind(str, Enum):
    """Visual tag of a notification."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    """A single queued message."""
    id: str
    message: str
    kind: NotificationKind
    duration_ms: int
    created_at: float
    exiting_since: Optional[float] = None

    @property
    def is_exiting(self) -> bool:
        return self.exiting_since is not None

    def expires_at(self) -> float:
        return self.created_at + self.duration_ms / 1000.0


class NotificationChannel:
    """
    Stacked transient notifications with auto and manual dismissal.

    Usage:
        channel = NotificationChannel()
        channel.success("Note saved!")
        channel.error("Error: Could not save note. Please try again.", duration_ms=5000)

        for note in channel.tick():
            render(note)
    """

    DEFAULT_DURATION_MS = 3000
    EXIT_TRANSITION_MS = 300

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._items: List[Notification] = []
        self._lock = threading.Lock()

    def notify(
        self,
        message: str,
        kind: NotificationKind,
        duration_ms: Optional[int] = None,
    ) -> str:
        """
        Enqueue a message.

        Returns:
            The unique id assigned to the message
        """
        note = Notification(
            id=uuid.uuid4().hex[:9],
            message=message,
            kind=NotificationKind(kind),
            duration_ms=self.DEFAULT_DURATION_MS if duration_ms is None else duration_ms,
            created_at=self._clock(),
        )
        with self._lock:
            self._items.append(note)
        logger.debug(f"Notification {note.id} queued ({note.kind.value}): {message}")
        return note.id

    def success(self, message: str, duration_ms: Optional[int] = None) -> str:
        return self.notify(message, NotificationKind.SUCCESS, duration_ms)

    def error(self, message: str, duration_ms: Optional[int] = None) -> str:
        return self.notify(message, NotificationKind.ERROR, duration_ms)

    def dismiss(self, notification_id: str) -> bool:
        """
        Start the exit transition of a message right away.

        Idempotent: unknown, removed or already exiting ids are a no-op.

        Returns:
            True if the message started exiting because of this call
        """
        with self._lock:
            for note in self._items:
                if note.id == notification_id and not note.is_exiting:
                    note.exiting_since = self._clock()
                    return True
        return False

    def tick(self) -> List[Notification]:
        """
        Advance every message's lifecycle to the current clock reading.

        Returns:
            Messages still on screen (visible or exiting), oldest first
        """
        now = self._clock()
        exit_seconds = self.EXIT_TRANSITION_MS / 1000.0

        with self._lock:
            for note in self._items:
                if not note.is_exiting and now >= note.expires_at():
                    note.exiting_since = note.expires_at()

            self._items = [
                note for note in self._items
                if not (note.is_exiting and now >= note.exiting_since + exit_seconds)
            ]
            return list(self._items)

    @property
    def active(self) -> List[Notification]:
        """Messages currently queued, without advancing time."""
        with self._lock:
            return list(self._items)

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._lock:
            for note in self._items:
                if note.id == notification_id:
                    return note
        return None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
