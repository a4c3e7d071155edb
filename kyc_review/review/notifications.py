"""Transient reviewer notifications with per-message expiry timers."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional

from kyc_review.core.models import NOTIFICATION_KINDS, Notification

logger = logging.getLogger(__name__)

DEFAULT_TTL = 5.0


class NotificationQueue:
    """Ordered notifications, each removed by its own cancellable timer.

    Must be used from the event loop thread: ``push`` schedules expiry with
    ``loop.call_later`` on the running loop unless a loop was passed in. Entries
    pushed while no loop is running get their timer on the next ``push`` made
    inside one.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.ttl = ttl
        self._loop = loop
        self._on_change = on_change
        self._items: List[Notification] = []
        self._timers: Dict[int, asyncio.TimerHandle] = {}
        self._unscheduled: List[int] = []
        self._last_id = 0

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    def push(self, kind: str, message: str) -> int:
        if kind not in NOTIFICATION_KINDS:
            raise ValueError(f"Unknown notification kind {kind!r}")

        notification_id = self._next_id()
        self._items.append(Notification(id=notification_id, kind=kind, message=message))
        self._unscheduled.append(notification_id)
        self._schedule()
        logger.debug("Notification %s (%s): %s", notification_id, kind, message)
        self._changed()
        return notification_id

    def dismiss(self, notification_id: int) -> bool:
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()
        if notification_id in self._unscheduled:
            self._unscheduled.remove(notification_id)
        return self._remove(notification_id)

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._unscheduled.clear()
        if self._items:
            self._items.clear()
            self._changed()

    def _schedule(self) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running loop; %d notification(s) await a timer", len(self._unscheduled))
                return
        for notification_id in self._unscheduled:
            self._timers[notification_id] = loop.call_later(self.ttl, self._expire, notification_id)
        self._unscheduled.clear()

    def _expire(self, notification_id: int) -> None:
        self._timers.pop(notification_id, None)
        self._remove(notification_id)

    def _remove(self, notification_id: int) -> bool:
        for index, item in enumerate(self._items):
            if item.id == notification_id:
                del self._items[index]
                self._changed()
                return True
        return False

    def _next_id(self) -> int:
        # Millisecond timestamps, bumped so two pushes in one millisecond stay distinct.
        candidate = int(time.time() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()
