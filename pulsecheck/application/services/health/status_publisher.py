from __future__ import annotations

import itertools
from collections import deque
from typing import Callable, Deque, Dict, Optional

from pulsecheck.core.logging.logger import StructuredLogger
from pulsecheck.domain.entities import HealthStatus

StatusCallback = Callable[[HealthStatus], None]
Unsubscribe = Callable[[], None]


class StatusPublisher:
    """Holds the latest HealthStatus snapshot and pushes it to subscribers.

    Subscribers are called synchronously, in subscription order. A
    subscriber that raises is logged and skipped; the others still run.
    A snapshot published from inside a subscriber is queued and delivered
    after the current one has reached every subscriber, so all
    subscribers see publications in the same order.
    """

    def __init__(self, logger: StructuredLogger, initial: Optional[HealthStatus] = None) -> None:
        self.logger = logger
        self._current = initial or HealthStatus.loading()
        self._subscribers: Dict[int, StatusCallback] = {}
        self._tokens = itertools.count(1)
        self._pending: Deque[HealthStatus] = deque()
        self._delivering = False

    def subscribe(self, callback: StatusCallback) -> Unsubscribe:
        """Register ``callback``; the returned function removes it (idempotent)."""
        token = next(self._tokens)
        self._subscribers[token] = callback

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def current_status(self) -> HealthStatus:
        return self._current

    def publish(self, status: HealthStatus) -> None:
        self._current = status
        self._pending.append(status)
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._pending:
                self._deliver(self._pending.popleft())
        finally:
            self._delivering = False
            self._pending.clear()

    def _deliver(self, status: HealthStatus) -> None:
        for token, callback in list(self._subscribers.items()):
            # skip subscribers removed earlier in this same publication
            if token not in self._subscribers:
                continue
            try:
                callback(status)
            except Exception:
                self.logger.error(lambda: "subscriber-failed", extra={"state": status.status.value}, exc_info=True)
