"""
Single-slot "latest value" broadcast.

Publishing replaces the held value and notifies every subscriber with that
value only. Nothing is queued: a subscriber that is slow, or that subscribes
late, only ever sees the newest state.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, List, Optional, TypeVar

from havs.utils.logging import get_logger

T = TypeVar("T")

log = get_logger(__name__)

Subscriber = Callable[[T], None]


class LatestValue(Generic[T]):
    """Holds the most recent value and fans it out to subscribers."""

    def __init__(self, initial: Optional[T] = None) -> None:
        self._lock = threading.Lock()
        # Held for a whole delivery; reentrant so a subscriber may publish.
        self._deliver_lock = threading.RLock()
        self._value: Optional[T] = initial
        self._version = 0
        self._subscribers: List[Subscriber[T]] = []

    @property
    def value(self) -> Optional[T]:
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        """Number of values published so far."""
        with self._lock:
            return self._version

    def publish(self, value: T) -> None:
        """
        Store ``value`` and deliver it. Concurrent publishers are delivered one
        after another, so no subscriber sees an older value after a newer one.
        """
        with self._deliver_lock:
            with self._lock:
                self._value = value
                self._version += 1
                version = self._version
                subscribers = list(self._subscribers)

            for callback in subscribers:
                # A newer publish already went out; this one is superseded.
                if self.version != version:
                    break
                callback(value)

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        """
        Register ``callback``; it is called with the current value right away
        when one exists. Returns a function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)
            current = self._value

        if current is not None:
            callback(current)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)
                    log.debug("Subscriber removed", extra={"remaining": len(self._subscribers)})

        return unsubscribe


__all__ = ["LatestValue", "Subscriber"]
