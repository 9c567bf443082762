from __future__ import annotations

from threading import RLock
from typing import Callable, Generic, TypeVar

from utils.logging import get_logger


logger = get_logger(component="observable")

T = TypeVar("T")


class Subscription:
    def __init__(self, owner: CurrentValue, callback: Callable) -> None:
        self._owner = owner
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._owner._remove(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class CurrentValue(Generic[T]):
    """
    Current value + change notification.

    - `value` is readable at any time
    - every `send` replaces the value and notifies every current observer,
      even when the new value equals the old one
    - replace-and-notify is atomic w.r.t. other sends (re-entrant lock, so an
      observer may itself send)
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subs: list[Subscription] = []
        self._lock = RLock()

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, callback: Callable[[T], None], *, replay: bool = False) -> Subscription:
        sub = Subscription(self, callback)
        with self._lock:
            self._subs.append(sub)
            if replay:
                self._notify(sub, self._value)
        return sub

    def send(self, value: T) -> None:
        with self._lock:
            self._value = value
            # Snapshot: observers added during this notification wait for the next send.
            for sub in list(self._subs):
                if sub.active:
                    self._notify(sub, value)

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            try:
                self._subs.remove(sub)
            except ValueError:
                pass

    def _notify(self, sub: Subscription, value: T) -> None:
        try:
            sub._callback(value)
        except Exception:
            logger.exception("observer_failed", callback=repr(sub._callback))
