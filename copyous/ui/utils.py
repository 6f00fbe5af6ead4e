"""Common utilities for UI components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from PySide6.QtCore import SignalInstance


def safe_disconnect(signal: SignalInstance, slot: Optional[Callable] = None) -> bool:
    """Safely disconnect a signal from a slot.

    Returns:
        True if disconnection succeeded, False if the pair was already gone.
    """
    try:
        if slot is not None:
            signal.disconnect(slot)
        else:
            signal.disconnect()
        return True
    except (RuntimeError, TypeError):
        # Signal/slot already disconnected or invalid
        return False


@dataclass(slots=True)
class Subscription:
    """Disposable handle for one signal connection."""

    signal: SignalInstance
    slot: Callable
    active: bool = True

    def dispose(self) -> None:
        if self.active:
            safe_disconnect(self.signal, self.slot)
            self.active = False


class SubscriptionSet:
    """Owns subscriptions and releases all of them together."""

    def __init__(self) -> None:
        self._items: list[Subscription] = []

    def add(self, subscription: Subscription) -> Subscription:
        self._items.append(subscription)
        return subscription

    def connect(self, signal: SignalInstance, slot: Callable) -> Subscription:
        signal.connect(slot)
        return self.add(Subscription(signal, slot))

    def dispose_all(self) -> None:
        items, self._items = self._items, []
        for subscription in items:
            subscription.dispose()

    def __len__(self) -> int:
        return sum(1 for item in self._items if item.active)

