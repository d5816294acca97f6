"""
events.py – Observer channel for debug / stats notifications.

Subscribers are called synchronously, in subscription order, with the
published event.  The channel is side-effect only: nothing a
subscriber returns flows back into the AI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class StyleChangeEvent:
    """Published once when the committed play style changes."""
    old_style: Any
    new_style: Any
    profile: Any = None        # PlayerProfile snapshot at evaluation time


@dataclass(frozen=True)
class StateTransitionEvent:
    """Published on every agent FSM transition."""
    old_state: Any
    new_state: Any


@dataclass(frozen=True)
class DamageEvent:
    """Published by Health when damage lands."""
    amount: float
    remaining: float


class EventChannel:
    """Ordered fan-out list of callbacks.

    Usage:
        channel = EventChannel()
        unsubscribe = channel.subscribe(lambda ev: print(ev))
        channel.publish(StyleChangeEvent(old, new, profile))
        unsubscribe()
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._subscribers: list[Callable[[Any], None]] = []

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event) -> None:
        # Copy so a subscriber may unsubscribe while being notified.
        for callback in list(self._subscribers):
            callback(event)

    def __len__(self) -> int:
        return len(self._subscribers)
