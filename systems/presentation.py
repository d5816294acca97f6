"""
presentation.py – Fire-and-forget sink for animation / audio cues.

The AI tells this layer what it is doing (state entered, moving flag,
"attack" / "hurt" / "dash" triggers) and never reads anything back.
Headless runs keep a short rolling history so tests and the stats
report can see what would have been played.
"""

from __future__ import annotations

import logging
from collections import Counter, deque

logger = logging.getLogger(__name__)


class Presentation:
    """Records cues; a renderer would play them instead."""

    def __init__(self, owner: str = "boss", history: int = 64):
        self.owner = owner
        self.moving: bool = False
        self.current_state: str | None = None
        self.trigger_counts: Counter[str] = Counter()
        self.history: deque[tuple[str, str]] = deque(maxlen=history)

    def on_state_enter(self, state: str):
        self.current_state = state
        self.history.append(("enter", state))

    def on_state_exit(self, state: str):
        self.history.append(("exit", state))

    def set_moving(self, moving: bool):
        self.moving = moving

    def trigger(self, name: str):
        self.trigger_counts[name] += 1
        self.history.append(("trigger", name))
        logger.debug("[%s] cue: %s", self.owner, name)

    def reset(self):
        self.moving = False
        self.current_state = None
        self.trigger_counts.clear()
        self.history.clear()
