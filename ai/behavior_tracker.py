"""
behavior_tracker.py – Rolling-window telemetry of the player's combat.

Records every attack the player throws and samples distance / block
state on a fixed cadence.  Each tick the log is pruned to the window
and the PlayerProfile is rebuilt (cheap, it just reads two short lists).

Inputs (fire-and-forget, from the combat event source):
  - record_attack(kind)
  - record_damage_taken(amount)
  - record_damage_dealt(amount)

The tracker keeps its own clock, advanced by ``update(dt)``, so the
whole thing is deterministic under a fixed tick.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from settings import TRACKER_WINDOW_DURATION, TRACKER_SAMPLE_INTERVAL
from ai.behavior_analyzer import AggregatorConfig, AttackKind, PlayerProfile, recompute

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Event types
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TelemetryEvent:
    """Timestamped record of a single player attack."""

    timestamp: float
    kind: object        # AttackKind, or the raw string for unknown kinds


@dataclass(frozen=True)
class Sample:
    """Periodic distance / block snapshot."""

    timestamp: float
    distance: float
    is_blocking: bool


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class TrackerConfig:
    """Tunables for the rolling window."""

    window_duration: float = TRACKER_WINDOW_DURATION
    sample_interval: float = TRACKER_SAMPLE_INTERVAL
    aggregator: AggregatorConfig = field(default_factory=AggregatorConfig)
    debug: bool = False

    @property
    def max_samples(self) -> int:
        if self.sample_interval <= 0:
            return 1
        return max(1, math.ceil(self.window_duration / self.sample_interval))


# ══════════════════════════════════════════════════════════
#  Behavior Tracker
# ══════════════════════════════════════════════════════════

class BehaviorTracker:
    """Observes the player and exposes a read-only PlayerProfile.

    Usage:
        tracker = BehaviorTracker(distance_source=lambda: arena_dist(),
                                  block_source=lambda: player.is_blocking)
        tracker.record_attack(AttackKind.MELEE)
        # every tick:
        tracker.update(dt)
        profile = tracker.profile
    """

    def __init__(self, config: TrackerConfig | None = None,
                 distance_source: Optional[Callable[[], Optional[float]]] = None,
                 block_source: Optional[Callable[[], bool]] = None):
        self.cfg = config or TrackerConfig()
        self.distance_source = distance_source
        self.block_source = block_source

        self._now: float = 0.0
        self._events: deque[TelemetryEvent] = deque()
        self._samples: deque[Sample] = deque(maxlen=self.cfg.max_samples)
        self._sample_timer: float = 0.0

        self._damage_taken: float = 0.0
        self._damage_dealt: float = 0.0

        self._profile = PlayerProfile()

    # ── Properties ────────────────────────────────────────

    @property
    def now(self) -> float:
        return self._now

    @property
    def profile(self) -> PlayerProfile:
        return self._profile

    @property
    def events(self) -> tuple[TelemetryEvent, ...]:
        return tuple(self._events)

    @property
    def samples(self) -> tuple[Sample, ...]:
        return tuple(self._samples)

    # ── Combat event source ───────────────────────────────

    def record_attack(self, kind) -> None:
        """Log one player attack at the current tracker time."""
        try:
            kind = AttackKind(kind)
        except ValueError:
            pass  # unknown kinds still count toward frequency
        self._events.append(TelemetryEvent(timestamp=self._now, kind=kind))
        if self.cfg.debug:
            logger.debug("Attack logged: %s | window total: %d",
                         getattr(kind, "value", kind), len(self._events))

    def record_damage_taken(self, amount: float) -> None:
        self._damage_taken += amount

    def record_damage_dealt(self, amount: float) -> None:
        self._damage_dealt += amount

    # ── Per-tick update ───────────────────────────────────

    def update(self, dt: float) -> PlayerProfile:
        """Advance the clock, prune, sample on cadence, rebuild the profile."""
        self._now += dt
        self._prune()

        self._sample_timer += dt
        if self._sample_timer >= self.cfg.sample_interval:
            self._sample_timer = 0.0
            self._take_sample()

        self._profile = recompute(
            self._events, self._samples, self.cfg.window_duration,
            self.cfg.aggregator,
            damage_taken=self._damage_taken,
            damage_dealt=self._damage_dealt,
        )
        return self._profile

    def _prune(self):
        cutoff = self._now - self.cfg.window_duration
        # Events arrive in time order, so the oldest are always on the left.
        while self._events and self._events[0].timestamp < cutoff:
            self._events.popleft()

    def _take_sample(self):
        distance = self.distance_source() if self.distance_source else None
        if distance is None:
            # Opponent not resolved yet, retry on the next cadence.
            return
        blocking = bool(self.block_source()) if self.block_source else False
        self._samples.append(Sample(timestamp=self._now,
                                    distance=float(distance),
                                    is_blocking=blocking))

    # ── Reset ─────────────────────────────────────────────

    def reset_tracking(self):
        """Clear all tracked data (start of a new encounter)."""
        self._events.clear()
        self._samples.clear()
        self._sample_timer = 0.0
        self._damage_taken = 0.0
        self._damage_dealt = 0.0
        self._profile = PlayerProfile()
        if self.cfg.debug:
            logger.debug("Tracking reset.")
