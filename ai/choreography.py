"""
choreography.py – Multi-tick attack sequences for the boss.

Each choreography is a small elapsed-time machine stepped once per tick
by the owning FSM state.  Nothing here blocks or sleeps: "wait 0.3 s"
means "accumulate dt until it reaches 0.3 on some later tick".

  AttackChoreography    – windup, fire one pattern, hold the attacking
                          flag until a burst finishes.
  ArtilleryChoreography – windup, then N strikes at a fixed interval,
                          bounded by a total state duration.
  DashChoreography      – direction locked at begin, fixed duration,
                          single-hit contact latch.

Attack patterns cycle Single, Single, Burst, Single, Single, Spread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from settings import (
    ATTACK_FIRE_DELAY,
    BURST_SHOT_COUNT, BURST_SHOT_INTERVAL,
    SPREAD_ANGLES, PATTERN_CYCLE_LENGTH,
    ARTILLERY_WINDUP, ARTILLERY_STRIKE_INTERVAL,
    ARTILLERY_TOTAL_STRIKES, ARTILLERY_STATE_DURATION,
    DASH_CONTACT_RANGE,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Enums
# ══════════════════════════════════════════════════════════

class ChoreographyPhase(Enum):
    IDLE = "idle"
    WINDUP = "windup"
    FIRING = "firing"
    RECOVERING = "recovering"


class AttackPattern(str, Enum):
    SINGLE = "Single"
    BURST = "Burst"       # rapid shots in a line
    SPREAD = "Spread"     # fan of shots at once


def pattern_for(attack_number: int, cycle_length: int = PATTERN_CYCLE_LENGTH) -> AttackPattern:
    """Pattern for the n-th attack (1-based).

    Every 3rd attack of a cycle is a Burst and the last is a Spread.
    """
    if cycle_length <= 0:
        return AttackPattern.SINGLE
    slot = attack_number % cycle_length
    if slot == cycle_length // 2:
        return AttackPattern.BURST
    if slot == 0:
        return AttackPattern.SPREAD
    return AttackPattern.SINGLE


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class ChoreographyConfig:
    """Timing constants for the choreographed states (not adapted)."""

    # Attack
    fire_delay: float = ATTACK_FIRE_DELAY
    burst_shot_count: int = BURST_SHOT_COUNT
    burst_shot_interval: float = BURST_SHOT_INTERVAL
    spread_angles: tuple[float, ...] = SPREAD_ANGLES
    pattern_cycle_length: int = PATTERN_CYCLE_LENGTH

    # Artillery
    artillery_windup: float = ARTILLERY_WINDUP
    artillery_strike_interval: float = ARTILLERY_STRIKE_INTERVAL
    artillery_total_strikes: int = ARTILLERY_TOTAL_STRIKES
    artillery_state_duration: float = ARTILLERY_STATE_DURATION

    # Dash
    dash_contact_range: float = DASH_CONTACT_RANGE

    debug: bool = False


# ══════════════════════════════════════════════════════════
#  Attack
# ══════════════════════════════════════════════════════════

class AttackChoreography:
    """Windup → fire → (burst) → recovering.

    ``advance`` returns the shot angles (degrees, relative to facing)
    to launch on this tick; an empty list means nothing fires.
    """

    def __init__(self, config: ChoreographyConfig | None = None):
        self.cfg = config or ChoreographyConfig()
        self.phase = ChoreographyPhase.IDLE
        self.elapsed: float = 0.0
        self.has_fired: bool = False
        self.pattern = AttackPattern.SINGLE
        self.attack_counter: int = 0     # persists across attacks
        self._shots_fired: int = 0
        self._shot_timer: float = 0.0

    @property
    def is_attacking(self) -> bool:
        """True while a burst is still in flight."""
        return self.phase == ChoreographyPhase.FIRING

    @property
    def in_windup(self) -> bool:
        return self.phase == ChoreographyPhase.WINDUP

    @property
    def complete(self) -> bool:
        return self.phase == ChoreographyPhase.RECOVERING

    def begin(self):
        self.phase = ChoreographyPhase.WINDUP
        self.elapsed = 0.0
        self.has_fired = False
        self._shots_fired = 0
        self._shot_timer = 0.0

    def advance(self, dt: float) -> list[float]:
        self.elapsed += dt

        if self.phase == ChoreographyPhase.WINDUP:
            if self.elapsed < self.cfg.fire_delay:
                return []
            return self._fire()

        if self.phase == ChoreographyPhase.FIRING:
            self._shot_timer += dt
            if self._shot_timer < self.cfg.burst_shot_interval:
                return []
            self._shot_timer = 0.0
            if self._shots_fired < self.cfg.burst_shot_count:
                self._shots_fired += 1
                return [0.0]
            # Last interval after the final shot has elapsed.
            self.phase = ChoreographyPhase.RECOVERING
            return []

        return []

    def _fire(self) -> list[float]:
        self.has_fired = True
        self.attack_counter += 1
        self.pattern = pattern_for(self.attack_counter, self.cfg.pattern_cycle_length)
        if self.cfg.debug:
            logger.debug("Attack #%d pattern=%s", self.attack_counter, self.pattern.value)

        if self.pattern == AttackPattern.BURST and self.cfg.burst_shot_count > 0:
            self.phase = ChoreographyPhase.FIRING
            self._shots_fired = 1
            self._shot_timer = 0.0
            return [0.0]

        self.phase = ChoreographyPhase.RECOVERING
        if self.pattern == AttackPattern.SPREAD:
            return list(self.cfg.spread_angles)
        return [0.0]

    def cancel(self):
        """Abandon any in-flight sequence (state exited early)."""
        self.phase = ChoreographyPhase.IDLE
        self._shots_fired = 0
        self._shot_timer = 0.0

    def reset(self):
        self.cancel()
        self.elapsed = 0.0
        self.has_fired = False
        self.attack_counter = 0
        self.pattern = AttackPattern.SINGLE


# ══════════════════════════════════════════════════════════
#  Artillery
# ══════════════════════════════════════════════════════════

class ArtilleryChoreography:
    """Windup, then a fixed count of strikes at a fixed interval."""

    def __init__(self, config: ChoreographyConfig | None = None):
        self.cfg = config or ChoreographyConfig()
        self.phase = ChoreographyPhase.IDLE
        self.elapsed: float = 0.0
        self.strikes_launched: int = 0
        self._strike_timer: float = 0.0

    @property
    def finished(self) -> bool:
        return (self.phase != ChoreographyPhase.IDLE
                and self.elapsed >= self.cfg.artillery_state_duration)

    def begin(self):
        self.phase = ChoreographyPhase.WINDUP
        self.elapsed = 0.0
        self.strikes_launched = 0
        self._strike_timer = 0.0

    def advance(self, dt: float) -> int:
        """Step the sequence; returns how many strikes to launch now."""
        self.elapsed += dt
        if self.elapsed < self.cfg.artillery_windup:
            return 0

        if self.strikes_launched >= self.cfg.artillery_total_strikes:
            self.phase = ChoreographyPhase.RECOVERING
            return 0

        self.phase = ChoreographyPhase.FIRING
        self._strike_timer += dt
        if self._strike_timer < self.cfg.artillery_strike_interval:
            return 0
        self._strike_timer = 0.0
        self.strikes_launched += 1
        if self.strikes_launched >= self.cfg.artillery_total_strikes:
            self.phase = ChoreographyPhase.RECOVERING
        return 1

    def reset(self):
        self.phase = ChoreographyPhase.IDLE
        self.elapsed = 0.0
        self.strikes_launched = 0
        self._strike_timer = 0.0


# ══════════════════════════════════════════════════════════
#  Dash
# ══════════════════════════════════════════════════════════

class DashChoreography:
    """Committed horizontal charge with a one-shot contact latch."""

    def __init__(self, config: ChoreographyConfig | None = None):
        self.cfg = config or ChoreographyConfig()
        self.phase = ChoreographyPhase.IDLE
        self.direction: int = 0
        self.speed: float = 0.0
        self.duration: float = 0.0
        self.elapsed: float = 0.0
        self.has_hit: bool = False

    @property
    def velocity(self) -> tuple[float, float]:
        return (self.direction * self.speed, 0.0)

    @property
    def expired(self) -> bool:
        return self.elapsed >= self.duration

    def begin(self, direction: int, speed: float, duration: float):
        # Direction is never re-read mid-dash.
        self.direction = 1 if direction >= 0 else -1
        self.speed = speed
        self.duration = duration
        self.elapsed = 0.0
        self.has_hit = False
        self.phase = ChoreographyPhase.FIRING

    def advance(self, dt: float) -> tuple[float, float]:
        self.elapsed += dt
        return self.velocity

    def try_contact(self, distance: float) -> bool:
        """True exactly once per dash, the first time we are in contact."""
        if self.has_hit or distance > self.cfg.dash_contact_range:
            return False
        self.has_hit = True
        return True

    def reset(self):
        self.phase = ChoreographyPhase.IDLE
        self.elapsed = 0.0
        self.has_hit = False
