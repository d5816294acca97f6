"""
tuning_profile.py – Per-style tuning presets for the boss.

A TuningProfile is a bundle of multipliers and priority bonuses that
the agent applies on top of its base EnemyData values.  One preset
exists per detected play style, each hand-tuned to counter it:

  Default        – neutral (all mults 1, bonuses 0)
  AntiAggressive – back off further and faster, rain artillery
  AntiDefensive  – crowd the blocker, dash through the guard
  AntiAerial     – punish jumps with artillery
  AntiRanged     – close the gap fast, dash in

Multipliers are applied through ``effective()``, which clamps them to
a global band so adaptation can never push a value outside
[0.5×, 2×] of its base.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Callable

from settings import (
    MIN_COOLDOWN_MULT, MAX_COOLDOWN_MULT,
    MIN_SPEED_MULT, MAX_SPEED_MULT,
    MIN_RANGE_MULT, MAX_RANGE_MULT,
    MIN_PRIORITY_BONUS, MAX_PRIORITY_BONUS,
)
from ai.style_classifier import PlayerStyle


# ══════════════════════════════════════════════════════════
#  Clamp bands
# ══════════════════════════════════════════════════════════

COOLDOWN_BAND: tuple[float, float] = (MIN_COOLDOWN_MULT, MAX_COOLDOWN_MULT)
SPEED_BAND: tuple[float, float] = (MIN_SPEED_MULT, MAX_SPEED_MULT)
RANGE_BAND: tuple[float, float] = (MIN_RANGE_MULT, MAX_RANGE_MULT)
PRIORITY_BAND: tuple[float, float] = (MIN_PRIORITY_BONUS, MAX_PRIORITY_BONUS)


def clamp(value: float, band: tuple[float, float]) -> float:
    lo, hi = band
    return max(lo, min(hi, value))


def effective(base: float, multiplier: float, band: tuple[float, float]) -> float:
    """Base value scaled by a multiplier clamped to *band*."""
    return base * clamp(multiplier, band)


# ══════════════════════════════════════════════════════════
#  Tuning Profile
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TuningProfile:
    """Immutable snapshot of the adapted knobs, read by every agent state."""

    name: str = "Default"

    # Movement
    chase_speed_mult: float = 1.0
    retreat_range_mult: float = 1.0
    retreat_speed_mult: float = 1.0

    # Cooldowns
    attack_cooldown_mult: float = 1.0
    dodge_cooldown_mult: float = 1.0

    # Special action scoring
    dash_priority_bonus: float = 0.0
    artillery_priority_bonus: float = 0.0

    def numeric_fields(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name)
                for f in fields(self) if f.name != "name"}

    def clamped_bonus(self, value: float) -> float:
        return clamp(value, PRIORITY_BAND)

    @property
    def dash_bonus(self) -> float:
        return self.clamped_bonus(self.dash_priority_bonus)

    @property
    def artillery_bonus(self) -> float:
        return self.clamped_bonus(self.artillery_priority_bonus)


# ══════════════════════════════════════════════════════════
#  Presets
# ══════════════════════════════════════════════════════════

def _default() -> TuningProfile:
    return TuningProfile(name="Default")

def _anti_aggressive() -> TuningProfile:
    return TuningProfile(
        name="AntiAggressive",
        retreat_range_mult=1.5,
        retreat_speed_mult=1.3,
        attack_cooldown_mult=0.75,
        dodge_cooldown_mult=0.7,
        artillery_priority_bonus=1.5,
    )

def _anti_defensive() -> TuningProfile:
    return TuningProfile(
        name="AntiDefensive",
        retreat_range_mult=0.6,
        attack_cooldown_mult=0.8,
        dash_priority_bonus=2.0,
        artillery_priority_bonus=0.5,
    )

def _anti_aerial() -> TuningProfile:
    return TuningProfile(
        name="AntiAerial",
        retreat_range_mult=1.2,
        attack_cooldown_mult=1.1,
        artillery_priority_bonus=2.5,
    )

def _anti_ranged() -> TuningProfile:
    return TuningProfile(
        name="AntiRanged",
        chase_speed_mult=1.4,
        retreat_range_mult=0.7,
        dodge_cooldown_mult=0.6,
        dash_priority_bonus=1.5,
    )

PRESET_FACTORY: dict[PlayerStyle, Callable[[], TuningProfile]] = {
    PlayerStyle.BALANCED:   _default,
    PlayerStyle.AGGRESSIVE: _anti_aggressive,
    PlayerStyle.DEFENSIVE:  _anti_defensive,
    PlayerStyle.AERIAL:     _anti_aerial,
    PlayerStyle.RANGED:     _anti_ranged,
}


def default_profile() -> TuningProfile:
    return _default()


def preset_for(style: PlayerStyle,
               overrides: dict[PlayerStyle, TuningProfile] | None = None) -> TuningProfile:
    """Preset for *style*, preferring a caller-supplied override."""
    if overrides and style in overrides:
        return overrides[style]
    factory = PRESET_FACTORY.get(style, _default)
    return factory()


# ══════════════════════════════════════════════════════════
#  Interpolation
# ══════════════════════════════════════════════════════════

def lerp(a: float, b: float, t: float) -> float:
    # (1-t)·a + t·b is exact at both endpoints, unlike a + (b-a)·t
    return (1.0 - t) * a + t * b


def lerp_profile(a: TuningProfile, b: TuningProfile, t: float) -> TuningProfile:
    """Component-wise blend of every numeric field, t clamped to [0, 1]."""
    t = max(0.0, min(1.0, t))
    if t >= 1.0:
        return b
    if t <= 0.0:
        return a
    start = a.numeric_fields()
    end = b.numeric_fields()
    blended = {name: lerp(start[name], end[name], t) for name in start}
    return TuningProfile(name=b.name, **blended)
