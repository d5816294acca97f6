"""
behavior_analyzer.py – Rolling-window behavior aggregation.

Turns the tracker's raw telemetry (attack events + distance/block
samples) into a normalised PlayerProfile.  `recompute` is a pure
function of its inputs: it never mutates the log and never raises,
falling back to sentinel defaults (distance 999, all rates 0) when
there is nothing to read.

Output:
  - PlayerProfile dataclass consumed by style_classifier and the
    adaptation controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from settings import (
    NO_SAMPLES_DISTANCE,
    AGGRESSION_FREQ_ANCHOR, AGGRESSION_DISTANCE_ANCHOR,
    AGGRESSION_FREQ_WEIGHT, AGGRESSION_CLOSENESS_WEIGHT,
)


# ══════════════════════════════════════════════════════════
#  Attack categories
# ══════════════════════════════════════════════════════════

class AttackKind(str, Enum):
    """Attack categories the player can throw (values are wire names)."""

    MELEE = "melee"
    UPPERCUT = "uppercut"
    JUMP_ATTACK = "jumpAttack"
    RANGED = "ranged"


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class AggregatorConfig:
    """Normalisation anchors for the aggression score."""

    freq_anchor: float = AGGRESSION_FREQ_ANCHOR          # attacks/sec = "very aggressive"
    distance_anchor: float = AGGRESSION_DISTANCE_ANCHOR  # units = "very far"
    freq_weight: float = AGGRESSION_FREQ_WEIGHT
    closeness_weight: float = AGGRESSION_CLOSENESS_WEIGHT
    no_samples_distance: float = NO_SAMPLES_DISTANCE


# ══════════════════════════════════════════════════════════
#  Player Profile (output)
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PlayerProfile:
    """Snapshot of the player's recent combat behavior.

    All ratio values are 0.0–1.0.  Rebuilt every tick; never persisted.
    """

    # Attack behavior
    attack_frequency: float = 0.0    # attacks per second in the window
    melee_ratio: float = 0.0
    uppercut_ratio: float = 0.0
    jump_attack_ratio: float = 0.0
    ranged_ratio: float = 0.0

    # Positioning
    average_distance: float = NO_SAMPLES_DISTANCE
    aggression_score: float = 0.0    # 0 = passive, 1 = very aggressive

    # Defensive
    block_rate: float = 0.0          # fraction of samples spent blocking

    # Damage (cumulative for the encounter)
    total_damage_taken: float = 0.0
    total_damage_dealt: float = 0.0

    @property
    def aerial_ratio(self) -> float:
        """Alias for jump_attack_ratio."""
        return self.jump_attack_ratio

    def as_dict(self) -> dict:
        return {
            "attack_frequency": self.attack_frequency,
            "melee_ratio": self.melee_ratio,
            "uppercut_ratio": self.uppercut_ratio,
            "jump_attack_ratio": self.jump_attack_ratio,
            "ranged_ratio": self.ranged_ratio,
            "aerial_ratio": self.aerial_ratio,
            "average_distance": self.average_distance,
            "aggression_score": self.aggression_score,
            "block_rate": self.block_rate,
            "total_damage_taken": self.total_damage_taken,
            "total_damage_dealt": self.total_damage_dealt,
        }


# ══════════════════════════════════════════════════════════
#  Aggregation
# ══════════════════════════════════════════════════════════

def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def aggression_score(frequency: float, distance: float,
                     config: AggregatorConfig | None = None) -> float:
    """Weighted blend of normalised attack frequency and closeness."""
    cfg = config or AggregatorConfig()
    norm_freq = clamp01(frequency / cfg.freq_anchor) if cfg.freq_anchor > 0 else 0.0
    if cfg.distance_anchor > 0:
        closeness = clamp01(1.0 - distance / cfg.distance_anchor)
    else:
        closeness = 0.0
    return norm_freq * cfg.freq_weight + closeness * cfg.closeness_weight


def recompute(events: Iterable, samples: Iterable, window_duration: float,
              config: AggregatorConfig | None = None,
              damage_taken: float = 0.0,
              damage_dealt: float = 0.0) -> PlayerProfile:
    """Build a PlayerProfile from the current log state.

    Args:
        events: TelemetryEvent-like objects with a ``kind`` attribute.
        samples: Sample-like objects with ``distance`` and ``is_blocking``.
        window_duration: rolling window length in seconds.
        config: normalisation anchors (defaults from settings).
        damage_taken / damage_dealt: cumulative encounter counters.
    """
    cfg = config or AggregatorConfig()

    counts = {kind: 0 for kind in AttackKind}
    total = 0
    for event in events:
        total += 1
        if event.kind in counts:
            counts[event.kind] += 1

    frequency = total / window_duration if window_duration > 0 else 0.0

    def ratio(kind) -> float:
        return counts[kind] / total if total > 0 else 0.0

    n_samples = 0
    distance_sum = 0.0
    blocking = 0
    for sample in samples:
        n_samples += 1
        distance_sum += sample.distance
        if sample.is_blocking:
            blocking += 1

    if n_samples > 0:
        avg_distance = distance_sum / n_samples
        block_rate = blocking / n_samples
    else:
        avg_distance = cfg.no_samples_distance
        block_rate = 0.0

    return PlayerProfile(
        attack_frequency=frequency,
        melee_ratio=ratio(AttackKind.MELEE),
        uppercut_ratio=ratio(AttackKind.UPPERCUT),
        jump_attack_ratio=ratio(AttackKind.JUMP_ATTACK),
        ranged_ratio=ratio(AttackKind.RANGED),
        average_distance=avg_distance,
        aggression_score=aggression_score(frequency, avg_distance, cfg),
        block_rate=block_rate,
        total_damage_taken=damage_taken,
        total_damage_dealt=damage_dealt,
    )
