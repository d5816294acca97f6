"""
style_classifier.py – Maps a PlayerProfile to a discrete play style.

Rules are evaluated top to bottom; the first match wins, so the order
encodes priority (most dangerous pattern first):

  1. aggression_score ≥ aggressive            → AGGRESSIVE
  2. block_rate       ≥ defensive             → DEFENSIVE
  3. aerial_ratio     ≥ aerial  and freq > 0.2 → AERIAL
  4. ranged_ratio     ≥ ranged  and dist > 5.0 → RANGED
  5. otherwise                                → BALANCED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from settings import (
    AGGRESSIVE_THRESHOLD, DEFENSIVE_THRESHOLD,
    AERIAL_THRESHOLD, RANGED_THRESHOLD,
    AERIAL_MIN_FREQUENCY, RANGED_MIN_DISTANCE,
)
from ai.behavior_analyzer import PlayerProfile


class PlayerStyle(str, Enum):
    """Closed set of detected play styles."""

    BALANCED = "Balanced"
    AGGRESSIVE = "Aggressive"
    DEFENSIVE = "Defensive"
    AERIAL = "Aerial"
    RANGED = "Ranged"


@dataclass
class ClassifierThresholds:
    """Thresholds for the ordered classification rules."""

    aggressive: float = AGGRESSIVE_THRESHOLD
    defensive: float = DEFENSIVE_THRESHOLD
    aerial: float = AERIAL_THRESHOLD
    ranged: float = RANGED_THRESHOLD
    aerial_min_frequency: float = AERIAL_MIN_FREQUENCY
    ranged_min_distance: float = RANGED_MIN_DISTANCE


def classify(profile: PlayerProfile,
             thresholds: ClassifierThresholds | None = None) -> PlayerStyle:
    """Return the play style for *profile*.  Total: always returns a style."""
    th = thresholds or ClassifierThresholds()

    if profile.aggression_score >= th.aggressive:
        return PlayerStyle.AGGRESSIVE

    if profile.block_rate >= th.defensive:
        return PlayerStyle.DEFENSIVE

    if (profile.aerial_ratio >= th.aerial
            and profile.attack_frequency > th.aerial_min_frequency):
        return PlayerStyle.AERIAL

    if (profile.ranged_ratio >= th.ranged
            and profile.average_distance > th.ranged_min_distance):
        return PlayerStyle.RANGED

    return PlayerStyle.BALANCED
