"""
ai_core.py – Central AI brain that orchestrates all sub-systems.

Architecture:
    ai_core.AIBrain
      ├── behavior_tracker.BehaviorTracker          (rolling telemetry → PlayerProfile)
      ├── adaptation_controller.AdaptationController (style → blended TuningProfile)
      └── entities.enemy.Enemy                      (FSM + choreography)

Per-tick ordering is fixed and is the whole point of this class:

    tracker.update  →  adaptation.update  →  enemy.tuning = snapshot  →  enemy.update

so the FSM always acts on the tuning adapted from this tick's profile.
The brain is the ONLY writer of the enemy's tuning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ai.adaptation_controller import AdaptationConfig, AdaptationController
from ai.behavior_tracker import BehaviorTracker, TrackerConfig
from ai.events import EventChannel

logger = logging.getLogger(__name__)


@dataclass
class BrainConfig:
    """Bundle of the sub-system configs."""

    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    adaptation: AdaptationConfig = field(default_factory=AdaptationConfig)
    adaptation_enabled: bool = True
    debug: bool = False


# ══════════════════════════════════════════════════════════
#  AI Brain
# ══════════════════════════════════════════════════════════

class AIBrain:
    """Owns the tracker and adaptation controller for one boss.

    Usage:
        brain = AIBrain(enemy, distance_source=..., block_source=...)
        player.on_attack = brain.tracker.record_attack
        # every tick:
        brain.update(dt)
    """

    def __init__(self, enemy, config: BrainConfig | None = None,
                 channel: EventChannel | None = None,
                 distance_source=None, block_source=None,
                 tracker: BehaviorTracker | None = None):
        self.cfg = config or BrainConfig()
        self.enemy = enemy
        self.channel = channel or EventChannel("ai")

        if self.cfg.debug:
            self.cfg.tracker.debug = True
            self.cfg.adaptation.debug = True

        self.tracker = tracker or BehaviorTracker(
            self.cfg.tracker,
            distance_source=distance_source,
            block_source=block_source,
        )
        self.adaptation = AdaptationController(
            tracker=self.tracker if self.cfg.adaptation_enabled else None,
            config=self.cfg.adaptation,
            channel=self.channel,
        )
        self.ticks: int = 0

    # ── Properties ────────────────────────────────────────

    @property
    def profile(self):
        return self.tracker.profile

    @property
    def style(self):
        return self.adaptation.current_style

    @property
    def tuning(self):
        return self.adaptation.tuning

    # ══════════════════════════════════════════════════════
    #  Main Update
    # ══════════════════════════════════════════════════════

    def update(self, dt: float):
        """One tick in the fixed order tracker → adaptation → enemy."""
        self.tracker.update(dt)
        tuning = self.adaptation.update(dt)
        # Immutable snapshot swapped once per tick.
        self.enemy.tuning = tuning
        self.enemy.update(dt)
        self.ticks += 1

    def reset_encounter(self):
        """Clear everything learned and restart the boss."""
        self.tracker.reset_tracking()
        self.adaptation.reset()
        self.enemy.reset()
        self.enemy.tuning = self.adaptation.tuning
        self.ticks = 0
        logger.info("Encounter reset.")
