"""
adaptation_controller.py – Style evaluation and tuning blend.

Two timers drive the controller:

  evaluation timer   – every ``evaluation_interval`` seconds the current
                       PlayerProfile is classified.  If the style changed,
                       a transition toward that style's preset begins.
  transition timer   – while transitioning, the live tuning is
                       lerp(previous, target, timer / duration).  At
                       t ≥ 1 the live tuning equals the target exactly.

The live tuning is an immutable TuningProfile, swapped once per tick.
The agent reads it; nothing else writes it.

Without a tracker the controller holds the Default tuning and does
nothing (adaptation disabled).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from settings import EVALUATION_INTERVAL, TRANSITION_DURATION
from ai.behavior_analyzer import PlayerProfile
from ai.events import EventChannel, StyleChangeEvent
from ai.style_classifier import ClassifierThresholds, PlayerStyle, classify
from ai.tuning_profile import (
    TuningProfile, default_profile, lerp_profile, preset_for,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class AdaptationConfig:
    """Tunables for the adaptation cadence and blend."""

    evaluation_interval: float = EVALUATION_INTERVAL
    transition_duration: float = TRANSITION_DURATION
    thresholds: ClassifierThresholds = field(default_factory=ClassifierThresholds)
    # Optional per-style replacements for the built-in presets
    presets: dict[PlayerStyle, TuningProfile] = field(default_factory=dict)
    debug: bool = False


# ══════════════════════════════════════════════════════════
#  Adaptation Controller
# ══════════════════════════════════════════════════════════

class AdaptationController:
    """Classifies the player on a cadence and blends the boss tuning.

    Usage:
        ctrl = AdaptationController(tracker=tracker, channel=channel)
        # every tick, after tracker.update():
        ctrl.update(dt)
        agent.tuning = ctrl.tuning
    """

    def __init__(self, tracker=None, config: AdaptationConfig | None = None,
                 channel: EventChannel | None = None):
        self.cfg = config or AdaptationConfig()
        self.tracker = tracker
        self.channel = channel

        self._style = PlayerStyle.BALANCED
        self._current: TuningProfile = default_profile()
        self._previous: TuningProfile = self._current
        self._target: TuningProfile = self._current

        self._evaluation_timer: float = 0.0
        self._transition_timer: float = 0.0
        self._transitioning: bool = False

        if tracker is None:
            logger.warning("No behavior tracker attached; adaptation disabled.")

    # ── Properties ────────────────────────────────────────

    @property
    def tuning(self) -> TuningProfile:
        return self._current

    @property
    def current_style(self) -> PlayerStyle:
        return self._style

    @property
    def is_transitioning(self) -> bool:
        return self._transitioning

    @property
    def enabled(self) -> bool:
        return self.tracker is not None

    @property
    def transition_progress(self) -> float:
        if not self._transitioning:
            return 1.0
        return self._progress()

    # ── Per-tick update ───────────────────────────────────

    def update(self, dt: float) -> TuningProfile:
        """Advance both timers and return the live tuning."""
        if self.tracker is None:
            return self._current

        self._evaluation_timer += dt
        if self._evaluation_timer >= self.cfg.evaluation_interval:
            self._evaluation_timer = 0.0
            self._evaluate(self.tracker.profile)

        # The transition advances on the same tick that starts it.
        if self._transitioning:
            self._transition_timer += dt
            t = self._progress()
            self._current = lerp_profile(self._previous, self._target, t)
            if t >= 1.0:
                self._current = self._target
                self._transitioning = False

        return self._current

    def _progress(self) -> float:
        if self.cfg.transition_duration <= 0:
            return 1.0
        return max(0.0, min(1.0, self._transition_timer / self.cfg.transition_duration))

    def _evaluate(self, profile: PlayerProfile):
        new_style = classify(profile, self.cfg.thresholds)
        if new_style == self._style:
            return  # unchanged: no log, no event

        old_style = self._style
        logger.info(
            "Style change: %s -> %s | aggression=%.2f block=%.2f aerial=%.2f freq=%.2f/s",
            old_style.value, new_style.value,
            profile.aggression_score, profile.block_rate,
            profile.aerial_ratio, profile.attack_frequency,
        )
        self._style = new_style
        self._begin_transition(preset_for(new_style, self.cfg.presets))

        if self.channel is not None:
            self.channel.publish(StyleChangeEvent(old_style, new_style, profile))

    def _begin_transition(self, target: TuningProfile):
        self._previous = self._current
        self._target = target
        self._transition_timer = 0.0
        self._transitioning = True
        if self.cfg.debug:
            logger.debug("Blending %s -> %s over %.1fs",
                         self._previous.name, target.name,
                         self.cfg.transition_duration)

    # ── Public controls ───────────────────────────────────

    def force_evaluate(self):
        """Re-classify on the next update regardless of the cadence."""
        self._evaluation_timer = self.cfg.evaluation_interval

    def reset(self):
        """Back to Balanced / Default tuning (new encounter)."""
        self._style = PlayerStyle.BALANCED
        self._current = default_profile()
        self._previous = self._current
        self._target = self._current
        self._evaluation_timer = 0.0
        self._transition_timer = 0.0
        self._transitioning = False
