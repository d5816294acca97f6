"""
enemy.py – The adaptive boss.

The Enemy owns:
- EnemyData (base speeds, ranges, cooldowns, dash / artillery knobs)
- the live TuningProfile snapshot (written by the AIBrain each tick)
- cooldown timers and the three choreographies
- the EnemyStateMachine that drives it

Every collaborator is injected at construction and may be None:

  body            – spatial capabilities (systems/arena.Body); required
  target_locator  – () -> fighter or None, polled until resolved
  threat_sensor   – .incoming_threat(body, radius)
  projectiles     – .spawn_directional(...) for attack shots
  artillery       – .spawn_strike(); None disables ArtilleryStrike
  presentation    – animation / audio cue sink

Missing pieces degrade rather than fail: no target means infinite
distance (so the FSM patrols), no artillery means it is never scored.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from pygame.math import Vector2

from settings import (
    ENEMY_PATROL_SPEED, ENEMY_CHASE_SPEED, ENEMY_RETREAT_SPEED,
    ENEMY_DETECTION_RANGE, ENEMY_ATTACK_RANGE, ENEMY_RETREAT_RANGE,
    ENEMY_PROJECTILE_DETECTION_RANGE, CHASE_STOP_FRACTION,
    ENEMY_ATTACK_COOLDOWN, ENEMY_DAMAGE, ENEMY_PROJECTILE_SPEED,
    ENEMY_DODGE_COOLDOWN, ENEMY_DODGE_JUMP_FORCE,
    DODGE_DURATION, DODGE_MIN_AIRTIME,
    ENEMY_STUN_DURATION, RETREAT_MAX_TIME, ENEMY_PATROL_IDLE_DURATION,
    PATROL_LEFT_EDGE, PATROL_RIGHT_EDGE,
    DASH_SPEED, DASH_DURATION, DASH_DAMAGE, DASH_KNOCKBACK_FORCE,
    DASH_STOPS_ON_PLAYER_HIT, DASH_COOLDOWN, DASH_MIN_RANGE, DASH_MAX_RANGE,
    ARTILLERY_COOLDOWN, BOSS_MAX_HP, FIRE_POINT_HEIGHT,
)
from ai.agent_fsm import AgentState, EnemyStateMachine
from ai.choreography import (
    ArtilleryChoreography, AttackChoreography, ChoreographyConfig, DashChoreography,
)
from ai.events import EventChannel
from ai.tuning_profile import (
    COOLDOWN_BAND, RANGE_BAND, SPEED_BAND,
    TuningProfile, default_profile, effective,
)
from systems.combat_system import Health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Enemy Data
# ══════════════════════════════════════════════════════════

@dataclass
class EnemyData:
    """Base (unadapted) parameters for one boss."""

    # ── Movement ──────────────────────────────────────────
    patrol_speed: float = ENEMY_PATROL_SPEED
    chase_speed: float = ENEMY_CHASE_SPEED
    retreat_speed: float = ENEMY_RETREAT_SPEED

    # ── Detection ranges ──────────────────────────────────
    detection_range: float = ENEMY_DETECTION_RANGE
    attack_range: float = ENEMY_ATTACK_RANGE
    retreat_range: float = ENEMY_RETREAT_RANGE
    projectile_detection_range: float = ENEMY_PROJECTILE_DETECTION_RANGE
    chase_stop_fraction: float = CHASE_STOP_FRACTION

    # ── Combat ────────────────────────────────────────────
    attack_cooldown: float = ENEMY_ATTACK_COOLDOWN
    damage: float = ENEMY_DAMAGE
    projectile_speed: float = ENEMY_PROJECTILE_SPEED

    # ── Dodge ─────────────────────────────────────────────
    dodge_cooldown: float = ENEMY_DODGE_COOLDOWN
    dodge_jump_force: float = ENEMY_DODGE_JUMP_FORCE
    dodge_duration: float = DODGE_DURATION
    dodge_min_airtime: float = DODGE_MIN_AIRTIME

    # ── Stun / retreat / patrol ───────────────────────────
    stun_duration: float = ENEMY_STUN_DURATION
    retreat_max_time: float = RETREAT_MAX_TIME
    patrol_idle_duration: float = ENEMY_PATROL_IDLE_DURATION
    patrol_left_edge: float = PATROL_LEFT_EDGE
    patrol_right_edge: float = PATROL_RIGHT_EDGE

    # ── Dash ──────────────────────────────────────────────
    dash_speed: float = DASH_SPEED
    dash_duration: float = DASH_DURATION
    dash_damage: float = DASH_DAMAGE
    dash_knockback_force: float = DASH_KNOCKBACK_FORCE
    dash_stops_on_player_hit: bool = DASH_STOPS_ON_PLAYER_HIT
    dash_cooldown: float = DASH_COOLDOWN
    dash_min_range: float = DASH_MIN_RANGE
    dash_max_range: float = DASH_MAX_RANGE

    # ── Artillery ─────────────────────────────────────────
    artillery_cooldown: float = ARTILLERY_COOLDOWN

    max_hp: float = BOSS_MAX_HP
    choreography: ChoreographyConfig = field(default_factory=ChoreographyConfig)
    debug: bool = False


# ══════════════════════════════════════════════════════════
#  Enemy
# ══════════════════════════════════════════════════════════

class Enemy:
    """FSM-driven boss whose tuning is adapted to the player."""

    def __init__(self, body, data: EnemyData | None = None,
                 target_locator: Optional[Callable[[], Optional[object]]] = None,
                 threat_sensor=None, projectiles=None, artillery=None,
                 presentation=None, channel: EventChannel | None = None,
                 initial_state: AgentState = AgentState.IDLE):
        self.data = data or EnemyData()
        self.body = body
        self.target_locator = target_locator
        self.threat_sensor = threat_sensor
        self.projectiles = projectiles
        self.artillery = artillery
        self.presentation = presentation

        self.health = Health(self.data.max_hp)
        self.tuning: TuningProfile = default_profile()
        self.target = None

        # Cooldown timers count up from zero
        self.attack_timer: float = 0.0
        self.dodge_timer: float = 0.0
        self.dash_timer: float = 0.0
        self.artillery_timer: float = 0.0

        self.is_dashing: bool = False
        self.patrol_moving_left: bool = True
        self.patrol_idle_timer: float = 0.0

        # Choreographies
        choreography = self.data.choreography
        if self.data.debug and not choreography.debug:
            choreography = replace(choreography, debug=True)
        self.attack = AttackChoreography(choreography)
        self.dash = DashChoreography(choreography)
        self.artillery_strike = ArtilleryChoreography(choreography)

        # Counters for stats
        self.shots_fired: int = 0
        self.dash_hits: int = 0

        self._initial_state = initial_state
        self.fsm = EnemyStateMachine(
            self, channel=channel, debug=self.data.debug,
            on_enter=self._on_state_enter, on_exit=self._on_state_exit,
        )
        self.fsm.initialize(initial_state)

    # ── Properties ────────────────────────────────────────

    @property
    def state(self) -> AgentState | None:
        return self.fsm.current_state

    @property
    def alive(self) -> bool:
        return self.health.alive

    @property
    def has_target(self) -> bool:
        return self.target is not None

    @property
    def is_attacking(self) -> bool:
        return self.attack.is_attacking

    @property
    def is_stunned(self) -> bool:
        return self.fsm.current_state == AgentState.STUNNED

    @property
    def busy(self) -> bool:
        return self.is_dashing or self.is_stunned

    # ── Effective (adapted) values ────────────────────────

    @property
    def effective_chase_speed(self) -> float:
        return effective(self.data.chase_speed, self.tuning.chase_speed_mult, SPEED_BAND)

    @property
    def effective_retreat_speed(self) -> float:
        return effective(self.data.retreat_speed, self.tuning.retreat_speed_mult, SPEED_BAND)

    @property
    def effective_retreat_range(self) -> float:
        return effective(self.data.retreat_range, self.tuning.retreat_range_mult, RANGE_BAND)

    @property
    def effective_attack_cooldown(self) -> float:
        return effective(self.data.attack_cooldown, self.tuning.attack_cooldown_mult, COOLDOWN_BAND)

    @property
    def effective_dodge_cooldown(self) -> float:
        return effective(self.data.dodge_cooldown, self.tuning.dodge_cooldown_mult, COOLDOWN_BAND)

    # ══════════════════════════════════════════════════════
    #  Main Update
    # ══════════════════════════════════════════════════════

    def update(self, dt: float):
        """One tick: resolve target, age cooldowns, step the FSM."""
        if not self.alive:
            return
        self._resolve_target()

        self.attack_timer += dt
        self.dodge_timer += dt
        self.dash_timer += dt
        self.artillery_timer += dt

        self.fsm.update(dt)

    def _resolve_target(self):
        """The one place an unresolved or dead target is handled."""
        if self.target is not None and not getattr(self.target, "alive", True):
            self.target = None
        if self.target is None and self.target_locator is not None:
            self.target = self.target_locator()
            if self.target is not None and self.data.debug:
                logger.info("Target resolved: %s", getattr(self.target, "name", self.target))

    # ── Detection ─────────────────────────────────────────

    def distance_to_target(self) -> float:
        if self.target is None:
            return math.inf
        return self.body.distance_to(self.target.body)

    def target_in_detection_range(self) -> bool:
        return self.distance_to_target() <= self.data.detection_range

    def target_in_attack_range(self) -> bool:
        return self.distance_to_target() <= self.data.attack_range

    def target_too_close(self) -> bool:
        return self.distance_to_target() <= self.effective_retreat_range

    def incoming_threat(self) -> bool:
        if self.threat_sensor is None:
            return False
        return self.threat_sensor.incoming_threat(self.body, self.data.projectile_detection_range)

    def direction_to_target(self) -> int:
        if self.target is None:
            return self.body.facing
        return 1 if self.target.body.x > self.body.x else -1

    # ── Cooldown gates ────────────────────────────────────

    def can_attack(self) -> bool:
        return self.attack_timer >= self.effective_attack_cooldown and not self.is_attacking

    def can_dodge(self) -> bool:
        return self.dodge_timer >= self.effective_dodge_cooldown and not self.busy

    def can_dash(self) -> bool:
        if self.is_dashing or self.target is None:
            return False
        if self.dash_timer < self.data.dash_cooldown:
            return False
        distance = self.distance_to_target()
        return self.data.dash_min_range <= distance <= self.data.dash_max_range

    def can_use_artillery(self) -> bool:
        return (self.target is not None and self.artillery is not None
                and self.artillery_timer >= self.data.artillery_cooldown)

    def reset_attack_cooldown(self):
        self.attack_timer = 0.0

    def reset_dodge_cooldown(self):
        self.dodge_timer = 0.0

    def reset_dash_cooldown(self):
        self.dash_timer = 0.0

    def reset_artillery_cooldown(self):
        self.artillery_timer = 0.0

    # ── Movement intents ──────────────────────────────────

    def face_direction(self, direction: int):
        self.body.face(direction)

    def face_target(self):
        self.face_direction(self.direction_to_target())

    def move_in_direction(self, direction: int, speed: float):
        self.body.move_in_direction(direction, speed)

    def move_toward_target(self, speed: float):
        self.move_in_direction(self.direction_to_target(), speed)

    def move_away_from_target(self, speed: float):
        self.move_in_direction(-self.direction_to_target(), speed)

    def stop(self):
        self.body.stop()

    def apply_velocity(self, x: float, y: float):
        self.body.apply_velocity(x, y)

    def jump(self, force: float):
        self.body.jump(force)

    def is_grounded(self) -> bool:
        return self.body.is_grounded()

    def is_blocked_ahead(self, direction: int) -> bool:
        return self.body.is_blocked_ahead(direction)

    def at_left_edge(self) -> bool:
        return self.body.x <= self.data.patrol_left_edge

    def at_right_edge(self) -> bool:
        return self.body.x >= self.data.patrol_right_edge

    # ── Attacks ───────────────────────────────────────────

    def fire(self, angles: list[float]):
        """Launch one projectile per fan angle from the fire point."""
        self.trigger("shoot")
        for angle in angles:
            self.shots_fired += 1
            if self.projectiles is None:
                continue
            origin = Vector2(self.body.x, self.body.y + FIRE_POINT_HEIGHT)
            self.projectiles.spawn_directional(
                origin, self.body.facing, self.data.projectile_speed,
                damage=self.data.damage, angle_deg=angle, owner_id=id(self.body),
            )

    def spawn_artillery_strike(self):
        if self.artillery is not None:
            self.artillery.spawn_strike()

    def apply_dash_hit(self, direction: int):
        """Contact damage plus knockback, once per dash."""
        if self.target is None:
            return
        self.dash_hits += 1
        self.target.take_hit(self.data.dash_damage)
        force = self.data.dash_knockback_force
        self.target.body.apply_velocity(direction * force, force * 0.3)
        if self.data.debug:
            logger.info("Dash hit for %.1f damage.", self.data.dash_damage)

    # ── Damage ────────────────────────────────────────────

    def take_hit(self, amount: float) -> float:
        applied = self.health.take_damage(amount)
        self.on_take_damage()
        return applied

    def on_take_damage(self):
        """Force Stunned on the next tick unless already stunned."""
        if not self.alive:
            return
        if self.is_stunned or self.fsm.requested_state == AgentState.STUNNED:
            return
        self.fsm.request_state(AgentState.STUNNED)

    # ── Presentation ──────────────────────────────────────

    def set_moving(self, moving: bool):
        if self.presentation is not None:
            self.presentation.set_moving(moving)

    def trigger(self, name: str):
        if self.presentation is not None:
            self.presentation.trigger(name)

    def _on_state_enter(self, state: AgentState):
        if self.presentation is not None:
            self.presentation.on_state_enter(state.value)

    def _on_state_exit(self, state: AgentState):
        if self.presentation is not None:
            self.presentation.on_state_exit(state.value)

    # ── Reset ─────────────────────────────────────────────

    def reset(self):
        """Full reset for a new encounter (body position is the caller's)."""
        self.health.reset()
        self.tuning = default_profile()
        self.target = None
        self.attack_timer = 0.0
        self.dodge_timer = 0.0
        self.dash_timer = 0.0
        self.artillery_timer = 0.0
        self.is_dashing = False
        self.patrol_moving_left = True
        self.patrol_idle_timer = 0.0
        self.shots_fired = 0
        self.dash_hits = 0
        self.fsm.reset(self._initial_state)
        self.attack.reset()
        self.dash.reset()
        self.artillery_strike.reset()
