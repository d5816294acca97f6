"""
player.py – Scripted stand-in for the human player.

Headless encounters need someone to fight the boss.  A ScriptedPlayer
drives a Body with one of five style scripts so each play style the
classifier knows about can be produced on demand:

  balanced   – mid range, mixed attacks
  aggressive – hugs the boss, rapid melee
  defensive  – keeps the guard up most of the time
  aerial     – jump attacks
  ranged     – keeps distance, shoots

Every attack thrown is reported through ``on_attack(kind)``, which is
how the behaviour tracker hears about it.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from pygame.math import Vector2

from settings import (
    PLAYER_MAX_HP, PLAYER_MOVE_SPEED, PLAYER_JUMP_FORCE,
    PLAYER_MELEE_RANGE, PLAYER_MELEE_DAMAGE,
    PLAYER_PROJECTILE_SPEED, PLAYER_PROJECTILE_DAMAGE,
    FIRE_POINT_HEIGHT,
)
from ai.behavior_analyzer import AttackKind
from systems.combat_system import Health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Style scripts
# ══════════════════════════════════════════════════════════

@dataclass
class StyleScript:
    """How a scripted player moves, attacks and blocks."""

    name: str = "balanced"
    preferred_distance: float = 3.5
    attack_interval: float = 1.0          # seconds between attacks
    attack_weights: dict[AttackKind, float] = field(default_factory=dict)
    block_chance: float = 0.0             # chance to hold guard each decision
    decision_interval: float = 0.5        # seconds between guard re-rolls
    distance_slack: float = 0.5


def _balanced() -> StyleScript:
    return StyleScript(
        name="balanced",
        preferred_distance=3.5,
        attack_interval=1.2,
        attack_weights={
            AttackKind.MELEE: 0.35, AttackKind.UPPERCUT: 0.2,
            AttackKind.JUMP_ATTACK: 0.15, AttackKind.RANGED: 0.3,
        },
        block_chance=0.15,
    )

def _aggressive() -> StyleScript:
    return StyleScript(
        name="aggressive",
        preferred_distance=1.2,
        attack_interval=0.3,
        attack_weights={AttackKind.MELEE: 0.7, AttackKind.UPPERCUT: 0.3},
    )

def _defensive() -> StyleScript:
    return StyleScript(
        name="defensive",
        preferred_distance=4.0,
        attack_interval=1.8,
        attack_weights={AttackKind.MELEE: 0.6, AttackKind.RANGED: 0.4},
        block_chance=0.7,
    )

def _aerial() -> StyleScript:
    return StyleScript(
        name="aerial",
        preferred_distance=3.0,
        attack_interval=0.8,
        attack_weights={AttackKind.JUMP_ATTACK: 0.8, AttackKind.MELEE: 0.2},
    )

def _ranged() -> StyleScript:
    return StyleScript(
        name="ranged",
        preferred_distance=8.0,
        attack_interval=0.9,
        attack_weights={AttackKind.RANGED: 0.9, AttackKind.MELEE: 0.1},
    )

SCRIPT_FACTORY: dict[str, Callable[[], StyleScript]] = {
    "balanced":   _balanced,
    "aggressive": _aggressive,
    "defensive":  _defensive,
    "aerial":     _aerial,
    "ranged":     _ranged,
}

ALL_SCRIPTS = list(SCRIPT_FACTORY.keys())


# ══════════════════════════════════════════════════════════
#  Scripted Player
# ══════════════════════════════════════════════════════════

class ScriptedPlayer:
    """A style-scripted opponent for the boss."""

    def __init__(self, body, style: str = "balanced",
                 on_attack: Optional[Callable[[AttackKind], None]] = None,
                 projectiles=None, combat=None,
                 rng: random.Random | None = None,
                 max_hp: float = PLAYER_MAX_HP):
        if style not in SCRIPT_FACTORY:
            raise ValueError(f"Unknown player style {style!r}; choose from {ALL_SCRIPTS}")
        self.name = "player"
        self.body = body
        self.script = SCRIPT_FACTORY[style]()
        self.on_attack = on_attack
        self.projectiles = projectiles
        self.combat = combat
        self.rng = rng or random.Random()

        self.health = Health(max_hp, block_source=lambda: self.is_blocking)
        self.opponent = None
        self.is_blocking: bool = False

        self._attack_timer: float = 0.0
        self._decision_timer: float = 0.0
        self.attack_counts: dict[AttackKind, int] = {kind: 0 for kind in AttackKind}

    @property
    def style(self) -> str:
        return self.script.name

    @property
    def alive(self) -> bool:
        return self.health.alive

    @property
    def total_attacks(self) -> int:
        return sum(self.attack_counts.values())

    def take_hit(self, amount: float) -> float:
        return self.health.take_damage(amount)

    # ══════════════════════════════════════════════════════
    #  Main Update
    # ══════════════════════════════════════════════════════

    def update(self, dt: float):
        if not self.alive or self.opponent is None or not self.opponent.alive:
            self.is_blocking = False
            return

        self._decision_timer += dt
        if self._decision_timer >= self.script.decision_interval:
            self._decision_timer = 0.0
            self.is_blocking = self.rng.random() < self.script.block_chance

        self._keep_distance()

        self._attack_timer += dt
        if self.is_blocking or self._attack_timer < self.script.attack_interval:
            return
        self._attack_timer = 0.0
        self._attack(self._pick_attack())

    def _direction_to_opponent(self) -> int:
        return 1 if self.opponent.body.x > self.body.x else -1

    def _keep_distance(self):
        direction = self._direction_to_opponent()
        self.body.face(direction)
        distance = self.body.distance_to(self.opponent.body)
        slack = self.script.distance_slack
        if distance > self.script.preferred_distance + slack:
            self.body.move_in_direction(direction, PLAYER_MOVE_SPEED)
        elif distance < self.script.preferred_distance - slack:
            self.body.move_in_direction(-direction, PLAYER_MOVE_SPEED)
            self.body.face(direction)

    def _pick_attack(self) -> AttackKind:
        weights = self.script.attack_weights or {AttackKind.MELEE: 1.0}
        kinds = list(weights.keys())
        return self.rng.choices(kinds, weights=[weights[k] for k in kinds], k=1)[0]

    def _attack(self, kind: AttackKind):
        self.attack_counts[kind] += 1
        if self.on_attack is not None:
            self.on_attack(kind)

        if kind == AttackKind.RANGED:
            if self.projectiles is not None:
                origin = Vector2(self.body.x, self.body.y + FIRE_POINT_HEIGHT)
                self.projectiles.spawn_directional(
                    origin, self.body.facing, PLAYER_PROJECTILE_SPEED,
                    damage=PLAYER_PROJECTILE_DAMAGE, owner_id=id(self.body),
                )
            return

        if kind == AttackKind.JUMP_ATTACK:
            self.body.jump(PLAYER_JUMP_FORCE)

        if self.combat is not None:
            self.combat.melee(self.body, self.opponent, PLAYER_MELEE_DAMAGE, PLAYER_MELEE_RANGE)

    def reset(self):
        self.health.reset()
        self.is_blocking = False
        self._attack_timer = 0.0
        self._decision_timer = 0.0
        self.attack_counts = {kind: 0 for kind in AttackKind}
