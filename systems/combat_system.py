"""
combat_system.py – Health and hit resolution.

Responsibilities:
- Health pools with block halving and a damage channel the behaviour
  tracker listens to
- Melee range checks
- Routing projectile hits into Health
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from settings import BLOCK_DAMAGE_DIVISOR
from ai.events import DamageEvent, EventChannel

logger = logging.getLogger(__name__)


class Health:
    """Hit points for one fighter.

    ``take_damage`` halves incoming damage while the owner blocks and
    notifies ``on_damage_taken`` with the damage actually applied.
    """

    def __init__(self, max_hp: float,
                 block_source: Optional[Callable[[], bool]] = None,
                 divisor: float = BLOCK_DAMAGE_DIVISOR):
        self.max_hp = max_hp
        self.current = max_hp
        self.block_source = block_source
        self.divisor = divisor
        self.on_damage_taken = EventChannel("damage")
        self.blocked_hits: int = 0

    @property
    def alive(self) -> bool:
        return self.current > 0

    def take_damage(self, amount: float) -> float:
        """Apply damage; returns the amount actually applied."""
        if not self.alive:
            return 0.0
        if self.block_source is not None and self.block_source() and self.divisor > 0:
            amount = amount / self.divisor
            self.blocked_hits += 1
        self.current = max(0.0, min(self.max_hp, self.current - amount))
        self.on_damage_taken.publish(DamageEvent(amount, self.current))
        if not self.alive:
            logger.info("Fighter down (took %.1f).", amount)
        return amount

    def reset(self):
        self.current = self.max_hp
        self.blocked_hits = 0


class CombatSystem:
    """Resolves hits between the fighters of one encounter."""

    def __init__(self, projectiles=None):
        self.projectiles = projectiles
        self.melee_hits: int = 0
        self.projectile_hits: int = 0

    def melee(self, attacker_body, defender, damage: float, reach: float) -> bool:
        """Hit *defender* if its body is within *reach*.  Returns True on hit."""
        if attacker_body.distance_to(defender.body) > reach:
            return False
        defender.take_hit(damage)
        self.melee_hits += 1
        return True

    def resolve_projectiles(self, *fighters):
        """Route this tick's projectile hits into each fighter."""
        if self.projectiles is None:
            return
        for fighter in fighters:
            for proj in self.projectiles.check_collisions(fighter.body):
                fighter.take_hit(proj.damage)
                self.projectile_hits += 1

    def reset(self):
        self.melee_hits = 0
        self.projectile_hits = 0
