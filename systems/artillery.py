"""
artillery.py – Pooled artillery strikes called down by the boss.

``spawn_strike()`` drops a shell above the target's current x, offset by
a random spread, from a fixed height.  Shells fall straight down and
damage the target if it is within the impact radius and near the floor
when they land.

The pool is fixed-size; when every shell is in flight the oldest one
is recycled.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from pygame.math import Vector2

from settings import (
    ARENA_FLOOR_Y,
    ARTILLERY_POOL_SIZE, ARTILLERY_SPAWN_HEIGHT, ARTILLERY_HORIZONTAL_SPREAD,
    ARTILLERY_FALL_SPEED, ARTILLERY_DAMAGE, ARTILLERY_IMPACT_RADIUS,
    ARTILLERY_IMPACT_HEIGHT,
)

logger = logging.getLogger(__name__)


@dataclass
class ArtilleryConfig:
    pool_size: int = ARTILLERY_POOL_SIZE
    spawn_height: float = ARTILLERY_SPAWN_HEIGHT
    horizontal_spread: float = ARTILLERY_HORIZONTAL_SPREAD
    fall_speed: float = ARTILLERY_FALL_SPEED
    damage: float = ARTILLERY_DAMAGE
    impact_radius: float = ARTILLERY_IMPACT_RADIUS
    impact_height: float = ARTILLERY_IMPACT_HEIGHT
    floor_y: float = ARENA_FLOOR_Y


class Shell:
    """One falling artillery round."""

    __slots__ = ("position", "active")

    def __init__(self):
        self.position = Vector2(0.0, 0.0)
        self.active = False


class ArtilleryStrikeManager:
    """Fixed pool of shells aimed at whatever ``target_locator`` returns.

    ``target_locator`` yields an object with ``body`` and ``take_hit``
    (or None while the target is not resolved).
    """

    def __init__(self, target_locator: Callable[[], Optional[object]],
                 config: ArtilleryConfig | None = None,
                 rng: random.Random | None = None):
        self.cfg = config or ArtilleryConfig()
        self.target_locator = target_locator
        self.rng = rng or random.Random()
        self._pool = [Shell() for _ in range(max(1, self.cfg.pool_size))]
        self._next_index = 0
        self.strikes_spawned: int = 0
        self.strikes_landed: int = 0
        self.hits: int = 0

    @property
    def active_shells(self) -> list[Shell]:
        return [s for s in self._pool if s.active]

    def _next_shell(self) -> Shell:
        size = len(self._pool)
        for i in range(size):
            index = (self._next_index + i) % size
            if not self._pool[index].active:
                self._next_index = (index + 1) % size
                return self._pool[index]
        # All in flight: recycle the oldest
        shell = self._pool[self._next_index]
        self._next_index = (self._next_index + 1) % size
        return shell

    def spawn_strike(self) -> bool:
        """Drop one shell near the target.  False if no target yet."""
        target = self.target_locator()
        if target is None:
            logger.debug("Artillery strike skipped: no target.")
            return False
        offset = self.rng.uniform(-self.cfg.horizontal_spread, self.cfg.horizontal_spread)
        shell = self._next_shell()
        shell.position.update(target.body.x + offset,
                              self.cfg.floor_y + self.cfg.spawn_height)
        shell.active = True
        self.strikes_spawned += 1
        return True

    def update(self, dt: float):
        """Advance falling shells and resolve impacts."""
        for shell in self._pool:
            if not shell.active:
                continue
            shell.position.y -= self.cfg.fall_speed * dt
            if shell.position.y > self.cfg.floor_y:
                continue
            shell.active = False
            self.strikes_landed += 1
            self._impact(shell)

    def _impact(self, shell: Shell):
        target = self.target_locator()
        if target is None:
            return
        if abs(target.body.x - shell.position.x) > self.cfg.impact_radius:
            return
        # Airborne targets clear the blast.
        if target.body.y > self.cfg.floor_y + self.cfg.impact_height:
            return
        target.take_hit(self.cfg.damage)
        self.hits += 1

    def clear(self):
        """Drop every shell in flight."""
        for shell in self._pool:
            shell.active = False
        self._next_index = 0

    def reset(self):
        self.clear()
        self.strikes_spawned = 0
        self.strikes_landed = 0
        self.hits = 0
