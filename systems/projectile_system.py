"""
projectile_system.py – Straight-flying projectiles for both fighters.

Handles:
- Projectile creation (straight or fanned by an angle), movement, expiry
- Collision against a fighter's Body
- Threat sensing for the boss's dodge check: "is an enemy projectile
  within r of me?"

Positions and velocities are pygame Vector2 in world units.
"""

from __future__ import annotations

import logging

from pygame.math import Vector2

from settings import (
    ARENA_LEFT, ARENA_RIGHT, ARENA_FLOOR_Y,
    PROJECTILE_LIFETIME, PROJECTILE_HIT_RADIUS,
)

logger = logging.getLogger(__name__)


class Projectile:
    """A single projectile.

    Attributes
    ----------
    position    : Vector2 – current position
    velocity    : Vector2 – units/sec
    damage      : float   – damage applied on hit
    radius      : float   – collision radius
    active      : bool    – False after hit or lifetime expires
    owner_id    : int     – id() of the spawning Body (never hits its owner)
    """

    __slots__ = (
        "position", "velocity", "damage", "radius",
        "lifetime", "timer", "active", "owner_id",
    )

    def __init__(self, position: Vector2, velocity: Vector2,
                 damage: float = 1.0,
                 radius: float = PROJECTILE_HIT_RADIUS,
                 lifetime: float = PROJECTILE_LIFETIME,
                 owner_id: int = 0):
        self.position = Vector2(position)
        self.velocity = Vector2(velocity)
        self.damage = damage
        self.radius = radius
        self.lifetime = lifetime
        self.timer = lifetime
        self.active = True
        self.owner_id = owner_id

    def update(self, dt: float):
        """Move and age the projectile."""
        if not self.active:
            return
        self.position += self.velocity * dt
        self.timer -= dt

        if self.timer <= 0:
            self.active = False

        # Out of the arena or into the floor
        margin = 2.0
        if (self.position.x < ARENA_LEFT - margin
                or self.position.x > ARENA_RIGHT + margin
                or self.position.y < ARENA_FLOOR_Y):
            self.active = False

    def overlaps(self, body) -> bool:
        dx = abs(self.position.x - body.position.x)
        if dx > body.half_width + self.radius:
            return False
        return body.position.y - self.radius <= self.position.y <= body.position.y + body.height + self.radius

    def check_collision(self, body) -> bool:
        """True if this projectile hits *body* (and deactivates it)."""
        if not self.active or id(body) == self.owner_id:
            return False
        if self.overlaps(body):
            self.active = False
            return True
        return False


class ProjectileSystem:
    """Manages all active projectiles.

    Call ``update(dt)`` each tick, then ``check_collisions(body)`` for
    each fighter.
    """

    def __init__(self):
        self._projectiles: list[Projectile] = []
        self.spawned: int = 0

    @property
    def projectiles(self) -> list[Projectile]:
        return self._projectiles

    # ── Spawners ──────────────────────────────────────────

    def spawn_directional(self, origin: Vector2, direction: int,
                          speed: float, damage: float = 1.0,
                          angle_deg: float = 0.0,
                          owner_id: int = 0) -> Projectile:
        """Spawn a projectile flying along *direction*, fanned by *angle_deg*.

        Parameters
        ----------
        direction : 1 = right, -1 = left
        angle_deg : fan angle, mirrored with facing
        """
        sign = 1 if direction >= 0 else -1
        velocity = Vector2(sign * speed, 0.0).rotate(angle_deg * sign)
        proj = Projectile(origin, velocity, damage=damage, owner_id=owner_id)
        self._projectiles.append(proj)
        self.spawned += 1
        logger.debug("Projectile spawned at (%.1f,%.1f) dir=%d angle=%.0f",
                     origin.x, origin.y, sign, angle_deg)
        return proj

    # ── Sensing ───────────────────────────────────────────

    def incoming_threat(self, body, radius: float) -> bool:
        """Any active projectile not owned by *body* within *radius* of it."""
        center = body.center
        for proj in self._projectiles:
            if not proj.active or proj.owner_id == id(body):
                continue
            if proj.position.distance_to(center) <= radius:
                return True
        return False

    # ── Collision ─────────────────────────────────────────

    def check_collisions(self, body) -> list[Projectile]:
        """Projectiles that hit *body* this tick (already deactivated)."""
        hits: list[Projectile] = []
        for proj in self._projectiles:
            if proj.check_collision(body):
                hits.append(proj)
                logger.debug("Projectile hit %s dmg=%.1f", body.name, proj.damage)
        return hits

    # ── Per-tick ──────────────────────────────────────────

    def update(self, dt: float):
        """Update all projectiles and remove dead ones."""
        for p in self._projectiles:
            p.update(dt)
        self._projectiles = [p for p in self._projectiles if p.active]

    def clear(self):
        self._projectiles.clear()
        self.spawned = 0
