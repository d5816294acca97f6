"""
arena.py – Minimal 2-D side-view arena for headless encounters.

Bodies carry a pygame Vector2 position and velocity.  The AI only talks
to a Body through capability calls:

  distance_to(other)          move_in_direction(dir, speed)
  is_grounded()               apply_velocity(x, y)
  is_blocked_ahead(dir)       stop() / jump(force)

``Arena.step(dt)`` does the integration (gravity, floor, walls,
friction).  The AI never calls it; the simulation loop does, once per
tick after every brain has run.

Move intents are per-step: ``move_in_direction`` adds to this step's
horizontal displacement only, while ``apply_velocity`` sets the
persistent velocity (dash, knockback, jump).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pygame.math import Vector2

from settings import (
    ARENA_LEFT, ARENA_RIGHT, ARENA_FLOOR_Y,
    GRAVITY, BODY_HALF_WIDTH, BODY_HEIGHT, GROUND_TOLERANCE, GROUND_FRICTION,
    DASH_WALL_CAST_DISTANCE,
)

logger = logging.getLogger(__name__)


@dataclass
class ArenaConfig:
    left: float = ARENA_LEFT
    right: float = ARENA_RIGHT
    floor_y: float = ARENA_FLOOR_Y
    gravity: float = GRAVITY
    friction: float = GROUND_FRICTION
    ground_tolerance: float = GROUND_TOLERANCE
    wall_cast_distance: float = DASH_WALL_CAST_DISTANCE


# ══════════════════════════════════════════════════════════
#  Body
# ══════════════════════════════════════════════════════════

class Body:
    """A point-like fighter with horizontal extent."""

    def __init__(self, name: str, x: float, y: float = ARENA_FLOOR_Y,
                 half_width: float = BODY_HALF_WIDTH,
                 height: float = BODY_HEIGHT):
        self.name = name
        self.position = Vector2(x, y)
        self.velocity = Vector2(0.0, 0.0)
        self.half_width = half_width
        self.height = height
        self.facing: int = 1
        self.arena: Arena | None = None
        self._move_x: float = 0.0

    def __repr__(self) -> str:
        return f"Body({self.name!r}, x={self.position.x:.2f}, y={self.position.y:.2f})"

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def center(self) -> Vector2:
        return Vector2(self.position.x, self.position.y + self.height / 2)

    @property
    def pending_move(self) -> float:
        return self._move_x

    # ── Queries ───────────────────────────────────────────

    def distance_to(self, other: "Body") -> float:
        return self.position.distance_to(other.position)

    def is_grounded(self) -> bool:
        cfg = self.arena.cfg if self.arena else ArenaConfig()
        return (self.position.y <= cfg.floor_y + cfg.ground_tolerance
                and self.velocity.y <= 0.0)

    def is_blocked_ahead(self, direction: int) -> bool:
        """True when a wall sits within the cast distance in *direction*."""
        if self.arena is None or direction == 0:
            return False
        cfg = self.arena.cfg
        reach = self.half_width + cfg.wall_cast_distance
        probe = self.position.x + (reach if direction > 0 else -reach)
        return probe > cfg.right or probe < cfg.left

    # ── Intents ───────────────────────────────────────────

    def face(self, direction: int):
        if direction != 0:
            self.facing = 1 if direction > 0 else -1

    def move_in_direction(self, direction: int, speed: float):
        if direction == 0:
            return
        self.face(direction)
        self._move_x += (1 if direction > 0 else -1) * speed

    def apply_velocity(self, x: float, y: float):
        self.velocity.update(x, y)

    def stop(self):
        # Vertical velocity is left to gravity.
        self.velocity.x = 0.0
        self._move_x = 0.0

    def jump(self, force: float) -> bool:
        if not self.is_grounded():
            return False
        self.velocity.y = force
        return True

    def teleport(self, x: float, y: float = ARENA_FLOOR_Y):
        self.position.update(x, y)
        self.velocity.update(0.0, 0.0)
        self._move_x = 0.0


# ══════════════════════════════════════════════════════════
#  Arena
# ══════════════════════════════════════════════════════════

class Arena:
    """Owns bodies and integrates them once per tick."""

    def __init__(self, config: ArenaConfig | None = None):
        self.cfg = config or ArenaConfig()
        self.bodies: list[Body] = []

    def add(self, body: Body) -> Body:
        body.arena = self
        self.bodies.append(body)
        return body

    def step(self, dt: float):
        for body in self.bodies:
            self._integrate(body, dt)

    def _integrate(self, body: Body, dt: float):
        cfg = self.cfg

        # Horizontal: persistent velocity plus this step's move intent
        body.position.x += (body.velocity.x + body._move_x) * dt
        body._move_x = 0.0

        # Vertical
        body.velocity.y -= cfg.gravity * dt
        body.position.y += body.velocity.y * dt
        if body.position.y <= cfg.floor_y:
            body.position.y = cfg.floor_y
            body.velocity.y = 0.0

        # Walls
        lo = cfg.left + body.half_width
        hi = cfg.right - body.half_width
        if body.position.x < lo:
            body.position.x = lo
            body.velocity.x = 0.0
        elif body.position.x > hi:
            body.position.x = hi
            body.velocity.x = 0.0

        # Floor friction bleeds off knockback
        if body.position.y <= cfg.floor_y + cfg.ground_tolerance:
            body.velocity.x *= max(0.0, 1.0 - cfg.friction * dt)
