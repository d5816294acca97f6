"""
Tests for the arena, projectiles, health and artillery collaborators.
"""

import random

import pytest
from pygame.math import Vector2

from ai.events import DamageEvent
from systems.arena import Arena, ArenaConfig, Body
from systems.artillery import ArtilleryConfig, ArtilleryStrikeManager
from systems.combat_system import CombatSystem, Health
from systems.presentation import Presentation
from systems.projectile_system import ProjectileSystem


class Fighter:
    def __init__(self, x):
        self.body = Body("f", x)
        self.health = Health(10.0)

    def take_hit(self, amount):
        return self.health.take_damage(amount)


class TestArena:
    def test_move_intent_lasts_one_step(self):
        arena = Arena()
        body = arena.add(Body("a", 0.0))
        body.move_in_direction(1, 4.0)
        arena.step(0.5)
        assert body.x == pytest.approx(2.0)
        arena.step(0.5)
        assert body.x == pytest.approx(2.0)

    def test_jump_and_land(self):
        arena = Arena()
        body = arena.add(Body("a", 0.0))
        assert body.jump(8.0)
        assert not body.jump(8.0)
        arena.step(0.05)
        assert body.y > 0.0
        assert not body.is_grounded()
        for _ in range(100):
            arena.step(0.05)
        assert body.y == 0.0
        assert body.is_grounded()

    def test_walls_clamp_and_block(self):
        arena = Arena(ArenaConfig(left=-5.0, right=5.0))
        body = arena.add(Body("a", 4.0))
        body.apply_velocity(20.0, 0.0)
        arena.step(0.5)
        assert body.x == pytest.approx(5.0 - body.half_width)
        assert body.velocity.x == 0.0
        assert body.is_blocked_ahead(1)
        assert not body.is_blocked_ahead(-1)

    def test_stop_keeps_vertical_velocity(self):
        body = Body("a", 0.0)
        body.apply_velocity(3.0, 5.0)
        body.stop()
        assert body.velocity == Vector2(0.0, 5.0)

    def test_teleport_clears_motion(self):
        body = Body("a", 0.0)
        body.apply_velocity(3.0, 5.0)
        body.move_in_direction(1, 2.0)
        body.teleport(7.0)
        assert body.position == Vector2(7.0, 0.0)
        assert body.velocity == Vector2(0.0, 0.0)
        assert body.pending_move == 0.0

    def test_friction_bleeds_knockback(self):
        arena = Arena()
        body = arena.add(Body("a", 0.0))
        body.apply_velocity(6.0, 0.0)
        arena.step(0.05)
        assert 0.0 < body.velocity.x < 6.0


class TestProjectiles:
    def test_fan_angle_mirrors_with_facing(self):
        system = ProjectileSystem()
        right = system.spawn_directional(Vector2(0, 1), 1, 10.0, angle_deg=15.0)
        left = system.spawn_directional(Vector2(0, 1), -1, 10.0, angle_deg=15.0)
        assert right.velocity.x > 0 and left.velocity.x < 0
        assert right.velocity.y == pytest.approx(left.velocity.y)

    def test_never_hits_owner(self):
        system = ProjectileSystem()
        body = Body("a", 0.0)
        system.spawn_directional(Vector2(0, 1), 1, 10.0, owner_id=id(body))
        assert system.check_collisions(body) == []
        assert not system.incoming_threat(body, 3.0)

    def test_threat_and_hit(self):
        system = ProjectileSystem()
        target = Fighter(2.0)
        system.spawn_directional(Vector2(0, 1), 1, 10.0)
        assert system.incoming_threat(target.body, 3.0)
        CombatSystem(system).resolve_projectiles(target)
        system.update(0.1)
        CombatSystem(system).resolve_projectiles(target)
        assert target.health.current == 9.0
        system.update(0.1)
        assert system.projectiles == []

    def test_expires(self):
        system = ProjectileSystem()
        system.spawn_directional(Vector2(0, 1), 1, 0.1)
        for _ in range(40):
            system.update(0.1)
        assert system.projectiles == []


class TestHealth:
    def test_block_halves_damage_and_publishes(self):
        blocking = {"on": True}
        health = Health(10.0, block_source=lambda: blocking["on"])
        events = []
        health.on_damage_taken.subscribe(events.append)
        assert health.take_damage(2.0) == 1.0
        blocking["on"] = False
        assert health.take_damage(2.0) == 2.0
        assert health.current == 7.0
        assert events == [DamageEvent(1.0, 9.0), DamageEvent(2.0, 7.0)]
        assert health.blocked_hits == 1

    def test_dead_takes_nothing(self):
        health = Health(1.0)
        health.take_damage(5.0)
        assert not health.alive
        assert health.take_damage(1.0) == 0.0

    def test_melee_reach(self):
        combat = CombatSystem()
        attacker = Body("a", 0.0)
        assert not combat.melee(attacker, Fighter(3.0), 1.0, 1.8)
        assert combat.melee(attacker, Fighter(1.0), 1.0, 1.8)
        assert combat.melee_hits == 1


class TestArtillery:
    def test_no_target_no_strike(self):
        manager = ArtilleryStrikeManager(lambda: None)
        assert not manager.spawn_strike()
        assert manager.active_shells == []

    def test_shell_lands_on_target(self):
        target = Fighter(0.0)
        manager = ArtilleryStrikeManager(
            lambda: target, ArtilleryConfig(horizontal_spread=0.0), rng=random.Random(1))
        assert manager.spawn_strike()
        for _ in range(60):
            manager.update(0.05)
        assert manager.strikes_landed == 1
        assert manager.hits == 1
        assert target.health.current == 10.0 - manager.cfg.damage

    def test_airborne_target_clears_the_blast(self):
        target = Fighter(0.0)
        target.body.position.y = 3.0
        manager = ArtilleryStrikeManager(
            lambda: target, ArtilleryConfig(horizontal_spread=0.0), rng=random.Random(1))
        manager.spawn_strike()
        for _ in range(60):
            manager.update(0.05)
        assert manager.strikes_landed == 1
        assert manager.hits == 0
        assert target.health.current == 10.0

    def test_reset_drops_shells_and_counters(self):
        target = Fighter(0.0)
        manager = ArtilleryStrikeManager(lambda: target)
        manager.spawn_strike()
        manager.reset()
        assert manager.active_shells == []
        assert manager.strikes_spawned == manager.strikes_landed == manager.hits == 0

    def test_pool_recycles_oldest(self):
        target = Fighter(0.0)
        manager = ArtilleryStrikeManager(lambda: target, ArtilleryConfig(pool_size=2))
        for _ in range(3):
            manager.spawn_strike()
        assert len(manager.active_shells) == 2
        assert manager.strikes_spawned == 3


class TestPresentation:
    def test_records_cues(self):
        cues = Presentation(history=3)
        cues.on_state_enter("Chase")
        cues.trigger("dash")
        cues.trigger("dash")
        cues.on_state_exit("Chase")
        assert cues.trigger_counts["dash"] == 2
        assert cues.current_state == "Chase"
        assert len(cues.history) == 3

        cues.reset()
        assert cues.current_state is None
        assert not cues.trigger_counts
        assert not cues.history
