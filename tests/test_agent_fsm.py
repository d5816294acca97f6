"""
Tests for the boss state machine: scoring, routing, dash contact and
the one-transition-per-tick guarantee.
"""

import pytest

from ai.agent_fsm import (
    ActionScores, AgentState, EnemyStateMachine, SpecialAction, StateHandlers,
    score_special_actions, select_special_action,
)
from ai.events import StateTransitionEvent
from ai.tuning_profile import TuningProfile

DT = 0.1


class CountingArtillery:
    def __init__(self):
        self.spawned = 0

    def spawn_strike(self):
        self.spawned += 1
        return True


class TestActionScoring:
    def test_dash_bonus_beats_artillery_and_attack(self):
        scores = score_special_actions(
            can_dash=True, can_use_artillery=True,
            in_attack_range=True, can_attack=True,
            dash_bonus=2.0, artillery_bonus=0.0,
        )
        assert scores == ActionScores(dash=3.0, artillery=1.0, attack=1.0)
        assert select_special_action(scores) == SpecialAction.DASH

    def test_ties_prefer_dash_then_artillery(self):
        assert select_special_action(ActionScores(1.0, 1.0, 1.0)) == SpecialAction.DASH
        assert select_special_action(ActionScores(0.0, 1.0, 1.0)) == SpecialAction.ARTILLERY

    def test_artillery_bonus_beats_dash(self):
        assert select_special_action(ActionScores(1.0, 2.5, 1.0)) == SpecialAction.ARTILLERY

    def test_attack_needs_range_and_cooldown(self):
        assert score_special_actions(False, False, True, False).attack == 0.0
        assert score_special_actions(False, False, False, True).attack == 0.0
        assert select_special_action(score_special_actions(False, False, True, True)) \
            == SpecialAction.ATTACK

    def test_nothing_available(self):
        assert select_special_action(ActionScores()) == SpecialAction.NONE


class TestStateMachineCore:
    def _recording_table(self, log):
        def handlers(state, next_state=None):
            return StateHandlers(
                enter=lambda agent: log.append(f"enter {state.value}"),
                update=lambda agent, dt: next_state,
                exit=lambda agent: log.append(f"exit {state.value}"),
            )
        return {
            AgentState.IDLE: handlers(AgentState.IDLE, AgentState.CHASE),
            AgentState.CHASE: handlers(AgentState.CHASE, AgentState.ATTACK),
            AgentState.ATTACK: handlers(AgentState.ATTACK),
            AgentState.STUNNED: handlers(AgentState.STUNNED),
        }

    def test_exit_runs_before_enter(self, channel_log):
        channel, received = channel_log
        log = []
        fsm = EnemyStateMachine(object(), channel=channel, table=self._recording_table(log))
        fsm.initialize(AgentState.IDLE)
        fsm.update(DT)
        assert log == ["enter Idle", "exit Idle", "enter Chase"]
        assert received == [StateTransitionEvent(AgentState.IDLE, AgentState.CHASE)]

    def test_one_transition_per_update(self):
        log = []
        fsm = EnemyStateMachine(object(), table=self._recording_table(log))
        fsm.initialize(AgentState.IDLE)
        fsm.update(DT)
        assert fsm.current_state == AgentState.CHASE
        fsm.update(DT)
        assert fsm.current_state == AgentState.ATTACK
        assert fsm.transition_count == 2

    def test_request_replaces_the_state_update(self):
        log = []
        fsm = EnemyStateMachine(object(), table=self._recording_table(log))
        fsm.initialize(AgentState.IDLE)
        fsm.request_state(AgentState.STUNNED)
        fsm.update(DT)
        assert fsm.current_state == AgentState.STUNNED
        assert fsm.requested_state is None
        assert fsm.transition_count == 1

    def test_state_time_resets_on_change(self):
        fsm = EnemyStateMachine(object(), table=self._recording_table([]))
        fsm.initialize(AgentState.ATTACK)
        for _ in range(3):
            fsm.update(DT)
        assert fsm.state_time == pytest.approx(0.3)
        fsm.change_state(AgentState.IDLE)
        assert fsm.state_time == 0.0


class TestEnemyRouting:
    def test_idle_without_target_patrols(self, make_boss):
        boss = make_boss(x=5.0)
        boss.update(DT)
        assert boss.state == AgentState.PATROL
        boss.update(DT)
        assert boss.body.pending_move < 0

    def test_idle_with_target_chases(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        boss.update(DT)
        assert boss.state == AgentState.CHASE
        assert boss.body.facing == 1

    def test_crowded_chase_retreats(self, make_boss, dummy):
        dummy.body.position.x = 1.0
        boss = make_boss(target=dummy)
        boss.update(DT)
        boss.update(DT)
        assert boss.state == AgentState.RETREAT

    def test_dash_chosen_with_bonus(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        boss.artillery = CountingArtillery()
        boss.tuning = TuningProfile(dash_priority_bonus=2.0)
        boss.update(DT)
        boss.dash_timer = boss.artillery_timer = boss.attack_timer = 100.0
        boss.update(DT)
        assert boss.state == AgentState.DASH
        assert boss.is_dashing

    def test_artillery_wins_tie_with_attack(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        boss.artillery = CountingArtillery()
        boss.update(DT)
        boss.artillery_timer = boss.attack_timer = 100.0
        boss.update(DT)
        assert boss.state == AgentState.ARTILLERY_STRIKE
        assert boss.artillery_timer == 0.0

    def test_missing_artillery_is_never_scored(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        boss.update(DT)
        boss.artillery_timer = boss.attack_timer = 100.0
        boss.update(DT)
        assert boss.state == AgentState.ATTACK

    def test_lost_target_patrols_instead_of_shelling(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        artillery = CountingArtillery()
        boss.artillery = artillery
        boss.update(DT)
        assert boss.state == AgentState.CHASE

        dummy.alive = False
        boss.artillery_timer = 100.0
        boss.update(DT)

        assert boss.target is None
        assert not boss.can_use_artillery()
        assert boss.state == AgentState.PATROL
        assert boss.artillery_timer >= 100.0
        assert artillery.spawned == 0

    def test_artillery_strike_spawns_five(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        artillery = CountingArtillery()
        boss.artillery = artillery
        boss.fsm.change_state(AgentState.ARTILLERY_STRIKE)
        for _ in range(100):
            boss.update(0.05)
            if boss.state != AgentState.ARTILLERY_STRIKE:
                break
        assert boss.state != AgentState.ARTILLERY_STRIKE
        assert artillery.spawned == 5

    def test_attack_fires_then_leaves(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        boss.fsm.change_state(AgentState.ATTACK)
        for _ in range(20):
            boss.update(0.05)
            if boss.state != AgentState.ATTACK:
                break
        assert boss.shots_fired == 1
        assert boss.state == AgentState.CHASE
        assert boss.attack_timer < boss.effective_attack_cooldown


class TestDash:
    def test_contact_hits_once(self, make_boss, dummy):
        dummy.body.position.x = 1.0
        boss = make_boss(target=dummy)
        boss.fsm.change_state(AgentState.DASH)
        assert boss.dash.direction == 1

        boss.update(0.05)
        boss.update(0.05)

        assert boss.state == AgentState.DASH
        assert dummy.hits == [boss.data.dash_damage]
        assert boss.dash_hits == 1
        force = boss.data.dash_knockback_force
        assert dummy.body.velocity.x == pytest.approx(force)
        assert dummy.body.velocity.y == pytest.approx(force * 0.3)

    def test_stop_on_hit_ends_dash(self, make_boss, dummy):
        dummy.body.position.x = 1.0
        boss = make_boss(target=dummy, dash_stops_on_player_hit=True)
        boss.fsm.change_state(AgentState.DASH)
        boss.update(0.05)
        assert boss.state == AgentState.RETREAT
        assert not boss.is_dashing
        assert len(dummy.hits) == 1

    def test_wall_ends_dash_early(self, make_boss, dummy):
        dummy.body.position.x = 20.0
        boss = make_boss(x=11.4, target=dummy, in_arena=True)
        boss.fsm.change_state(AgentState.DASH)
        boss.update(0.05)
        assert boss.state != AgentState.DASH
        assert boss.dash_timer == 0.0
        assert dummy.hits == []

    def test_direction_stays_locked_when_target_crosses(self, make_boss, dummy):
        dummy.body.position.x = 6.0
        boss = make_boss(target=dummy)
        boss.fsm.change_state(AgentState.DASH)
        assert boss.dash.direction == 1

        dummy.body.position.x = -6.0
        boss.update(0.05)

        assert boss.state == AgentState.DASH
        assert boss.dash.direction == 1
        assert boss.body.velocity.x == pytest.approx(boss.data.dash_speed)
        assert dummy.hits == []

    def test_dash_expires(self, make_boss, dummy):
        dummy.body.position.x = 6.0
        boss = make_boss(target=dummy, dash_duration=0.2)
        boss.fsm.change_state(AgentState.DASH)
        for _ in range(5):
            boss.update(0.05)
        assert boss.state != AgentState.DASH
        assert not boss.is_dashing


class TestStun:
    def test_damage_forces_stun_next_tick(self, make_boss, dummy, channel_log):
        channel, received = channel_log
        boss = make_boss(target=dummy, channel=channel)
        boss.update(DT)
        received.clear()

        boss.take_hit(1.0)
        assert boss.fsm.requested_state == AgentState.STUNNED
        boss.update(DT)
        assert boss.state == AgentState.STUNNED
        assert received == [StateTransitionEvent(AgentState.CHASE, AgentState.STUNNED)]
        assert boss.health.current == boss.data.max_hp - 1.0

    def test_no_restun_while_stunned(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        boss.take_hit(1.0)
        boss.update(DT)
        boss.take_hit(1.0)
        assert boss.fsm.requested_state is None

    def test_recovers_after_duration(self, make_boss, dummy):
        boss = make_boss(target=dummy)
        boss.take_hit(1.0)
        boss.update(DT)
        for _ in range(20):
            boss.update(DT)
            if boss.state != AgentState.STUNNED:
                break
        assert boss.state == AgentState.CHASE
        assert boss.fsm.state_time == 0.0

    def test_at_most_one_transition_per_tick(self, make_boss, dummy, channel_log):
        channel, received = channel_log
        boss = make_boss(target=dummy, channel=channel)
        boss.artillery = CountingArtillery()
        for tick in range(400):
            if tick % 37 == 0:
                boss.take_hit(0.1)
            before = len(received)
            boss.update(0.05)
            assert len(received) - before <= 1


class TestEffectiveValues:
    def test_extreme_tuning_is_clamped_to_band(self, make_boss):
        boss = make_boss()
        boss.tuning = TuningProfile(
            attack_cooldown_mult=10.0, chase_speed_mult=0.01,
            retreat_range_mult=-3.0, retreat_speed_mult=50.0,
            dodge_cooldown_mult=0.0,
        )
        data = boss.data
        assert boss.effective_attack_cooldown == pytest.approx(data.attack_cooldown * 2.0)
        assert boss.effective_chase_speed == pytest.approx(data.chase_speed * 0.5)
        assert boss.effective_retreat_range == pytest.approx(data.retreat_range * 0.5)
        assert boss.effective_retreat_speed == pytest.approx(data.retreat_speed * 2.0)
        assert boss.effective_dodge_cooldown == pytest.approx(data.dodge_cooldown * 0.5)

    def test_clamped_cooldown_gates_attacks(self, make_boss):
        boss = make_boss()
        boss.tuning = TuningProfile(attack_cooldown_mult=10.0)
        boss.attack_timer = boss.data.attack_cooldown * 1.9
        assert not boss.can_attack()
        boss.attack_timer = boss.data.attack_cooldown * 2.0
        assert boss.can_attack()

    def test_clamped_speed_drives_chase(self, make_boss, dummy):
        dummy.body.position.x = 7.0
        boss = make_boss(target=dummy)
        boss.tuning = TuningProfile(chase_speed_mult=0.01)
        boss.fsm.change_state(AgentState.CHASE)
        boss.update(DT)
        assert boss.state == AgentState.CHASE
        assert boss.body.pending_move == pytest.approx(boss.data.chase_speed * 0.5)


class TestDebugFlag:
    def test_enemy_debug_reaches_choreographies(self, make_boss):
        boss = make_boss(debug=True)
        assert boss.attack.cfg.debug
        assert boss.dash.cfg.debug
        assert boss.artillery_strike.cfg.debug
        assert not boss.data.choreography.debug

    def test_debug_off_by_default(self, make_boss):
        boss = make_boss()
        assert not boss.attack.cfg.debug
