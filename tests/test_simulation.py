"""
Tests for the brain's tick order, the scripted player, encounter stats
and headless simulation runs.
"""

import pytest

from ai.adaptation_controller import AdaptationConfig
from ai.ai_core import AIBrain, BrainConfig
from ai.agent_fsm import AgentState
from ai.behavior_analyzer import AttackKind, PlayerProfile
from ai.events import StateTransitionEvent, StyleChangeEvent
from ai.simulation_runner import Encounter, EncounterResult, SimulationRunner
from ai.stats import EncounterStats
from ai.style_classifier import PlayerStyle
from ai.tuning_profile import default_profile
from entities.player import ALL_SCRIPTS, ScriptedPlayer
from main import build_parser
from settings import BOSS_START_X, PLAYER_START_X
from systems.arena import Body


class TestAIBrain:
    def test_melee_spam_retunes_the_boss(self, make_boss):
        boss = make_boss(x=5.0)
        brain = AIBrain(boss, BrainConfig(adaptation=AdaptationConfig(evaluation_interval=5.0)),
                        distance_source=lambda: 1.0)
        for _ in range(60):
            brain.tracker.record_attack(AttackKind.MELEE)
            brain.update(0.1)
        assert brain.style == PlayerStyle.AGGRESSIVE
        assert boss.tuning is brain.tuning
        assert boss.tuning.name == "AntiAggressive"
        assert brain.ticks == 60

    def test_disabled_adaptation_keeps_default(self, make_boss):
        boss = make_boss()
        brain = AIBrain(boss, BrainConfig(adaptation_enabled=False))
        for _ in range(80):
            brain.tracker.record_attack(AttackKind.MELEE)
            brain.update(0.1)
        assert boss.tuning == default_profile()

    def test_reset_encounter(self, make_boss):
        boss = make_boss()
        brain = AIBrain(boss, distance_source=lambda: 1.0)
        brain.tracker.record_attack(AttackKind.MELEE)
        brain.update(0.1)
        brain.reset_encounter()
        assert brain.ticks == 0
        assert brain.tracker.events == ()
        assert boss.state == AgentState.IDLE
        assert boss.tuning == default_profile()


class TestScriptedPlayer:
    def test_unknown_style_rejected(self):
        with pytest.raises(ValueError):
            ScriptedPlayer(Body("p", 0.0), style="berserk")

    def test_reports_every_attack(self, dummy):
        seen = []
        player = ScriptedPlayer(Body("p", 0.0), style="aggressive", on_attack=seen.append)
        player.opponent = dummy
        for _ in range(30):
            player.update(0.1)
        assert len(seen) == player.total_attacks > 0
        assert set(seen) <= {AttackKind.MELEE, AttackKind.UPPERCUT}


class TestEncounterStats:
    def test_counts_events_and_snapshots(self, channel_log):
        channel, _ = channel_log
        stats = EncounterStats("aggressive", snapshot_interval=1.0).attach(channel)
        channel.publish(StateTransitionEvent(AgentState.IDLE, AgentState.CHASE))
        channel.publish(StateTransitionEvent(AgentState.CHASE, AgentState.DASH))
        channel.publish(StyleChangeEvent(PlayerStyle.BALANCED, PlayerStyle.AGGRESSIVE))
        for _ in range(4):
            stats.tick(0.5, PlayerProfile(aggression_score=0.7))

        assert stats.transitions == 2
        assert stats.state_entries["Dash"] == 1
        assert stats.style_changes == [(0.0, "Balanced", "Aggressive")]
        assert [score for _, score in stats.aggression_history] == [0.7, 0.7]

        summary = stats.as_dict()
        assert summary["duration"] == 2.0
        assert summary["player_style"] == "aggressive"

    def test_detach_stops_listening(self, channel_log):
        channel, _ = channel_log
        stats = EncounterStats().attach(channel)
        stats.detach()
        channel.publish(StateTransitionEvent(AgentState.IDLE, AgentState.PATROL))
        assert stats.transitions == 0

    def test_plot_is_saved(self, tmp_path):
        stats = EncounterStats("ranged")
        stats.tick(1.0, PlayerProfile(aggression_score=0.2))
        stats.style_changes.append((1.0, "Balanced", "Ranged"))
        stats.end_encounter("timeout", plot=True, filename=str(tmp_path / "trend.png"))
        assert (tmp_path / "trend.png").exists()


class TestSimulation:
    def test_encounter_is_reproducible(self):
        first = Encounter("aggressive", seed=7)
        second = Encounter("aggressive", seed=7)
        first.run(max_seconds=5.0)
        second.run(max_seconds=5.0)
        assert first.elapsed == pytest.approx(second.elapsed)
        assert first.boss.health.current == second.boss.health.current
        assert first.player.health.current == second.player.health.current
        assert first.brain.tracker.events == second.brain.tracker.events

    def test_encounter_wires_telemetry(self):
        encounter = Encounter("ranged", seed=3)
        encounter.run(max_seconds=6.0)
        assert encounter.brain.tracker.samples
        assert encounter.player.total_attacks > 0
        assert encounter.stats.transitions > 0
        assert encounter.winner in {"player", "boss", "timeout"}

    def test_reset_starts_clean(self):
        encounter = Encounter("ranged", seed=5)
        encounter.run(max_seconds=6.0)
        old_stats = encounter.stats
        assert encounter.player.total_attacks > 0

        encounter.reset()

        assert encounter.elapsed == 0.0
        assert encounter.boss.health.current == encounter.boss.data.max_hp
        assert encounter.player.health.current == encounter.player.health.max_hp
        assert encounter.player.total_attacks == 0
        assert encounter.boss.state == AgentState.IDLE
        assert encounter.boss.tuning == default_profile()
        assert encounter.brain.tracker.events == ()
        assert encounter.projectiles.projectiles == []
        assert encounter.artillery.active_shells == []
        assert encounter.artillery.hits == 0
        assert encounter.combat.melee_hits == encounter.combat.projectile_hits == 0
        assert encounter.presentation.current_state == "Idle"
        assert encounter.boss.body.x == BOSS_START_X
        assert encounter.player.body.x == PLAYER_START_X
        assert encounter.stats is not old_stats
        assert encounter.stats.transitions == 0

        before = old_stats.transitions
        encounter.run(max_seconds=2.0)
        assert old_stats.transitions == before
        assert encounter.stats.transitions > 0

    def test_runner_cycles_styles(self, capsys):
        runner = SimulationRunner(n_runs=2, style="all", duration=3.0, seed=11)
        results = runner.run()
        assert len(results) == 2
        assert all(isinstance(r, EncounterResult) for r in results)
        assert [r.player_style for r in results] == ALL_SCRIPTS[:2]
        assert "Simulation Results" in capsys.readouterr().out

    def test_runner_rejects_unknown_style(self):
        with pytest.raises(ValueError):
            SimulationRunner(style="berserk")


class TestCommandLine:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.simulate == 1
        assert args.style == "balanced"
        assert not args.plot

    def test_options(self):
        args = build_parser().parse_args(
            ["--simulate", "5", "--style", "aerial", "--seed", "3", "--debug"])
        assert (args.simulate, args.style, args.seed, args.debug) == (5, "aerial", 3, True)
