"""
simulation_runner.py – Headless boss-vs-scripted-player simulation.

Runs N encounters where a ScriptedPlayer (one of the five style
scripts) fights the adaptive boss.  Nothing is rendered and no input
is read; every encounter is stepped at a fixed dt so runs with the
same seed are reproducible.

Usage (from CLI):
    python main.py --simulate 50 --style aggressive

Per-tick order inside an encounter:

    player.update → brain.update → arena.step → projectiles.update
      → combat.resolve_projectiles → artillery.update → stats.tick
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

import numpy as np

from settings import (
    FIXED_DT, MAX_ENCOUNTER_SECONDS,
    BOSS_START_X, PLAYER_START_X,
)
from ai.ai_core import AIBrain, BrainConfig
from ai.events import EventChannel
from ai.stats import EncounterStats
from entities.enemy import Enemy, EnemyData
from entities.player import ScriptedPlayer, ALL_SCRIPTS
from systems.arena import Arena, Body
from systems.artillery import ArtilleryStrikeManager
from systems.combat_system import CombatSystem
from systems.presentation import Presentation
from systems.projectile_system import ProjectileSystem

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Per-encounter result
# ══════════════════════════════════════════════════════════

@dataclass
class EncounterResult:
    """Lightweight record for one simulated encounter."""
    encounter_number: int = 0
    winner: str = ""               # "player", "boss" or "timeout"
    player_style: str = ""         # script driving the player
    final_style: str = ""          # style the boss classified last
    duration_sec: float = 0.0      # simulated seconds
    avg_aggression: float = 0.0
    style_changes: int = 0
    transitions: int = 0
    shots_fired: int = 0
    dash_hits: int = 0
    artillery_hits: int = 0
    state_entries: dict[str, int] = field(default_factory=dict)


# ══════════════════════════════════════════════════════════
#  Encounter wiring
# ══════════════════════════════════════════════════════════

class Encounter:
    """One boss, one scripted player and the systems between them."""

    def __init__(self, style: str, seed: int | None = None,
                 brain_config: BrainConfig | None = None,
                 enemy_data: EnemyData | None = None,
                 debug: bool = False):
        self.rng = random.Random(seed)
        self.channel = EventChannel("encounter")

        self.arena = Arena()
        boss_body = self.arena.add(Body("boss", BOSS_START_X))
        player_body = self.arena.add(Body("player", PLAYER_START_X))

        self.projectiles = ProjectileSystem()
        self.combat = CombatSystem(self.projectiles)
        self.presentation = Presentation("boss")

        self.player = ScriptedPlayer(
            player_body, style=style,
            projectiles=self.projectiles, combat=self.combat,
            rng=random.Random(self.rng.randrange(2**32)),
        )
        self.artillery = ArtilleryStrikeManager(
            self._locate_player, rng=random.Random(self.rng.randrange(2**32)),
        )

        data = enemy_data or EnemyData(debug=debug)
        self.boss = Enemy(
            boss_body, data,
            target_locator=self._locate_player,
            threat_sensor=self.projectiles,
            projectiles=self.projectiles,
            artillery=self.artillery,
            presentation=self.presentation,
            channel=self.channel,
        )

        config = brain_config or BrainConfig(debug=debug)
        self.brain = AIBrain(
            self.boss, config, channel=self.channel,
            distance_source=lambda: self.boss.body.distance_to(self.player.body),
            block_source=lambda: self.player.is_blocking,
        )

        # Telemetry wiring
        self.player.on_attack = self.brain.tracker.record_attack
        self.player.opponent = self.boss
        # Damage is counted from the player's side of the profile.
        self.player.health.on_damage_taken.subscribe(
            lambda ev: self.brain.tracker.record_damage_taken(ev.amount))
        self.boss.health.on_damage_taken.subscribe(
            lambda ev: self.brain.tracker.record_damage_dealt(ev.amount))

        self.stats = EncounterStats(player_style=style).attach(self.channel)
        self.elapsed: float = 0.0

    def reset(self):
        """Start a fresh encounter with the same wiring."""
        self.stats.detach()
        self.presentation.reset()
        self.brain.reset_encounter()
        self.player.reset()
        self.combat.reset()
        self.projectiles.clear()
        self.artillery.reset()
        self.boss.body.teleport(BOSS_START_X)
        self.player.body.teleport(PLAYER_START_X)
        self.stats = EncounterStats(player_style=self.player.style).attach(self.channel)
        self.elapsed = 0.0

    def _locate_player(self):
        return self.player if self.player.alive else None

    @property
    def finished(self) -> bool:
        return not self.player.alive or not self.boss.alive

    @property
    def winner(self) -> str:
        if not self.boss.alive:
            return "player"
        if not self.player.alive:
            return "boss"
        return "timeout"

    def step(self, dt: float = FIXED_DT):
        self.player.update(dt)
        self.brain.update(dt)
        self.arena.step(dt)
        self.projectiles.update(dt)
        self.combat.resolve_projectiles(self.boss, self.player)
        self.artillery.update(dt)
        self.stats.tick(dt, self.brain.profile)
        self.elapsed += dt

    def run(self, max_seconds: float = MAX_ENCOUNTER_SECONDS, dt: float = FIXED_DT):
        """Step until someone falls or *max_seconds* of simulated time pass."""
        while not self.finished and self.elapsed < max_seconds:
            self.step(dt)
        return self.winner


# ══════════════════════════════════════════════════════════
#  Simulation Runner
# ══════════════════════════════════════════════════════════

class SimulationRunner:
    """Run *n_runs* headless encounters against one scripted style.

    Parameters
    ----------
    n_runs : int
        How many encounters to run.
    style : str
        Player script name, or "all" to cycle through every script.
    duration : float
        Simulated-seconds cap per encounter.
    seed : int | None
        Base seed; encounter i uses ``seed + i``.
    plot : bool
        Save the aggression-trend graph of the last encounter.
    """

    def __init__(self, n_runs: int = 10, style: str = "balanced",
                 duration: float = MAX_ENCOUNTER_SECONDS,
                 seed: int | None = None, plot: bool = False,
                 debug: bool = False) -> None:
        if style != "all" and style not in ALL_SCRIPTS:
            raise ValueError(f"Unknown player style {style!r}; choose from {ALL_SCRIPTS} or 'all'")
        self._n_runs = max(1, n_runs)
        self._style = style
        self._duration = duration
        self._seed = seed
        self._plot = plot
        self._debug = debug
        self._results: list[EncounterResult] = []

    @property
    def results(self) -> list[EncounterResult]:
        return self._results

    # ── Public entry point ────────────────────────────────

    def run(self) -> list[EncounterResult]:
        """Execute all N encounters, then print and return results."""
        for i in range(1, self._n_runs + 1):
            style = self._style_for(i)
            logger.info("=== Simulation encounter %d / %d (%s) ===", i, self._n_runs, style)
            result = self._run_one(i, style, plot=self._plot and i == self._n_runs)
            self._results.append(result)
            logger.info(
                "Encounter %d: winner=%s  style=%s  final=%s  dur=%.1fs  aggro=%.2f  changes=%d",
                i, result.winner, result.player_style, result.final_style,
                result.duration_sec, result.avg_aggression, result.style_changes,
            )
        self._print_summary()
        return self._results

    def _style_for(self, number: int) -> str:
        if self._style == "all":
            return ALL_SCRIPTS[(number - 1) % len(ALL_SCRIPTS)]
        return self._style

    # ── Single encounter ──────────────────────────────────

    def _run_one(self, number: int, style: str, plot: bool = False) -> EncounterResult:
        seed = None if self._seed is None else self._seed + number
        encounter = Encounter(style, seed=seed, debug=self._debug)
        winner = encounter.run(self._duration)
        if winner == "timeout":
            logger.warning("Encounter %d timed out after %.0fs", number, self._duration)
        encounter.stats.end_encounter(winner, plot=plot)
        return self._build_result(number, encounter, winner)

    # ── Result builders ───────────────────────────────────

    @staticmethod
    def _build_result(number: int, encounter: Encounter, winner: str) -> EncounterResult:
        stats = encounter.stats
        scores = [score for _, score in stats.aggression_history]
        return EncounterResult(
            encounter_number=number,
            winner=winner,
            player_style=encounter.player.style,
            final_style=encounter.brain.style.value,
            duration_sec=encounter.elapsed,
            avg_aggression=float(np.mean(scores)) if scores else 0.0,
            style_changes=len(stats.style_changes),
            transitions=stats.transitions,
            shots_fired=encounter.boss.shots_fired,
            dash_hits=encounter.boss.dash_hits,
            artillery_hits=encounter.artillery.hits,
            state_entries=dict(stats.state_entries),
        )

    # ── Summary printout ──────────────────────────────────

    def _print_summary(self) -> None:
        n = len(self._results)
        if n == 0:
            print("\nNo encounters completed.")
            return

        print(f"\n{'=' * 58}")
        print(f"  Simulation Results  ({n} encounters)")
        print(f"{'=' * 58}")

        winners = [r.winner for r in self._results]
        player_wins = winners.count("player")
        boss_wins = winners.count("boss")
        other = n - player_wins - boss_wins

        print(f"\n  Player wins : {player_wins:>4d}  ({100 * player_wins / n:.1f}%)")
        print(f"  Boss wins   : {boss_wins:>4d}  ({100 * boss_wins / n:.1f}%)")
        if other:
            print(f"  Timeouts    : {other:>4d}")

        durations = np.array([r.duration_sec for r in self._results])
        aggros = np.array([r.avg_aggression for r in self._results])
        changes = np.array([r.style_changes for r in self._results])
        print(f"\n  Avg duration      : {durations.mean():.1f}s  (sd {durations.std():.1f})")
        print(f"  Avg aggression    : {aggros.mean():.3f}  (sd {aggros.std():.3f})")
        print(f"  Avg style changes : {changes.mean():.1f}")

        # ── Final classification per script ───────────────
        print(f"\n  Final Classification by Player Style:")
        print(f"  {'Script':<12s} {'Runs':>5s}  Most common final style")
        print(f"  {'-' * 48}")
        by_script: dict[str, list[str]] = {}
        for r in self._results:
            by_script.setdefault(r.player_style, []).append(r.final_style)
        for script, finals in by_script.items():
            labels, counts = np.unique(finals, return_counts=True)
            top = labels[int(np.argmax(counts))]
            print(f"  {script:<12s} {len(finals):>5d}  {top} ({counts.max()}/{len(finals)})")

        # ── Boss offence ──────────────────────────────────
        shots = sum(r.shots_fired for r in self._results)
        dashes = sum(r.dash_hits for r in self._results)
        shells = sum(r.artillery_hits for r in self._results)
        print(f"\n  Shots fired : {shots}   Dash hits : {dashes}   Artillery hits : {shells}")
        print(f"\n{'=' * 58}\n")
