"""
stats.py  –  Per-encounter statistics.

EncounterStats listens on the AI event channel, counts FSM transitions
and style changes, and snapshots the player's aggression score on a
fixed interval of simulated time.  At encounter end it prints a
formatted summary and can save an aggression-trend line graph (with
style changes marked) via matplotlib.

Purely observational: nothing here feeds back into the AI.
"""

import logging
from collections import Counter

logger = logging.getLogger(__name__)

import matplotlib
matplotlib.use("Agg")  # non-interactive backend, headless runs
import matplotlib.pyplot as plt

from settings import AGGRESSION_SNAPSHOT_INTERVAL, STATS_PLOT_FILENAME
from ai.events import StateTransitionEvent, StyleChangeEvent


class EncounterStats:
    """Tracks events for one encounter and produces end-of-encounter reports.

    Attributes tracked:
        player_style        – str  (scripted style, or "human")
        state_entries       – Counter[str]  (times each FSM state was entered)
        transitions         – int
        style_changes       – list[(time, old, new)]
        aggression_history  – list[(time, score)]
        duration            – float (simulated seconds)
    """

    def __init__(self, player_style: str = "unknown",
                 snapshot_interval: float = AGGRESSION_SNAPSHOT_INTERVAL):
        self.player_style: str = player_style
        self.snapshot_interval = snapshot_interval

        self.state_entries: Counter = Counter()
        self.transitions: int = 0
        self.style_changes: list[tuple[float, str, str]] = []
        self.aggression_history: list[tuple[float, float]] = []

        self.duration: float = 0.0
        self._since_snapshot: float = 0.0
        self._last_profile = None
        self._unsubscribe = None

    # ===========================================================
    #  Wiring
    # ===========================================================

    def attach(self, channel):
        """Subscribe to an EventChannel; returns self for chaining."""
        self._unsubscribe = channel.subscribe(self.on_event)
        return self

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_event(self, event):
        if isinstance(event, StateTransitionEvent):
            self.transitions += 1
            self.state_entries[_label(event.new_state)] += 1
        elif isinstance(event, StyleChangeEvent):
            self.style_changes.append(
                (self.duration, _label(event.old_style), _label(event.new_style))
            )

    # ===========================================================
    #  Per-tick
    # ===========================================================

    def tick(self, dt: float, profile=None):
        """Call once per tick.  Snapshots aggression when the interval elapses."""
        self.duration += dt
        self._since_snapshot += dt
        if profile is not None:
            self._last_profile = profile
        if self._since_snapshot >= self.snapshot_interval:
            self._since_snapshot = 0.0
            self._snapshot()

    def _snapshot(self):
        score = self._last_profile.aggression_score if self._last_profile else 0.0
        self.aggression_history.append((round(self.duration, 3), score))

    # ===========================================================
    #  End-of-encounter
    # ===========================================================

    def end_encounter(self, result: str, plot: bool = False,
                      filename: str = STATS_PLOT_FILENAME):
        """Finalise stats, print summary and optionally save the graph."""
        # Final snapshot so the graph is never empty
        self._snapshot()
        self.detach()
        self._print_summary(result)
        if plot:
            self.plot_aggression(filename)

    # ===========================================================
    #  Reports
    # ===========================================================

    def _print_summary(self, result: str):
        print("\n" + "=" * 52)
        print("  ENCOUNTER SUMMARY")
        print("=" * 52)
        print(f"  Result           : {result}")
        print(f"  Player Style     : {self.player_style}")
        print(f"  Duration         : {self.duration:.1f}s")
        print(f"  FSM transitions  : {self.transitions}")
        print("-" * 52)
        for state, count in self.state_entries.most_common():
            print(f"  {state:<16s} : {count}")
        print("-" * 52)
        if self.style_changes:
            for at, old, new in self.style_changes:
                print(f"  {at:6.1f}s  style {old} -> {new}")
        else:
            print("  No style changes.")
        print("=" * 52 + "\n")

    def plot_aggression(self, filename: str = STATS_PLOT_FILENAME):
        """Save a line graph of aggression_history, style changes marked."""
        if not self.aggression_history:
            return None

        x = [t for t, _ in self.aggression_history]
        y = [s for _, s in self.aggression_history]

        fig, ax = plt.subplots()
        ax.plot(x, y, marker="o")
        for at, _old, new in self.style_changes:
            ax.axvline(at, color="red", linestyle="--", alpha=0.5)
            ax.text(at, 1.0, new, rotation=90, va="top", fontsize=8)
        ax.set_xlabel("Time (seconds)")
        ax.set_ylabel("Aggression Score")
        ax.set_ylim(0.0, 1.05)
        ax.set_title(f"Aggression Trend  -  boss vs {self.player_style}")
        ax.grid(True)

        fig.savefig(filename, dpi=100, bbox_inches="tight")
        plt.close(fig)
        logger.info("Aggression graph saved to %s", filename)
        return filename

    # ===========================================================
    #  Data accessors
    # ===========================================================

    def as_dict(self) -> dict:
        """Return a plain dict snapshot."""
        return {
            "player_style":       self.player_style,
            "duration":           round(self.duration, 2),
            "transitions":        self.transitions,
            "state_entries":      dict(self.state_entries),
            "style_changes":      list(self.style_changes),
            "aggression_history": list(self.aggression_history),
        }


def _label(value) -> str:
    return getattr(value, "value", str(value))
