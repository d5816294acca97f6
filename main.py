"""
main.py - Entry point for the Adaptive Boss AI.

Runs headless encounters between the adaptive boss and a scripted
player, then prints per-encounter and aggregate reports.

Integrates:
- Behaviour tracking + style classification (ai/behavior_tracker.py,
  ai/style_classifier.py)
- Adaptation with blended tuning (ai/adaptation_controller.py)
- Boss FSM + choreographies (ai/agent_fsm.py, ai/choreography.py)
- Arena / projectiles / artillery / health (systems/)
- Encounter stats + aggression graph (ai/stats.py)

Run:  python main.py --simulate 10 --style aggressive --seed 1 --plot
"""
VERSION = "0.1.0"

import argparse
import logging
import sys

logger = logging.getLogger(__name__)

from settings import MAX_ENCOUNTER_SECONDS
from entities.player import ALL_SCRIPTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adaptive-boss",
        description="Headless encounters against the adaptive boss AI.",
    )
    parser.add_argument("--simulate", type=int, default=1, metavar="N",
                        help="number of encounters to run (default: 1)")
    parser.add_argument("--style", default="balanced",
                        choices=ALL_SCRIPTS + ["all"],
                        help="scripted player style, or 'all' to cycle")
    parser.add_argument("--duration", type=float, default=MAX_ENCOUNTER_SECONDS,
                        help="simulated-seconds cap per encounter")
    parser.add_argument("--seed", type=int, default=None,
                        help="base random seed for reproducible runs")
    parser.add_argument("--plot", action="store_true",
                        help="save the aggression-trend graph of the last encounter")
    parser.add_argument("--debug", action="store_true",
                        help="verbose AI logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    from ai.simulation_runner import SimulationRunner

    runner = SimulationRunner(
        n_runs=args.simulate, style=args.style, duration=args.duration,
        seed=args.seed, plot=args.plot, debug=args.debug,
    )
    results = runner.run()
    logger.info("Finished %d encounter(s).", len(results))
    return 0


# ── Run ───────────────────────────────────────────────────
if __name__ == "__main__":
    sys.exit(main())
