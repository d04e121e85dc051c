"""
CLI entry point: simulate a config file and print the reports.

Usage:
    leasesim                                   # reads config.yaml
    leasesim --config leases.yaml --timeline   # plus the event log
    leasesim -c leases.yaml --seed 42          # reproducible release events
    leasesim -c leases.yaml --fail-on-warnings # exit 1 if anything waited or timed out

    python -m cli.main ...                     # same thing without installing

Exit status:
    0  simulation ran (warnings are printed but don't fail the run)
    1  --fail-on-warnings was given and at least one warning occurred
    2  the config file could not be loaded
    3  the simulation aborted on a broken engine invariant
"""

import argparse
import logging
import random
import sys
from datetime import datetime
from typing import Optional, Sequence

from config.loader import ConfigError, load_config
from config.settings import settings
from reporting.chart import ChartGenerator, describe_parameters
from scheduler.errors import SimulationInvariantError
from scheduler.simulator import Simulator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leasesim",
        description=(
            "Simulates CI job lease usage over time: reads a config of jobs and "
            "schedules, simulates lease admission, waiting and timeouts, and "
            "prints a chart plus warnings for potential problems."
        ),
    )
    parser.add_argument(
        "-c", "--config", default=settings.SIMULATION_CONFIG_PATH,
        help=f"Path to configuration file (default: {settings.SIMULATION_CONFIG_PATH})",
    )
    parser.add_argument(
        "-t", "--timeline", action="store_true",
        help="Show detailed timeline of events",
    )
    parser.add_argument(
        "-l", "--timeline-limit", type=int, default=50,
        help="Limit number of timeline events to display, 0 = all (default: 50)",
    )
    parser.add_argument(
        "-s", "--summary", action=argparse.BooleanOptionalAction, default=True,
        help="Show event summary (default: on)",
    )
    parser.add_argument(
        "--seed", type=int, default=settings.RANDOM_SEED,
        help="Seed for release-event generation",
    )
    parser.add_argument(
        "--start", type=datetime.fromisoformat, default=None,
        help="Window start as ISO datetime (default: last Monday 00:00)",
    )
    parser.add_argument(
        "--fail-on-warnings", action="store_true",
        help="Exit with status 1 if the simulation produced any warning",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: failed to load configuration: {e}", file=sys.stderr)
        return 2

    print(f"Loaded configuration from {args.config}")
    print(describe_parameters(config))
    print()

    simulator = Simulator(
        config, settings=settings, start=args.start, rng=random.Random(args.seed)
    )
    try:
        result = simulator.run()
    except SimulationInvariantError as e:
        print(f"Error: simulation aborted: {e}", file=sys.stderr)
        return 3

    for diagnostic in result.diagnostics:
        print(f"Warning: {diagnostic}")

    chart = ChartGenerator(width=settings.CHART_WIDTH)
    print(chart.lease_chart(result.samples, config.max_active_leases))
    if args.summary:
        print(chart.event_summary(result.events))
    print(chart.warnings_report(result.warnings))
    if args.timeline:
        print(chart.detailed_timeline(result.events, args.timeline_limit))

    if args.fail_on_warnings and result.warnings:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
