#!/usr/bin/env python3
"""
Todo Application E2E Scenario Runner

Usage:
    python run_scenarios.py                         Run every scenario file
    python run_scenarios.py --single s07_backend_health.py
    python run_scenarios.py --list                  Show available scenario files

Options:
    --all             Run all scenario files (default)
    --single FILE     Run exactly one scenario file (.py optional)
    --list            List scenario files and their scenarios
    --scenarios-dir   Directory holding sNN_*.py scenario files
    --log-level       DEBUG, INFO, WARNING or ERROR

Exit code is 0 only when every scenario passed.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from services.scenario_runner import (
    DEFAULT_SCENARIO_DIR,
    ScenarioRunner,
    collect,
    discover_scenario_files,
    load_scenarios,
)
from utils.harness_errors import HarnessError
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Todo Application E2E Scenario Runner',
        epilog='Environment: FRONTEND_URL, BACKEND_URL, USE_REMOTE_GRID, REMOTE_GRID_URL, '
               'TEST_MODE, RUNNING_IN_DOCKER, HEADLESS, SETTLE_MODE, SCREENSHOT_DIR',
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--all', action='store_true', help='Run all scenario files (default)')
    mode.add_argument('--single', metavar='FILE', help='Run a single scenario file')
    mode.add_argument('--list', action='store_true', help='List available scenario files')
    parser.add_argument('--scenarios-dir', type=Path, default=DEFAULT_SCENARIO_DIR,
                        help='Directory holding sNN_*.py scenario files')
    parser.add_argument('--log-level', default=None, help='Logging level (default: INFO)')
    return parser


def list_scenarios(directory: Path) -> int:
    for path in discover_scenario_files(directory):
        print(path.name)
        for scenario in load_scenarios(path):
            print(f"    - {scenario.name}")
    return EXIT_OK


def main(argv=None) -> int:
    load_dotenv(override=False)
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.list:
            return list_scenarios(args.scenarios_dir)
        scenarios = collect(single=args.single, directory=args.scenarios_dir)
    except HarnessError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.single:
        print(f"🚀 Running single scenario file: {args.single}\n")
    else:
        print("🚀 Starting Todo Application scenario suite...\n")

    summary = asyncio.run(ScenarioRunner().run(scenarios))
    return summary.exit_code


if __name__ == '__main__':
    sys.exit(main())
