from __future__ import annotations

import argparse
import logging
import sys

from pddl_planner.config import load_config
from pddl_planner.errors import UNKNOWN_PLANNER_PREFIX
from pddl_planner.errors import PlanningValidationError
from pddl_planner.planning import Planning


DOMAIN_NAME = "cli-domain"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pddl-planner",
        description="Run external PDDL planners on a domain and problem file.",
        epilog="Planners run concurrently unless --sequential is given.",
    )
    parser.add_argument(
        "-p",
        "--planner",
        action="append",
        dest="planners",
        metavar="NAME",
        help="planner to run; repeat for several (default from config: LAMA)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="per-planner timeout in seconds (default from config: 7)",
    )
    parser.add_argument(
        "-s",
        "--sequential",
        action="store_true",
        default=None,
        help="run listed planners sequentially (no threads)",
    )
    parser.add_argument("-c", "--config", help="path to a TOML config file")
    parser.add_argument(
        "-l", "--list", action="store_true", help="list planners and exit"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="more logging (-vv for debug)"
    )
    parser.add_argument("domain_file", nargs="?", help="PDDL domain description file")
    parser.add_argument("problem_file", nargs="?", help="PDDL problem file")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(threadName)s %(message)s",
        stream=sys.stderr,
    )


def _print_planners(planning: Planning) -> None:
    available = planning.get_available_planners()
    print("AVAILABLE PLANNERS")
    for name in sorted(available):
        print(f"    {name}")
    print("REGISTERED PLANNERS")
    for name in sorted(planning.get_planners()):
        print(f"    {name}")


def _read_text(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"Error loading config: {exc}", file=sys.stderr)
        return 1

    planning = Planning(config=config)

    if args.list:
        _print_planners(planning)
        return 0

    if not args.domain_file or not args.problem_file:
        parser.print_usage(sys.stderr)
        print("error: a domain file and a problem file are required", file=sys.stderr)
        return 2

    try:
        domain = _read_text(args.domain_file)
        problem = _read_text(args.problem_file)
    except OSError as exc:
        print(f"Error opening file: '{exc.filename}' -- {exc.strerror}", file=sys.stderr)
        return 1

    planning.set_domain_description(DOMAIN_NAME, domain)
    planners = args.planners or list(config.default_planners)

    try:
        results = planning.plan(
            problem,
            planners,
            sequential=args.sequential,
            timeout_s=args.timeout,
        )
    except PlanningValidationError as exc:
        print(f"Error: {exc}")
        if str(exc).startswith(UNKNOWN_PLANNER_PREFIX):
            print("    Registered planners:")
            print(" ".join(sorted(planning.get_planners())))
            print('For a list of available planners please use option "--list".')
        return 2
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    for result in results:
        print(f"Planner {result.planner}:\n{result.plan.to_text()}")
    return 0
