"""Command-line interface for tolerance chain analysis."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from stackup.analysis import analyze_stackup
from stackup.config import AnalysisConfig, DEFAULT_BINS, DEFAULT_CPK, DEFAULT_ITERATIONS
from stackup.errors import StackupError
from stackup.models import StackupConfig
from stackup.processes import list_processes

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def cmd_analyze(args: argparse.Namespace) -> int:
    """Run analysis on a JSON stackup file."""
    stack = StackupConfig.load(args.file)
    config = AnalysisConfig(
        iterations=args.iterations,
        bins=args.bins,
        default_cpk=args.default_cpk,
        workers=args.workers,
        seed=args.seed,
    )
    LOGGER.info("Loaded %r with %d dimensions", stack.name, len(stack.dimensions))

    result = analyze_stackup(
        stack,
        upper_spec_limit=args.usl,
        lower_spec_limit=args.lsl,
        config=config,
    )

    if args.json:
        print(json.dumps(result.to_dict(include_samples=args.samples), indent=2))
    else:
        print(f"Stack: {stack.name}")
        print()
        print(result.summary())
    return 0


def cmd_create_example(args: argparse.Namespace) -> int:
    """Create an example stackup file."""
    from stackup.examples import create_shaft_housing_example, create_two_part_gap_example

    if args.example == "shaft":
        stack = create_shaft_housing_example()
    else:
        stack = create_two_part_gap_example()

    path = args.output or f"{args.example}_example.json"
    stack.save(path)
    print(f"Created example stack: {path}")
    return 0


def cmd_processes(args: argparse.Namespace) -> int:
    """Print the manufacturing process reference table."""
    print(f"{'Process':32s} {'Tol (+/-)':>10s} {'Min Cpk':>8s} {'Cost':>5s}")
    for p in list_processes():
        print(f"{p.name:32s} {p.typical_tol:10.3f} {p.min_cpk:8.2f} {p.cost_factor:5d}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackup",
        description="1D tolerance stackup analysis (worst-case, RSS, Monte Carlo)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- analyze ---
    p_analyze = subparsers.add_parser("analyze", help="Analyze a stackup from a JSON file")
    p_analyze.add_argument("file", help="Path to stackup JSON file")
    p_analyze.add_argument("-n", "--iterations", type=int, default=DEFAULT_ITERATIONS,
                           help=f"Monte Carlo iterations (default: {DEFAULT_ITERATIONS})")
    p_analyze.add_argument("--seed", type=int, default=None,
                           help="Random seed for Monte Carlo")
    p_analyze.add_argument("--usl", type=float, default=None,
                           help="Upper spec limit (overrides the file)")
    p_analyze.add_argument("--lsl", type=float, default=None,
                           help="Lower spec limit (overrides the file)")
    p_analyze.add_argument("--bins", type=int, default=DEFAULT_BINS,
                           help=f"Histogram bins (default: {DEFAULT_BINS})")
    p_analyze.add_argument("--default-cpk", type=float, default=DEFAULT_CPK,
                           help=f"Cpk for dimensions without one (default: {DEFAULT_CPK})")
    p_analyze.add_argument("--workers", type=int, default=1,
                           help="Parallel Monte Carlo chunks (default: 1)")
    p_analyze.add_argument("--json", action="store_true",
                           help="Print the result as JSON")
    p_analyze.add_argument("--samples", action="store_true",
                           help="Include raw samples in JSON output")
    p_analyze.set_defaults(func=cmd_analyze)

    # --- example ---
    p_example = subparsers.add_parser("example", help="Create an example stackup file")
    p_example.add_argument("example", choices=["shaft", "gap"],
                           help="Which example to create")
    p_example.add_argument("-o", "--output", default=None,
                           help="Output file path")
    p_example.set_defaults(func=cmd_create_example)

    # --- processes ---
    p_proc = subparsers.add_parser("processes", help="List manufacturing process capabilities")
    p_proc.set_defaults(func=cmd_processes)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (StackupError, OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
