"""Command-line interface.

Provides the `leafprelude` command with subcommands for:
- Calling a prelude function
- Listing the registered functions
- Checking builtin definitions against the native ones
- Benchmarking native against builtin definitions
"""

from __future__ import annotations

import argparse
import ast
import logging
import sys
from pathlib import Path
from typing import Any

from leafprelude.benchmark import BenchmarkRunner, format_results_table, load_suite
from leafprelude.benchmark.runner import BenchmarkProgress
from leafprelude.config import PreludeConfig, get_config
from leafprelude.conformance import BINARY_FUNCTIONS, PURE_FUNCTIONS, check_all
from leafprelude.errors import PreludeError
from leafprelude.functional import constant
from leafprelude.prelude import PRELUDE, Implementation, Prelude

logger = logging.getLogger(__name__)

DEFAULT_SUITE_PATH = Path(__file__).parent.parent.parent / "benchmarks" / "suite.yaml"


def parse_argument(text: str) -> Any:
    """Turn a command-line argument into a prelude argument.

    Names of the known callbacks become the callbacks, Python literals are
    evaluated (lists become tuples), anything else stays a string.
    """
    if text in PURE_FUNCTIONS:
        return PURE_FUNCTIONS[text]
    if text in BINARY_FUNCTIONS:
        return BINARY_FUNCTIONS[text]
    try:
        value = ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return text
    if isinstance(value, list):
        return tuple(value)
    return value


def _prelude(args: argparse.Namespace, config: PreludeConfig) -> Prelude:
    implementation = "native" if args.native else config.implementation
    return Prelude(Implementation(implementation))


def cmd_call(args: argparse.Namespace, config: PreludeConfig) -> int:
    """Call a prelude function and print its result."""
    prelude = _prelude(args, config)
    call_args = [parse_argument(text) for text in args.args]

    # `repeat` takes a producer; a plain value means "always this value".
    if args.name == "repeat" and len(call_args) == 2 and not callable(call_args[1]):
        call_args[1] = constant(call_args[1])

    try:
        result = prelude.call(args.name, *call_args)
    except (PreludeError, LookupError, TypeError, ArithmeticError) as e:
        print(f"Error: {e}")
        return 1

    print(repr(result))
    return 0


def cmd_list(args: argparse.Namespace, config: PreludeConfig) -> int:
    """List the prelude functions."""
    prelude = _prelude(args, config)
    print(f"{'Function':<10} {'Arity':>5}  {'Builtin':<8} Active")
    print("-" * 36)
    for name in prelude.names():
        entry = PRELUDE[name]
        builtin = "yes" if entry.accelerated else "no"
        active = prelude.implementation_of(name)
        print(f"{name:<10} {entry.arity:>5}  {builtin:<8} {active}")
    return 0


def cmd_conform(args: argparse.Namespace, config: PreludeConfig) -> int:
    """Check every builtin definition against its native one."""
    settings = config.conformance
    reports = check_all(
        Prelude(Implementation.BUILTIN),
        trials=args.trials if args.trials is not None else settings.trials,
        max_length=args.max_length if args.max_length is not None else settings.max_length,
        seed=args.seed if args.seed is not None else settings.seed,
    )

    failed = 0
    for report in reports:
        status = "+" if report.passed else "-"
        print(f"  {status} {report.summary()}")
        if not report.passed:
            failed += 1
            for mismatch in report.mismatches[: args.show]:
                print(f"      {report.name}({mismatch.args})")
                print(f"        native:  {mismatch.expected}")
                print(f"        builtin: {mismatch.actual}")

    print()
    print(f"{len(reports) - failed}/{len(reports)} builtin definitions conform")
    return 1 if failed else 0


def cmd_bench(args: argparse.Namespace, config: PreludeConfig) -> int:
    """Benchmark native against builtin definitions."""
    suite_path = Path(args.suite) if args.suite else DEFAULT_SUITE_PATH
    if not suite_path.exists():
        print(f"Error: Suite configuration not found: {suite_path}")
        return 1

    try:
        suite = load_suite(suite_path)
    except (PreludeError, OSError) as e:
        print(f"Error loading suite configuration: {e}")
        return 1

    def progress(p: BenchmarkProgress) -> None:
        print(f"  [{p.case} {p.implementation} n={p.size}]...", end="\r", flush=True)

    runner = BenchmarkRunner(
        suite=suite,
        target_cv=args.cv_target,
        min_runs=args.min_runs,
        max_runs=args.max_runs,
        warmup=args.warmup,
        progress_callback=progress if not args.quiet else None,
    )

    print(f"leafprelude benchmark suite: {suite.name}")
    results = runner.run_all(args.case)
    print(" " * 60, end="\r")
    print(format_results_table(results))
    return 1 if any(r.error for r in results) else 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="leafprelude",
        description="Sequence prelude of a point-free functional language",
    )
    parser.add_argument("--config", help="Path to leafprelude.yaml")
    parser.add_argument(
        "--native",
        action="store_true",
        help="Use the native definitions only",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from config, else WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    call_parser = subparsers.add_parser("call", help="Call a prelude function")
    call_parser.add_argument("name", help="Prelude function name")
    call_parser.add_argument(
        "args",
        nargs="*",
        help="Arguments: Python literals or callback names (e.g. square, add)",
    )
    call_parser.set_defaults(func=cmd_call)

    list_parser = subparsers.add_parser("list", help="List prelude functions")
    list_parser.set_defaults(func=cmd_list)

    conform_parser = subparsers.add_parser(
        "conform", help="Check builtin definitions against native ones"
    )
    conform_parser.add_argument("--trials", type=int, help="Random trials per function")
    conform_parser.add_argument("--max-length", type=int, help="Longest random sequence")
    conform_parser.add_argument("--seed", type=int, help="Random seed")
    conform_parser.add_argument(
        "--show",
        type=int,
        default=3,
        help="Mismatches to show per function (default: 3)",
    )
    conform_parser.set_defaults(func=cmd_conform)

    bench_parser = subparsers.add_parser("bench", help="Run benchmarks")
    bench_parser.add_argument("--suite", help="Path to suite.yaml configuration")
    bench_parser.add_argument("--case", help="Run only this case")
    bench_parser.add_argument(
        "--cv-target",
        type=float,
        default=0.01,
        help="Target coefficient of variation (default: 0.01 = 1%%)",
    )
    bench_parser.add_argument(
        "--min-runs",
        type=int,
        default=5,
        help="Minimum number of timed runs (default: 5)",
    )
    bench_parser.add_argument(
        "--max-runs",
        type=int,
        default=50,
        help="Maximum number of timed runs (default: 50)",
    )
    bench_parser.add_argument(
        "--warmup",
        type=int,
        default=3,
        help="Number of warmup runs (default: 3)",
    )
    bench_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    bench_parser.set_defaults(func=cmd_bench)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = get_config(args.config)
    except (PreludeError, OSError) as e:
        print(f"Error loading configuration: {e}")
        return 1

    logging.basicConfig(
        level=args.log_level or config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if config.source:
        logger.debug("Using configuration %s", config.source)

    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
