"""Benchmark orchestration.

Times the native and builtin definitions of prelude functions over a range
of input sizes, and checks both produce the same output on every input.
Cases are described in a YAML suite file::

    name: prelude
    cases:
      - name: map-square
        function: map
        callback: square
        sizes: [10, 100, 1000]
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from leafprelude.benchmark.stats import EMPTY_STATS, TimingStats, run_until_stable
from leafprelude.conformance import BINARY_FUNCTIONS, CAPTURED_ERRORS, PURE_FUNCTIONS
from leafprelude.errors import ConfigError, UnknownFunction
from leafprelude.functional import constant
from leafprelude.prelude import PRELUDE, Implementation, lookup

logger = logging.getLogger(__name__)

DEFAULT_SIZES = (10, 100, 1000)


@dataclass
class BenchmarkCase:
    """A prelude function benchmarked over several input sizes.

    Attributes:
        name: Case identifier.
        function: Prelude function name.
        sizes: Input sizes to time.
        callback: Name of the callback passed to higher-order functions.
        enabled: Whether the case runs.
    """

    name: str
    function: str
    sizes: list[int] = field(default_factory=lambda: list(DEFAULT_SIZES))
    callback: str | None = None
    enabled: bool = True


@dataclass
class BenchmarkSuite:
    """Collection of benchmark cases."""

    name: str
    cases: list[BenchmarkCase]


@dataclass
class BenchmarkResult:
    """Timing of one implementation of one case at one size.

    Attributes:
        case: Case name.
        function: Prelude function name.
        size: Input size.
        implementation: Which definition was timed.
        stats: Timing statistics.
        error: Error message if the call failed or outputs disagreed.
    """

    case: str
    function: str
    size: int
    implementation: Implementation
    stats: TimingStats
    error: str | None = None


@dataclass
class BenchmarkProgress:
    """Progress callback information."""

    case: str
    implementation: Implementation
    size: int


ProgressCallback = Callable[[BenchmarkProgress], None]


def _callback(name: str | None, default: Callable[..., Any]) -> Callable[..., Any]:
    if name is None:
        return default
    if name in PURE_FUNCTIONS:
        return PURE_FUNCTIONS[name]
    if name in BINARY_FUNCTIONS:
        return BINARY_FUNCTIONS[name]
    msg = f"unknown callback '{name}'"
    raise ConfigError(msg)


def _sequence(size: int) -> tuple[int, ...]:
    return tuple(range(size))


Workload = Callable[[int, Any], tuple[Any, ...]]

# Argument builders: (size, callback name) -> arguments.
WORKLOADS: Mapping[str, Workload] = MappingProxyType({
    "get": lambda n, _: (n - 1, _sequence(n)),
    "remove": lambda n, _: (n // 2, _sequence(n)),
    "head": lambda n, _: (_sequence(n),),
    "tail": lambda n, _: (_sequence(n),),
    "take": lambda n, _: (n // 2, _sequence(n)),
    "map": lambda n, cb: (_callback(cb, PURE_FUNCTIONS["inc"]), _sequence(n)),
    "foldr": lambda n, cb: (_callback(cb, BINARY_FUNCTIONS["add"]), _sequence(n)),
    "foldl": lambda n, cb: (_callback(cb, BINARY_FUNCTIONS["add"]), 0, _sequence(n)),
    "repeat": lambda n, _: (n, constant(1)),
    "range": lambda n, _: (0, n - 1),
})


def load_suite(suite_path: Path | str) -> BenchmarkSuite:
    """Load a benchmark suite from YAML.

    Raises:
        ConfigError: If a case is malformed or names an unknown function.
    """
    path = Path(suite_path)
    with path.open() as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            msg = f"{path}: {e}"
            raise ConfigError(msg) from e

    if not isinstance(data, dict):
        msg = f"{path}: suite must be a mapping"
        raise ConfigError(msg)

    cases_data = data.get("cases", [])
    if not isinstance(cases_data, list):
        msg = f"{path}: 'cases' must be a list"
        raise ConfigError(msg)

    cases = []
    for case_data in cases_data:
        if not isinstance(case_data, dict) or "function" not in case_data:
            msg = f"{path}: every case needs a 'function'"
            raise ConfigError(msg)
        function = case_data["function"]
        if function not in PRELUDE:
            raise UnknownFunction(function)
        sizes = case_data.get("sizes", list(DEFAULT_SIZES))
        if not sizes or any(not isinstance(s, int) or s < 1 for s in sizes):
            msg = f"{path}: sizes of '{function}' must be positive integers"
            raise ConfigError(msg)
        callback = case_data.get("callback")
        if callback is not None:
            _callback(callback, PURE_FUNCTIONS["inc"])
        cases.append(
            BenchmarkCase(
                name=case_data.get("name", function),
                function=function,
                sizes=list(sizes),
                callback=callback,
                enabled=case_data.get("enabled", True),
            )
        )

    logger.debug("Loaded %d benchmark case(s) from %s", len(cases), path)
    return BenchmarkSuite(name=data.get("name", "prelude"), cases=cases)


def _timer(func: Callable[..., Any], args: tuple[Any, ...]) -> Callable[[], float]:
    def measure() -> float:
        start = time.perf_counter()
        func(*args)
        return time.perf_counter() - start

    return measure


@dataclass
class BenchmarkRunner:
    """Runs a benchmark suite.

    Attributes:
        suite: Suite to run.
        target_cv: Target coefficient of variation.
        min_runs: Minimum timed runs per measurement.
        max_runs: Maximum timed runs per measurement.
        warmup: Untimed runs before each measurement.
        implementations: Definitions to time.
        progress_callback: Optional callback for progress updates.
    """

    suite: BenchmarkSuite
    target_cv: float = 0.01
    min_runs: int = 5
    max_runs: int = 50
    warmup: int = 3
    implementations: list[Implementation] = field(
        default_factory=lambda: [Implementation.NATIVE, Implementation.BUILTIN]
    )
    progress_callback: ProgressCallback | None = None

    def _measure(
        self, case: BenchmarkCase, size: int, implementation: Implementation
    ) -> tuple[BenchmarkResult, Any]:
        func = lookup(case.function).resolve(implementation)
        args = WORKLOADS[case.function](size, case.callback)

        if self.progress_callback:
            self.progress_callback(BenchmarkProgress(case.name, implementation, size))

        try:
            output = func(*args)
            stats = run_until_stable(
                _timer(func, args),
                min_runs=self.min_runs,
                max_runs=self.max_runs,
                target_cv=self.target_cv,
                warmup=self.warmup,
            )
        except CAPTURED_ERRORS as e:
            result = BenchmarkResult(
                case.name, case.function, size, implementation, EMPTY_STATS, str(e)
            )
            return result, None

        result = BenchmarkResult(case.name, case.function, size, implementation, stats)
        return result, output

    def run_case(self, case: BenchmarkCase) -> list[BenchmarkResult]:
        """Time every implementation of `case` at every size.

        A builtin result whose output differs from the native one is marked
        with an error.
        """
        entry = lookup(case.function)
        results: list[BenchmarkResult] = []

        for size in case.sizes:
            reference_output: Any = None
            for implementation in self.implementations:
                if implementation is Implementation.BUILTIN and not entry.accelerated:
                    continue
                result, output = self._measure(case, size, implementation)
                if implementation is Implementation.NATIVE:
                    reference_output = output
                elif (
                    result.error is None
                    and Implementation.NATIVE in self.implementations
                    and output != reference_output
                ):
                    result.error = "output differs from native definition"
                    logger.warning("%s at size %d: %s", case.name, size, result.error)
                results.append(result)

        return results

    def run_all(self, case_filter: str | None = None) -> list[BenchmarkResult]:
        """Run every enabled case, or only `case_filter` if given."""
        results: list[BenchmarkResult] = []
        for case in self.suite.cases:
            if not case.enabled:
                continue
            if case_filter and case.name != case_filter:
                continue
            results.extend(self.run_case(case))
        return results


def format_results_table(results: list[BenchmarkResult]) -> str:
    """Format results as a table with builtin-over-native speedups."""
    rows: dict[tuple[str, int], dict[Implementation, BenchmarkResult]] = {}
    for result in results:
        rows.setdefault((result.case, result.size), {})[result.implementation] = result

    lines = [
        f"{'Case':<20} {'Size':>8} {'native ms':>12} {'builtin ms':>12} {'speedup':>10}",
        "-" * 66,
    ]
    for (case, size), by_impl in rows.items():
        cells = []
        for implementation in (Implementation.NATIVE, Implementation.BUILTIN):
            result = by_impl.get(implementation)
            if result is None:
                cells.append(f"{'-':>12}")
            elif result.error:
                cells.append(f"{'error':>12}")
            else:
                cells.append(f"{result.stats.mean * 1000:>12.3f}")

        native_result = by_impl.get(Implementation.NATIVE)
        builtin_result = by_impl.get(Implementation.BUILTIN)
        speedup = f"{'-':>10}"
        if (
            native_result
            and builtin_result
            and not native_result.error
            and not builtin_result.error
            and builtin_result.stats.mean > 0
        ):
            ratio = native_result.stats.mean / builtin_result.stats.mean
            speedup = f"{ratio:>9.2f}x"
        lines.append(f"{case:<20} {size:>8} {cells[0]} {cells[1]} {speedup}")

    errors = [r for r in results if r.error]
    if errors:
        lines.append("")
        lines.append("Errors:")
        lines.extend(
            f"  {r.case} [{r.implementation}] size {r.size}: {r.error}" for r in errors
        )
    return "\n".join(lines)
