"""Benchmarks comparing native and builtin prelude definitions.

Timings are repeated until their coefficient of variation is below a
target, and every builtin output is checked against the native one.
"""

from __future__ import annotations

from leafprelude.benchmark.runner import (
    BenchmarkCase,
    BenchmarkResult,
    BenchmarkRunner,
    BenchmarkSuite,
    format_results_table,
    load_suite,
)
from leafprelude.benchmark.stats import TimingStats, format_stats, run_until_stable

__all__ = [
    "BenchmarkCase",
    "BenchmarkResult",
    "BenchmarkRunner",
    "BenchmarkSuite",
    "TimingStats",
    "format_results_table",
    "format_stats",
    "load_suite",
    "run_until_stable",
]
