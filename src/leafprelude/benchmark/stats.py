"""Timing statistics for prelude benchmarks.

Measurements are repeated until the coefficient of variation (CV) drops
below a target, outliers are dropped with the IQR rule, and the mean is
reported with a 95% confidence interval.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Callable
from dataclasses import dataclass

# Two-tailed 95% t-distribution critical values, keyed by sample size.
_T_VALUES_95 = (
    (2, 12.706),
    (3, 4.303),
    (4, 3.182),
    (5, 2.776),
    (6, 2.571),
    (8, 2.365),
    (10, 2.262),
    (15, 2.145),
    (20, 2.093),
    (30, 2.045),
    (50, 2.009),
    (100, 1.984),
)
_Z_95 = 1.96


@dataclass(frozen=True)
class TimingStats:
    """Summary of repeated timings of one call.

    Attributes:
        samples: Raw timings in seconds, in measurement order.
        mean: Mean of the kept samples.
        median: Median of the kept samples.
        stddev: Sample standard deviation of the kept samples.
        cv: Coefficient of variation (stddev / mean).
        fastest: Smallest kept sample.
        slowest: Largest kept sample.
        outliers: Samples dropped by the IQR rule.
        confidence_95: 95% confidence interval of the mean.
    """

    samples: tuple[float, ...]
    mean: float
    median: float
    stddev: float
    cv: float
    fastest: float
    slowest: float
    outliers: tuple[float, ...] = ()
    confidence_95: tuple[float, float] = (0.0, 0.0)

    @property
    def runs(self) -> int:
        return len(self.samples)


EMPTY_STATS = TimingStats(
    samples=(), mean=0.0, median=0.0, stddev=0.0, cv=0.0, fastest=0.0, slowest=0.0
)


def quartiles(data: list[float]) -> tuple[float, float, float]:
    """Q1, median and Q3, using medians of the lower and upper halves.

    With fewer than four values all three are the median.
    """
    ordered = sorted(data)
    mid = statistics.median(ordered)
    n = len(ordered)
    if n < 4:
        return mid, mid, mid
    lower = ordered[: n // 2]
    upper = ordered[(n + 1) // 2 :]
    return statistics.median(lower), mid, statistics.median(upper)


def find_outliers(data: list[float], factor: float = 1.5) -> list[float]:
    """Values outside ``[Q1 - factor*IQR, Q3 + factor*IQR]``."""
    if len(data) < 4:
        return []
    q1, _, q3 = quartiles(data)
    spread = (q3 - q1) * factor
    return [x for x in data if x < q1 - spread or x > q3 + spread]


def confidence_interval(data: list[float]) -> tuple[float, float]:
    """95% confidence interval of the mean (t-distribution)."""
    if len(data) < 2:
        value = data[0] if data else 0.0
        return value, value

    n = len(data)
    critical = next((t for size, t in _T_VALUES_95 if n <= size), _Z_95)
    margin = critical * statistics.stdev(data) / math.sqrt(n)
    mean = statistics.mean(data)
    return mean - margin, mean + margin


def compute_stats(samples: list[float], drop_outliers: bool = True) -> TimingStats:
    """Summarise a list of timings (seconds)."""
    if not samples:
        return EMPTY_STATS

    outliers = find_outliers(samples)
    kept = samples
    if drop_outliers and outliers:
        dropped = set(outliers)
        kept = [x for x in samples if x not in dropped]
        if len(kept) < 2:
            kept = samples

    mean = statistics.mean(kept)
    stddev = statistics.stdev(kept) if len(kept) > 1 else 0.0
    return TimingStats(
        samples=tuple(samples),
        mean=mean,
        median=statistics.median(kept),
        stddev=stddev,
        cv=stddev / mean if mean > 0 else 0.0,
        fastest=min(kept),
        slowest=max(kept),
        outliers=tuple(outliers),
        confidence_95=confidence_interval(kept),
    )


def run_until_stable(
    measure: Callable[[], float],
    min_runs: int = 5,
    max_runs: int = 50,
    target_cv: float = 0.01,
    warmup: int = 3,
    batch_size: int = 5,
) -> TimingStats:
    """Repeat `measure` until the CV of its timings is at most `target_cv`.

    Args:
        measure: Returns one timing in seconds.
        min_runs: Timed runs before the CV is first checked.
        max_runs: Hard cap on timed runs.
        target_cv: Stop once CV is at or below this (0.01 = 1%).
        warmup: Untimed runs before measuring.
        batch_size: Runs added between CV checks.
    """
    for _ in range(warmup):
        measure()

    samples = [measure() for _ in range(max(min_runs, 1))]
    while len(samples) < max_runs:
        mean = statistics.mean(samples)
        if mean > 0 and len(samples) > 1:
            if statistics.stdev(samples) / mean <= target_cv:
                break
        for _ in range(min(batch_size, max_runs - len(samples))):
            samples.append(measure())

    return compute_stats(samples)


def format_stats(stats: TimingStats, unit: str = "ms") -> str:
    """Render as e.g. ``"1.25ms +/- 0.02ms (CV=1.60%, 12 runs)"``."""
    scale = {"s": 1.0, "ms": 1e3, "us": 1e6}[unit]
    return (
        f"{stats.mean * scale:.2f}{unit} +/- {stats.stddev * scale:.2f}{unit} "
        f"(CV={stats.cv * 100:.2f}%, {stats.runs} runs)"
    )
