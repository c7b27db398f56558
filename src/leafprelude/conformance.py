"""Conformance checks between reference and accelerated definitions.

An accelerated definition may only replace a reference one if callers
cannot tell them apart. For every trial both are run on the same
arguments, and their outcomes are compared:

- the returned value, or the type of the error raised,
- every callback invocation, with its arguments, in call order.

Trials are a fixed set of edge cases per function plus randomly generated
inputs from a seeded generator, so a run is reproducible.
"""

from __future__ import annotations

import logging
import operator
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from leafprelude import native
from leafprelude.errors import PreludeError, UnknownFunction
from leafprelude.prelude import PRELUDE, Implementation, Prelude

logger = logging.getLogger(__name__)

# Errors recorded as part of an outcome; anything else propagates.
CAPTURED_ERRORS = (PreludeError, LookupError, ArithmeticError, TypeError, ValueError)


def square(x: Any) -> Any:
    return x * x


def inc(x: Any) -> Any:
    return x + 1


def halve(x: Any) -> Any:
    return x // 2


def is_even(x: Any) -> bool:
    return x % 2 == 0


def to_str(x: Any) -> str:
    return str(x)


def pair(a: Any, b: Any) -> tuple[Any, Any]:
    return (a, b)


PURE_FUNCTIONS: Mapping[str, Callable[[Any], Any]] = MappingProxyType({
    "neg": operator.neg,
    "square": square,
    "inc": inc,
    "halve": halve,
    "is_even": is_even,
    "to_str": to_str,
})

# `pair` is neither commutative nor associative, so it exposes any change
# in argument order or grouping.
BINARY_FUNCTIONS: Mapping[str, Callable[[Any, Any], Any]] = MappingProxyType({
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "pair": pair,
})


@dataclass
class Counter:
    """Producer returning successive integers, for checking `repeat`."""

    start: int = 0

    def __call__(self) -> int:
        value = self.start
        self.start += 1
        return value


class _Tracer:
    """Wraps a callback and records its arguments in a shared call log."""

    def __init__(self, func: Callable[..., Any], calls: list[tuple[Any, ...]]) -> None:
        self.func = func
        self.calls = calls

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.func(*args)


@dataclass(frozen=True)
class Outcome:
    """What a single call did.

    Attributes:
        value: Returned value (None when an error was raised).
        kind: Type name of the returned value.
        error: Name of the error type raised, if any.
        calls: Callback invocations, as argument tuples in call order.
    """

    value: Any = None
    kind: str | None = None
    error: str | None = None
    calls: tuple[tuple[Any, ...], ...] = ()

    def __str__(self) -> str:
        result = f"raised {self.error}" if self.error else f"returned {self.value!r}"
        return f"{result} after {len(self.calls)} callback call(s)"


@dataclass(frozen=True)
class Mismatch:
    """A trial on which the two definitions disagreed."""

    args: str
    expected: Outcome
    actual: Outcome


@dataclass
class ConformanceReport:
    """Result of checking one function.

    Attributes:
        name: Prelude function name.
        trials: Number of trials run.
        mismatches: Trials where the candidate disagreed with the reference.
    """

    name: str
    trials: int
    mismatches: list[Mismatch] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.mismatches

    def summary(self) -> str:
        if self.passed:
            return f"{self.name}: {self.trials} trials, all conform"
        first = self.mismatches[0]
        return (
            f"{self.name}: {len(self.mismatches)}/{self.trials} trials differ; "
            f"first at {self.name}({first.args}): expected {first.expected}, "
            f"got {first.actual}"
        )


def _prepare(arg: Any, calls: list[tuple[Any, ...]]) -> Any:
    if isinstance(arg, Counter):
        # Fresh copy so both definitions see the same sequence of values.
        arg = replace(arg)
    if isinstance(arg, list):
        arg = list(arg)
    if callable(arg):
        return _Tracer(arg, calls)
    return arg


def run_outcome(func: Callable[..., Any], args: tuple[Any, ...]) -> Outcome:
    """Call `func` with traced callbacks and capture what happened."""
    calls: list[tuple[Any, ...]] = []
    prepared = tuple(_prepare(arg, calls) for arg in args)
    try:
        value = func(*prepared)
    except CAPTURED_ERRORS as e:
        return Outcome(error=type(e).__name__, calls=tuple(calls))
    return Outcome(value=value, kind=type(value).__name__, calls=tuple(calls))


def as_lists(args: tuple[Any, ...]) -> tuple[Any, ...]:
    """The same trial with every sequence argument passed as a list."""
    return tuple(list(arg) if isinstance(arg, tuple) else arg for arg in args)


def describe_args(args: tuple[Any, ...]) -> str:
    """Readable rendering of trial arguments."""
    parts = []
    for arg in args:
        if callable(arg) and not isinstance(arg, Counter):
            parts.append(getattr(arg, "__name__", repr(arg)))
        else:
            parts.append(repr(arg))
    return ", ".join(parts)


# Trial generation


def _sequence(rng: random.Random, max_length: int) -> tuple[int, ...]:
    length = rng.randint(0, max_length)
    return tuple(rng.randint(-50, 50) for _ in range(length))


def _index_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    seq = _sequence(rng, max_length)
    return (rng.randint(-2, len(seq) + 1), seq)


def _sequence_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    return (_sequence(rng, max_length),)


def _take_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    seq = _sequence(rng, max_length)
    return (rng.randint(-2, len(seq) + 2), seq)


def _map_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    func = rng.choice(list(PURE_FUNCTIONS.values()))
    return (func, _sequence(rng, max_length))


def _foldr_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    func = rng.choice(list(BINARY_FUNCTIONS.values()))
    return (func, _sequence(rng, max_length))


def _foldl_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    func = rng.choice(list(BINARY_FUNCTIONS.values()))
    return (func, rng.randint(-10, 10), _sequence(rng, max_length))


def _repeat_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    return (rng.randint(-2, max_length), Counter(rng.randint(-10, 10)))


def _range_trial(rng: random.Random, max_length: int) -> tuple[Any, ...]:
    start = rng.randint(-20, 20)
    return (start, start + rng.randint(-3, max_length))


TrialGenerator = Callable[[random.Random, int], tuple[Any, ...]]

TRIAL_GENERATORS: Mapping[str, TrialGenerator] = MappingProxyType({
    "get": _index_trial,
    "remove": _index_trial,
    "head": _sequence_trial,
    "tail": _sequence_trial,
    "take": _take_trial,
    "map": _map_trial,
    "foldr": _foldr_trial,
    "foldl": _foldl_trial,
    "repeat": _repeat_trial,
    "range": _range_trial,
})

EDGE_CASES: Mapping[str, tuple[tuple[Any, ...], ...]] = MappingProxyType({
    "get": ((0, ()), (-1, (1, 2)), (2, (1, 2)), (1, (1, 2))),
    "remove": ((0, ()), (5, ()), (-1, (1, 2)), (2, (1, 2)), (0, (1,))),
    "head": (((),), ((1,),)),
    "tail": (((),), ((1,),), ((1, 2, 3),)),
    "take": ((0, (1, 2, 3)), (-1, (1, 2)), (1, ()), (5, (1, 2)), (2, (1, 2, 3))),
    "map": ((square, ()), (to_str, (1, 2, 3)), (operator.neg, (0,))),
    "foldr": ((pair, ()), (pair, (1,)), (pair, (1, 2)), (operator.sub, (1, 2, 3))),
    "foldl": ((pair, 0, ()), (pair, 0, (1, 2, 3)), (operator.sub, 10, (1, 2))),
    "repeat": ((0, Counter()), (-1, Counter()), (1, Counter(7)), (3, Counter())),
    "range": ((5, 5), (2, 5), (5, 2), (-3, 0)),
})


def check_conformance(
    name: str,
    candidate: Callable[..., Any],
    reference: Callable[..., Any] | None = None,
    *,
    trials: int = 200,
    max_length: int = 12,
    seed: int = 0,
) -> ConformanceReport:
    """Check `candidate` against the reference definition of `name`.

    Args:
        name: Prelude function name.
        candidate: Definition under test.
        reference: Definition to compare with (default: the native one).
        trials: Number of random trials, on top of the fixed edge cases.
        max_length: Longest random sequence.
        seed: Random seed.

    Returns:
        ConformanceReport listing every disagreeing trial.
    """
    if name not in TRIAL_GENERATORS:
        raise UnknownFunction(name)
    if reference is None:
        reference = getattr(native, name)

    rng = random.Random(seed)
    generate = TRIAL_GENERATORS[name]
    cases = list(EDGE_CASES.get(name, ()))
    cases.extend(generate(rng, max_length) for _ in range(trials))
    # Repeat every sequence trial with list inputs.
    cases.extend([
        as_lists(args) for args in cases if any(isinstance(a, tuple) for a in args)
    ])

    report = ConformanceReport(name=name, trials=len(cases))
    for args in cases:
        expected = run_outcome(reference, args)
        actual = run_outcome(candidate, args)
        if expected != actual:
            report.mismatches.append(Mismatch(describe_args(args), expected, actual))

    logger.debug("%s", report.summary())
    return report


def check_all(
    prelude: Prelude | None = None,
    *,
    trials: int = 200,
    max_length: int = 12,
    seed: int = 0,
) -> list[ConformanceReport]:
    """Check every accelerated function of `prelude` against its reference."""
    prelude = prelude or Prelude(Implementation.BUILTIN)
    reports = []
    for name in prelude.names():
        if prelude.implementation_of(name) is not Implementation.BUILTIN:
            continue
        reports.append(
            check_conformance(
                name,
                prelude[name],
                reference=PRELUDE[name].native,
                trials=trials,
                max_length=max_length,
                seed=seed,
            )
        )
    return reports
