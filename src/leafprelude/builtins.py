"""Accelerated ("builtin") variants of prelude functions.

Each function here must be indistinguishable from its reference in
`leafprelude.native`: same results, same errors, and the same callback
invocations in the same order. `leafprelude.conformance` checks this.

``foldl`` has no accelerated variant.
"""

from __future__ import annotations

import builtins
import operator
from collections.abc import Callable, Sequence
from typing import TypeVar

from leafprelude import primitives
from leafprelude.errors import InvalidRange

T = TypeVar("T")
U = TypeVar("U")


def map(func: Callable[[T], U], seq: Sequence[T]) -> tuple[U, ...]:  # noqa: A001
    return primitives.map_overwrite(func, seq)


def take(n: int, seq: Sequence[T]) -> Sequence[T]:
    n = operator.index(n)
    if n < 1:
        return seq
    return tuple(seq[:n])


def repeat(n: int, producer: Callable[[], T]) -> tuple[T, ...]:
    n = operator.index(n)
    return tuple(producer() for _ in builtins.range(n))


def range(start: int, stop: int) -> tuple[int, ...]:  # noqa: A001
    start = operator.index(start)
    stop = operator.index(stop)
    if start > stop:
        raise InvalidRange(start, stop)
    return tuple(builtins.range(start, stop + 1))
