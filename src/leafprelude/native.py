"""Reference ("native") definitions of the sequence prelude.

Every function here is a recursive reduction over sequence length, built
only from the host primitives and the point-free operators. For example
``map`` is defined as::

    map f seq =
        if len seq == 0 then seq
        else push_front (f (head seq)) (map f (remove 0 seq))

Python's recursion limit would cap inputs at roughly a thousand elements,
so each definition is unrolled into a loop that makes the same primitive
calls in the same order. Results are only assembled once the loop is done:
an error raised part way through leaves no partial output behind.

Note that walking a sequence with ``remove(0, seq)`` copies the remainder at
every step, so these definitions are quadratic in the input length. The
accelerated variants in `leafprelude.builtins` avoid that.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from leafprelude import primitives
from leafprelude.errors import InvalidRange
from leafprelude.functional import bind, compose, pipe

T = TypeVar("T")
U = TypeVar("U")
B = TypeVar("B")


def get(index: int, seq: Sequence[T]) -> T:
    """Element at `index`. Out-of-range errors propagate unchanged."""
    return primitives.get(index, seq)


def remove(index: int, seq: Sequence[T]) -> Sequence[T]:
    """`seq` without the element at `index`.

    Removing from an empty sequence is a no-op, whatever the index: the
    same object is returned.
    """
    if _is_empty(seq):
        return seq
    return primitives.remove(index, seq)


def head(seq: Sequence[T]) -> T:
    return _first(seq)


def tail(seq: Sequence[T]) -> T:
    """Last element of `seq` (not the sub-sequence after the head).

    An empty sequence gives index -1, which the primitive rejects.
    """
    return get(pipe(seq, primitives.length, _decrement), seq)


def take(n: int, seq: Sequence[T]) -> Sequence[T]:
    """First `n` elements of `seq`, in order.

    ``n < 1`` returns `seq` itself rather than an empty sequence. Asking for
    more elements than there are returns all of them.
    """
    n = operator.index(n)
    if n < 1:
        return seq
    taken: list[T] = []
    while n >= 1 and not _is_empty(seq):
        taken.append(head(seq))
        seq = _drop_first(seq)
        n -= 1
    return tuple(taken)


def map(func: Callable[[T], U], seq: Sequence[T]) -> tuple[U, ...]:  # noqa: A001
    """Apply `func` to each element, once per element, left to right."""
    step = compose(func, head)
    mapped: list[U] = []
    while not _is_empty(seq):
        mapped.append(step(seq))
        seq = _drop_first(seq)
    return tuple(mapped)


def foldr(func: Callable[[T, T], T], seq: Sequence[T]) -> T:
    """Right fold without a seed: ``func(x0, func(x1, ... func(xn-1, xn)))``.

    A sequence of length one or less yields its head, so an empty sequence
    raises IndexOutOfRange from `head` rather than a dedicated error.
    """
    if primitives.length(seq) <= 1:
        return head(seq)
    # Heads waiting for the recursive result, innermost last.
    pending: list[T] = []
    while primitives.length(seq) > 1:
        pending.append(head(seq))
        seq = _drop_first(seq)
    result = head(seq)
    while pending:
        result = func(pending.pop(), result)
    return result


def foldl(func: Callable[[T, B], B], acc: B, seq: Sequence[T]) -> B:
    """Left fold with seed `acc`. `func` receives ``(element, accumulator)``."""
    while not _is_empty(seq):
        acc = func(head(seq), acc)
        seq = _drop_first(seq)
    return acc


def repeat(n: int, producer: Callable[[], T]) -> tuple[T, ...]:
    """Sequence of `n` independent calls to `producer`.

    ``n <= 0`` gives an empty sequence and never calls `producer`.
    """
    n = operator.index(n)
    produced: list[T] = []
    while n >= 1:
        produced.append(producer())
        n -= 1
    return tuple(produced)


def range(start: int, stop: int) -> tuple[int, ...]:  # noqa: A001
    """Inclusive integer range ``start, start + 1, ..., stop``.

    Raises:
        InvalidRange: If `start` is greater than `stop`.
    """
    start = operator.index(start)
    stop = operator.index(stop)
    if start > stop:
        raise InvalidRange(start, stop)
    values: list[int] = []
    while start != stop:
        values.append(start)
        start += 1
    values.append(stop)
    return tuple(values)


def _is_empty(seq: Sequence[Any]) -> bool:
    return primitives.length(seq) == 0


def _decrement(n: int) -> int:
    return n - 1


_first = bind(get, 0)
_drop_first = bind(remove, 0)
