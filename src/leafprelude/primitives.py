"""Host primitive layer.

These are the operations the prelude is built on. In the language runtime
they are provided by the host and reached through ``builtin:<name>`` paths;
this module is the default Python host.

Sequences are tuples. Inputs may be any sequence, but outputs are always
new tuples and inputs are never mutated.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeVar

from leafprelude.errors import BridgedFunctionNotFound, IndexOutOfRange

T = TypeVar("T")
U = TypeVar("U")

BRIDGE_PREFIX = "builtin"


def _check_index(index: int, length: int) -> None:
    # Negative indices do not wrap around.
    if not 0 <= index < length:
        raise IndexOutOfRange(index, length)


def get(index: int, seq: Sequence[T]) -> T:
    """Return the element at `index`."""
    _check_index(index, len(seq))
    return seq[index]


def remove(index: int, seq: Sequence[T]) -> tuple[T, ...]:
    """Return a copy of `seq` without the element at `index`."""
    _check_index(index, len(seq))
    items = tuple(seq)
    return items[:index] + items[index + 1 :]


def map_overwrite(func: Callable[[T], U], seq: Sequence[T]) -> tuple[U, ...]:
    """Bulk map: overwrite each slot of a fresh copy with ``func(slot)``.

    `func` is called exactly once per element, from left to right.
    """
    slots: list[Any] = list(seq)
    for i, item in enumerate(slots):
        slots[i] = func(item)
    return tuple(slots)


def push_back(item: T, seq: Sequence[T]) -> tuple[T, ...]:
    return (*seq, item)


def push_front(item: T, seq: Sequence[T]) -> tuple[T, ...]:
    return (item, *seq)


def length(seq: Sequence[Any]) -> int:
    return len(seq)


def div(a: Any, b: Any) -> Any:
    """Divide; integer operands truncate toward zero."""
    if isinstance(a, int) and isinstance(b, int):
        quotient = abs(a) // abs(b)
        return quotient if (a >= 0) == (b >= 0) else -quotient
    return a / b


@dataclass(frozen=True)
class Primitive:
    """A host primitive reachable from the language.

    Attributes:
        name: Name used in ``builtin:<name>`` paths.
        func_id: Stable numeric id of the primitive.
        arity: Number of arguments.
        func: Python implementation.
    """

    name: str
    func_id: int
    arity: int
    func: Callable[..., Any]

    def __call__(self, *args: Any) -> Any:
        return self.func(*args)


PRIMITIVES: MappingProxyType[str, Primitive] = MappingProxyType({
    "add": Primitive("add", 0, 2, operator.add),
    "sub": Primitive("sub", 1, 2, operator.sub),
    "mul": Primitive("mul", 2, 2, operator.mul),
    "div": Primitive("div", 3, 2, div),
    "push_back": Primitive("push_back", 4, 2, push_back),
    "push_front": Primitive("push_front", 5, 2, push_front),
    "get": Primitive("get", 6, 2, get),
    "len": Primitive("len", 7, 1, length),
    "remove": Primitive("remove", 8, 2, remove),
    "map_overwrite": Primitive("map_overwrite", 9, 2, map_overwrite),
})


def lookup_primitive(name: str) -> Primitive:
    """Return the primitive registered under `name`.

    Raises:
        BridgedFunctionNotFound: If no primitive has that name.
    """
    try:
        return PRIMITIVES[name]
    except KeyError:
        raise BridgedFunctionNotFound(name) from None


def resolve_bridge_path(path: str) -> Primitive | None:
    """Resolve a ``builtin:<name>`` path to its primitive.

    Returns None when `path` is not a bridge path at all.
    """
    prefix, sep, name = path.partition(":")
    if not sep or prefix != BRIDGE_PREFIX:
        return None
    return lookup_primitive(name)
