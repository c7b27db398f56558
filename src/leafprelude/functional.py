"""Point-free operators: pipe, compose and partial application."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


def pipe(value: Any, *funcs: Callable[[Any], Any]) -> Any:
    """Apply `funcs` to `value` from left to right."""
    for func in funcs:
        value = func(value)
    return value


def compose(*funcs: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Compose unary callables from right to left."""

    def _composed(value: Any) -> Any:
        for func in reversed(funcs):
            value = func(value)
        return value

    return _composed


class bind(functools.partial):  # noqa: N801
    """Partial application binding the leading arguments of `func`.

    ``bind(get, 0)(seq)`` is ``get(0, seq)``. Bound arguments always come
    first, in the order given.
    """

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        bound = ", ".join(repr(arg) for arg in self.args)
        return f"bind({name}, {bound})" if bound else f"bind({name})"


def constant(value: T) -> Callable[[], T]:
    """Zero-argument producer that always returns `value`."""

    def _constant() -> T:
        return value

    return _constant
