"""The prelude registry.

`PRELUDE` lists every prelude function with its reference definition and,
where one exists, its accelerated variant. A `Prelude` is a namespace that
resolves each name to one of the two, and lets a host install further
accelerated variants once they pass the conformance check.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from leafprelude import builtins, native
from leafprelude.config import ConformanceConfig, PreludeConfig, get_config
from leafprelude.errors import ArityError, ConformanceError, UnknownFunction
from leafprelude.functional import bind

if TYPE_CHECKING:
    from leafprelude.conformance import ConformanceReport

logger = logging.getLogger(__name__)


class Implementation(Enum):
    """Which definition of a prelude function is used."""

    NATIVE = "native"
    BUILTIN = "builtin"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PreludeFunction:
    """A prelude function and its available definitions.

    Attributes:
        name: Name in the language.
        arity: Number of arguments.
        native: Reference definition.
        builtin: Accelerated definition, if any.
    """

    name: str
    arity: int
    native: Callable[..., Any]
    builtin: Callable[..., Any] | None = None

    @property
    def accelerated(self) -> bool:
        return self.builtin is not None

    def resolve(self, implementation: Implementation) -> Callable[..., Any]:
        """Pick the definition for `implementation`, falling back to native."""
        if implementation is Implementation.BUILTIN and self.builtin is not None:
            return self.builtin
        return self.native


# Dependency order: indexing, derived accessors, take/map, folds, generators.
PRELUDE: MappingProxyType[str, PreludeFunction] = MappingProxyType({
    func.name: func
    for func in (
        PreludeFunction("get", 2, native.get),
        PreludeFunction("remove", 2, native.remove),
        PreludeFunction("head", 1, native.head),
        PreludeFunction("tail", 1, native.tail),
        PreludeFunction("take", 2, native.take, builtins.take),
        PreludeFunction("map", 2, native.map, builtins.map),
        PreludeFunction("foldr", 2, native.foldr),
        PreludeFunction("foldl", 3, native.foldl),
        PreludeFunction("repeat", 2, native.repeat, builtins.repeat),
        PreludeFunction("range", 2, native.range, builtins.range),
    )
})


def lookup(name: str) -> PreludeFunction:
    """Return the registry entry for `name`."""
    try:
        return PRELUDE[name]
    except KeyError:
        raise UnknownFunction(name) from None


class Prelude:
    """A namespace of resolved prelude functions.

    Each instance owns its function table, so substitutions made on one
    instance never leak into another.

        >>> prelude = Prelude(Implementation.NATIVE)
        >>> prelude.range(2, 5)
        (2, 3, 4, 5)
    """

    def __init__(
        self,
        implementation: Implementation | str = Implementation.BUILTIN,
        conformance: ConformanceConfig | None = None,
    ) -> None:
        self.implementation = Implementation(implementation)
        self.conformance = conformance or ConformanceConfig()
        self._table: dict[str, Callable[..., Any]] = {}
        self._sources: dict[str, Implementation] = {}
        for name, func in PRELUDE.items():
            self._table[name] = func.resolve(self.implementation)
            self._sources[name] = (
                Implementation.BUILTIN
                if self._table[name] is func.builtin
                else Implementation.NATIVE
            )

    def __repr__(self) -> str:
        return f"Prelude(implementation={self.implementation.value!r})"

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except UnknownFunction:
            msg = f"'{type(self).__name__}' has no prelude function '{name}'"
            raise AttributeError(msg) from None

    def __getitem__(self, name: str) -> Callable[..., Any]:
        try:
            return self._table[name]
        except KeyError:
            raise UnknownFunction(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def names(self) -> list[str]:
        """Registered names, in dependency order."""
        return list(self._table)

    def implementation_of(self, name: str) -> Implementation:
        """Which definition is active for `name`."""
        if name not in self._table:
            raise UnknownFunction(name)
        return self._sources[name]

    def call(self, name: str, *args: Any) -> Any:
        """Call prelude function `name`, checking its arity first."""
        func = self[name]
        arity = PRELUDE[name].arity
        if len(args) != arity:
            raise ArityError(name, arity, len(args))
        return func(*args)

    def bind(self, name: str, *args: Any) -> Callable[..., Any]:
        """Partially apply `name` to its leading arguments."""
        arity = lookup(name).arity
        if len(args) >= arity:
            raise ArityError(name, arity - 1, len(args))
        return bind(self[name], *args)

    def substitute(
        self,
        name: str,
        func: Callable[..., Any],
        *,
        verify: bool = True,
        settings: ConformanceConfig | None = None,
    ) -> ConformanceReport | None:
        """Install a host-provided accelerated definition of `name`.

        With `verify` set, the candidate must first agree with the reference
        definition on the conformance trials, run with `settings` or else
        the settings this prelude was built with.

        Returns:
            The conformance report, or None when verification was skipped.

        Raises:
            ConformanceError: If the candidate disagrees with the reference.
        """
        entry = lookup(name)
        report = None
        if verify:
            from leafprelude.conformance import check_conformance

            settings = settings or self.conformance
            report = check_conformance(
                name,
                func,
                reference=entry.native,
                trials=settings.trials,
                max_length=settings.max_length,
                seed=settings.seed,
            )
            if not report.passed:
                logger.warning("Rejected substitute for %s: %s", name, report.summary())
                raise ConformanceError(report)

        self._table[name] = func
        self._sources[name] = Implementation.BUILTIN
        logger.debug("Installed accelerated %s (verified=%s)", name, verify)
        return report

    def restore(self, name: str) -> None:
        """Return `name` to its reference definition."""
        self._table[name] = lookup(name).native
        self._sources[name] = Implementation.NATIVE


def default_prelude(config: PreludeConfig | None = None) -> Prelude:
    """Build a Prelude from the loaded configuration."""
    config = config or get_config()
    return Prelude(Implementation(config.implementation), config.conformance)
