"""Error taxonomy for the sequence prelude.

Every error derives from `PreludeError` and from the closest builtin
exception, so callers can catch either.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from leafprelude.conformance import ConformanceReport


class PreludeError(Exception):
    """Base class for all prelude errors."""


class IndexOutOfRange(PreludeError, IndexError):
    """Index outside ``[0, length)`` at the primitive layer."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"index {index} out of range for sequence of length {length}")


class InvalidRange(PreludeError, ValueError):
    """``range(start, stop)`` called with ``start > stop``."""

    def __init__(self, start: int, stop: int) -> None:
        self.start = start
        self.stop = stop
        super().__init__(f"invalid range: start {start} is greater than stop {stop}")


class ArityError(PreludeError, TypeError):
    """A prelude function was called with the wrong number of arguments."""

    def __init__(self, name: str, expected: int, got: int) -> None:
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"{name} takes {expected} argument(s), got {got}")


class UnknownFunction(PreludeError, LookupError):
    """No prelude function is registered under this name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown prelude function '{name}'")


class BridgedFunctionNotFound(PreludeError, LookupError):
    """A ``builtin:<name>`` path names no host primitive."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"no host primitive named '{name}'")


class ConformanceError(PreludeError, AssertionError):
    """An accelerated implementation disagrees with its reference."""

    def __init__(self, report: ConformanceReport) -> None:
        self.report = report
        super().__init__(
            f"{report.name}: {len(report.mismatches)} of {report.trials} trials "
            "disagree with the reference definition"
        )


class ConfigError(PreludeError, ValueError):
    """Malformed configuration file."""
