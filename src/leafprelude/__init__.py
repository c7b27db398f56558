"""leafprelude: the sequence prelude of a point-free functional language.

Ten combinators over immutable sequences (tuples), each with a reference
definition built from two host primitives, some with an accelerated
definition that must behave identically:

    >>> from leafprelude import Prelude
    >>> prelude = Prelude()
    >>> prelude.map(lambda x: x * x, prelude.range(1, 4))
    (1, 4, 9, 16)
"""

from __future__ import annotations

from leafprelude.errors import (
    ArityError,
    BridgedFunctionNotFound,
    ConfigError,
    ConformanceError,
    IndexOutOfRange,
    InvalidRange,
    PreludeError,
    UnknownFunction,
)
from leafprelude.functional import bind, compose, constant, pipe
from leafprelude.prelude import (
    PRELUDE,
    Implementation,
    Prelude,
    PreludeFunction,
    default_prelude,
)

__all__ = [
    "PRELUDE",
    "ArityError",
    "BridgedFunctionNotFound",
    "ConfigError",
    "ConformanceError",
    "Implementation",
    "IndexOutOfRange",
    "InvalidRange",
    "Prelude",
    "PreludeError",
    "PreludeFunction",
    "UnknownFunction",
    "bind",
    "compose",
    "constant",
    "default_prelude",
    "pipe",
]
