"""Unit tests for the prelude registry and namespaces."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence

import pytest

from leafprelude import builtins, native
from leafprelude.config import ConformanceConfig, PreludeConfig
from leafprelude.conformance import EDGE_CASES
from leafprelude.errors import (
    ArityError,
    ConformanceError,
    IndexOutOfRange,
    InvalidRange,
    UnknownFunction,
)
from leafprelude.prelude import (
    PRELUDE,
    Implementation,
    Prelude,
    PreludeFunction,
    default_prelude,
    lookup,
)

FAST = ConformanceConfig(trials=50, max_length=8, seed=1)


@pytest.fixture(params=[Implementation.NATIVE, Implementation.BUILTIN], ids=str)
def prelude(request: pytest.FixtureRequest) -> Prelude:
    return Prelude(request.param)


class TestRegistry:
    """Tests for the PRELUDE registry."""

    def test_dependency_order(self) -> None:
        assert list(PRELUDE) == [
            "get",
            "remove",
            "head",
            "tail",
            "take",
            "map",
            "foldr",
            "foldl",
            "repeat",
            "range",
        ]

    def test_arities(self) -> None:
        arities = {name: func.arity for name, func in PRELUDE.items()}
        assert arities["head"] == 1
        assert arities["foldl"] == 3
        assert arities["map"] == 2

    def test_foldl_is_reference_only(self) -> None:
        assert not PRELUDE["foldl"].accelerated
        assert PRELUDE["map"].accelerated

    def test_resolve_falls_back_to_native(self) -> None:
        entry = PRELUDE["foldr"]
        assert entry.resolve(Implementation.BUILTIN) is native.foldr

    def test_resolve(self) -> None:
        entry = PreludeFunction("map", 2, native.map, builtins.map)
        assert entry.resolve(Implementation.NATIVE) is native.map
        assert entry.resolve(Implementation.BUILTIN) is builtins.map

    def test_lookup_unknown(self) -> None:
        with pytest.raises(UnknownFunction):
            lookup("filter")


class TestPreludeBehaviour:
    """Observable behaviour, identical for both implementations."""

    def test_take(self, prelude: Prelude) -> None:
        assert prelude.take(2, (1, 2, 3)) == (1, 2)
        assert prelude.take(0, (1, 2, 3)) == (1, 2, 3)
        assert prelude.take(5, (1, 2, 3)) == (1, 2, 3)

    def test_map(self, prelude: Prelude) -> None:
        assert prelude.map(str, (1, 2)) == ("1", "2")
        assert prelude.map(str, ()) == ()

    def test_folds(self, prelude: Prelude) -> None:
        assert prelude.foldl(lambda x, acc: acc + [x], [], (1, 2)) == [1, 2]
        assert prelude.foldr(lambda x, y: x * y, (2, 3, 4)) == 24

    def test_generators(self, prelude: Prelude) -> None:
        assert prelude.repeat(3, lambda: 7) == (7, 7, 7)
        assert prelude.repeat(0, lambda: 7) == ()
        assert prelude.range(2, 5) == (2, 3, 4, 5)
        assert prelude.range(5, 5) == (5,)

    def test_errors(self, prelude: Prelude) -> None:
        with pytest.raises(InvalidRange):
            prelude.range(5, 2)
        with pytest.raises(IndexOutOfRange):
            prelude.head(())
        with pytest.raises(IndexOutOfRange):
            prelude.tail(())
        with pytest.raises(IndexOutOfRange):
            prelude.foldr(lambda a, b: a, ())

    def test_remove_empty(self, prelude: Prelude) -> None:
        assert prelude.remove(0, ()) == ()


class TestPrelude:
    """Tests for the Prelude namespace."""

    def test_builtin_uses_accelerated_definitions(self) -> None:
        prelude = Prelude(Implementation.BUILTIN)
        assert prelude.map is builtins.map
        assert prelude.foldl is native.foldl
        assert prelude.implementation_of("map") is Implementation.BUILTIN
        assert prelude.implementation_of("foldl") is Implementation.NATIVE

    def test_native_uses_reference_definitions(self) -> None:
        prelude = Prelude("native")
        assert prelude.map is native.map
        assert prelude.implementation_of("map") is Implementation.NATIVE

    def test_default_is_builtin(self) -> None:
        assert Prelude().implementation is Implementation.BUILTIN

    def test_item_access(self) -> None:
        prelude = Prelude()
        assert prelude["head"]((4, 5)) == 4
        assert "head" in prelude
        assert "filter" not in prelude

    def test_unknown_name(self) -> None:
        prelude = Prelude()
        with pytest.raises(UnknownFunction):
            prelude["filter"]
        with pytest.raises(AttributeError):
            prelude.filter  # noqa: B018
        with pytest.raises(UnknownFunction):
            prelude.implementation_of("filter")

    def test_names(self) -> None:
        assert Prelude().names() == list(PRELUDE)

    def test_call(self) -> None:
        assert Prelude().call("range", 1, 3) == (1, 2, 3)

    def test_call_checks_arity(self) -> None:
        with pytest.raises(ArityError) as exc_info:
            Prelude().call("range", 1)
        assert exc_info.value.expected == 2
        assert exc_info.value.got == 1

    def test_bind(self) -> None:
        prelude = Prelude()
        first_two = prelude.bind("take", 2)
        assert first_two((5, 6, 7)) == (5, 6)

    def test_bind_rejects_all_arguments(self) -> None:
        with pytest.raises(ArityError):
            Prelude().bind("head", (1, 2))

    def test_repr(self) -> None:
        assert repr(Prelude("native")) == "Prelude(implementation='native')"


def fast_take(n: int, seq: Sequence[int]) -> Sequence[int]:
    if n < 1:
        return seq
    return tuple(seq[:n])


def empty_take(n: int, seq: Sequence[int]) -> Sequence[int]:
    # Wrong: returns an empty sequence for n < 1.
    return tuple(seq[: max(n, 0)])


def sliced_take(n: int, seq: Sequence[int]) -> Sequence[int]:
    # Returns a list when given a list.
    return seq if n < 1 else seq[:n]


def reversed_map(f: Callable[[int], int], seq: Sequence[int]) -> tuple[int, ...]:
    # Same output, but calls f from right to left.
    return tuple(reversed([f(x) for x in reversed(seq)]))


class TestSubstitute:
    """Tests for installing host-provided accelerated definitions."""

    def test_accepts_conforming_definition(self) -> None:
        prelude = Prelude(Implementation.NATIVE)
        report = prelude.substitute("take", fast_take, settings=FAST)
        assert report is not None
        assert report.passed
        assert prelude.take is fast_take
        assert prelude.implementation_of("take") is Implementation.BUILTIN

    def test_rejects_different_results(self) -> None:
        prelude = Prelude(Implementation.NATIVE)
        with pytest.raises(ConformanceError) as exc_info:
            prelude.substitute("take", empty_take, settings=FAST)
        assert not exc_info.value.report.passed
        assert prelude.take is native.take

    def test_rejects_different_call_order(self) -> None:
        prelude = Prelude(Implementation.NATIVE)
        with pytest.raises(ConformanceError):
            prelude.substitute("map", reversed_map, settings=FAST)

    def test_rejects_input_typed_results(self) -> None:
        prelude = Prelude(Implementation.NATIVE)
        with pytest.raises(ConformanceError):
            prelude.substitute("take", sliced_take, settings=FAST)
        assert prelude.take(2, [1, 2, 3]) == (1, 2)

    def test_uses_instance_settings(self) -> None:
        prelude = Prelude(Implementation.NATIVE, ConformanceConfig(trials=3))
        report = prelude.substitute("take", fast_take)
        assert report is not None
        assert report.trials == 2 * (3 + len(EDGE_CASES["take"]))

    def test_unverified_substitution(self) -> None:
        prelude = Prelude()
        assert prelude.substitute("take", empty_take, verify=False) is None
        assert prelude.take is empty_take

    def test_substitution_does_not_leak(self) -> None:
        first = Prelude()
        second = Prelude()
        first.substitute("take", empty_take, verify=False)
        assert second.take is builtins.take

    def test_restore(self) -> None:
        prelude = Prelude()
        prelude.restore("map")
        assert prelude.map is native.map
        assert prelude.implementation_of("map") is Implementation.NATIVE

    def test_unknown_name(self) -> None:
        with pytest.raises(UnknownFunction):
            Prelude().substitute("filter", fast_take)


class TestDefaultPrelude:
    """Tests for building a prelude from configuration."""

    def test_from_config(self) -> None:
        prelude = default_prelude(PreludeConfig(implementation="native"))
        assert prelude.implementation is Implementation.NATIVE

    def test_substitute_uses_configured_trials(self) -> None:
        settings = ConformanceConfig(trials=3, max_length=4, seed=2)
        prelude = default_prelude(PreludeConfig(conformance=settings))
        assert prelude.conformance == settings

        report = prelude.substitute("take", fast_take)
        assert report is not None
        assert report.trials == 2 * (3 + len(EDGE_CASES["take"]))


class TestReentrancy:
    """Independent inputs on several threads give independent results."""

    def test_threads(self) -> None:
        prelude = Prelude(Implementation.NATIVE)
        results: dict[int, tuple[int, ...]] = {}

        def work(k: int) -> None:
            results[k] = prelude.map(lambda x: x * k, prelude.range(1, 50))

        threads = [threading.Thread(target=work, args=(k,)) for k in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for k in range(8):
            assert results[k] == tuple(x * k for x in range(1, 51))
