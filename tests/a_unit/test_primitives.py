"""Unit tests for the host primitive layer."""

from __future__ import annotations

import pytest

from leafprelude import primitives
from leafprelude.errors import BridgedFunctionNotFound, IndexOutOfRange


class TestGet:
    """Tests for primitives.get."""

    def test_valid_index(self) -> None:
        assert primitives.get(0, (10, 20, 30)) == 10
        assert primitives.get(2, (10, 20, 30)) == 30

    def test_accepts_lists(self) -> None:
        assert primitives.get(1, [10, 20]) == 20

    def test_index_past_end(self) -> None:
        with pytest.raises(IndexOutOfRange) as exc_info:
            primitives.get(3, (10, 20, 30))
        assert exc_info.value.index == 3
        assert exc_info.value.length == 3

    def test_negative_index_does_not_wrap(self) -> None:
        with pytest.raises(IndexOutOfRange):
            primitives.get(-1, (10, 20, 30))

    def test_empty_sequence(self) -> None:
        with pytest.raises(IndexOutOfRange):
            primitives.get(0, ())

    def test_error_is_an_index_error(self) -> None:
        with pytest.raises(IndexError):
            primitives.get(5, ())


class TestRemove:
    """Tests for primitives.remove."""

    def test_removes_middle(self) -> None:
        assert primitives.remove(1, (1, 2, 3)) == (1, 3)

    def test_removes_first_and_last(self) -> None:
        assert primitives.remove(0, (1, 2, 3)) == (2, 3)
        assert primitives.remove(2, (1, 2, 3)) == (1, 2)

    def test_input_not_mutated(self) -> None:
        seq = [1, 2, 3]
        result = primitives.remove(0, seq)
        assert seq == [1, 2, 3]
        assert result == (2, 3)

    def test_out_of_range(self) -> None:
        with pytest.raises(IndexOutOfRange):
            primitives.remove(3, (1, 2, 3))

    def test_empty_sequence_raises_at_primitive_level(self) -> None:
        with pytest.raises(IndexOutOfRange):
            primitives.remove(0, ())


class TestMapOverwrite:
    """Tests for the bulk map primitive."""

    def test_maps_each_element(self) -> None:
        assert primitives.map_overwrite(lambda x: x * 2, (1, 2, 3)) == (2, 4, 6)

    def test_empty(self) -> None:
        assert primitives.map_overwrite(str, ()) == ()

    def test_calls_once_per_element_left_to_right(self) -> None:
        seen: list[int] = []

        def record(x: int) -> int:
            seen.append(x)
            return x

        primitives.map_overwrite(record, (3, 1, 2))
        assert seen == [3, 1, 2]

    def test_returns_new_tuple(self) -> None:
        seq = [1, 2]
        result = primitives.map_overwrite(lambda x: x, seq)
        assert isinstance(result, tuple)
        assert seq == [1, 2]


class TestBridgePrimitives:
    """Tests for the arithmetic and list primitives."""

    def test_push_back_and_front(self) -> None:
        assert primitives.push_back(4, (1, 2)) == (1, 2, 4)
        assert primitives.push_front(0, (1, 2)) == (0, 1, 2)

    def test_length(self) -> None:
        assert primitives.length(()) == 0
        assert primitives.length((1, 2, 3)) == 3

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            (7, 2, 3),
            (-7, 2, -3),
            (7, -2, -3),
            (-7, -2, 3),
            (6, 3, 2),
        ],
    )
    def test_integer_division_truncates(self, a: int, b: int, expected: int) -> None:
        assert primitives.div(a, b) == expected

    def test_float_division(self) -> None:
        assert primitives.div(7.0, 2) == 3.5

    def test_division_by_zero(self) -> None:
        with pytest.raises(ZeroDivisionError):
            primitives.div(1, 0)


class TestRegistry:
    """Tests for primitive lookup."""

    def test_ids_are_stable(self) -> None:
        ids = {name: p.func_id for name, p in primitives.PRIMITIVES.items()}
        assert ids["add"] == 0
        assert ids["get"] == 6
        assert ids["len"] == 7
        assert len(set(ids.values())) == len(ids)

    def test_primitive_is_callable(self) -> None:
        assert primitives.lookup_primitive("add")(2, 3) == 5
        assert primitives.lookup_primitive("len").arity == 1

    def test_lookup_unknown(self) -> None:
        with pytest.raises(BridgedFunctionNotFound) as exc_info:
            primitives.lookup_primitive("frobnicate")
        assert exc_info.value.name == "frobnicate"

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            primitives.PRIMITIVES["add"] = primitives.PRIMITIVES["sub"]  # type: ignore[index]

    def test_resolve_bridge_path(self) -> None:
        primitive = primitives.resolve_bridge_path("builtin:get")
        assert primitive is not None
        assert primitive.name == "get"
        assert primitive(1, (5, 6)) == 6

    def test_resolve_non_bridge_path(self) -> None:
        assert primitives.resolve_bridge_path("map") is None
        assert primitives.resolve_bridge_path("prelude:map") is None

    def test_resolve_unknown_bridge_path(self) -> None:
        with pytest.raises(BridgedFunctionNotFound):
            primitives.resolve_bridge_path("builtin:nope")
