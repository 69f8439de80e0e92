from __future__ import annotations

import dataclasses as dc

import pytest

from draftkit import utils
from draftkit.errors import InvariantViolationError

from test_draftkit.unit_utils import MonkeyPatch


def test_generate_random_key_produces_short_unique_base32_keys():
    seen_keys: set[str] = set()
    keys = [utils.generate_random_key(seen_keys) for _ in range(500)]

    assert len(set(keys)) == 500
    assert all(0 < len(key) <= 5 for key in keys)
    assert all(set(key) <= set("0123456789abcdefghijklmnopqrstuv") for key in keys)
    assert seen_keys == set(keys)


def test_generate_random_key_raises_when_every_key_is_in_use(monkeypatch: MonkeyPatch):
    monkeypatch.setattr(utils, "_KEY_MULTIPLIER_BITS", 1)
    seen_keys: set[str] = set()
    first_keys = {utils.generate_random_key(seen_keys), utils.generate_random_key(seen_keys)}

    with pytest.raises(InvariantViolationError, match="no unused block key"):
        utils.generate_random_key(seen_keys)

    assert first_keys == {"0", "1"}


def test_generate_random_key_does_not_remember_keys_without_a_seen_set(
    monkeypatch: MonkeyPatch,
):
    monkeypatch.setattr(utils, "_KEY_MULTIPLIER_BITS", 1)

    assert {utils.generate_random_key() for _ in range(50)} <= {"0", "1"}


def test_invariant_passes_silently_when_condition_holds():
    utils.invariant(True, "never raised")


def test_invariant_raises_an_assertion_error_when_condition_fails():
    with pytest.raises(InvariantViolationError, match="selection must be collapsed"):
        utils.invariant(0, "selection must be collapsed")

    with pytest.raises(AssertionError):
        utils.invariant(None, "also an AssertionError")


@pytest.mark.parametrize(
    ("items", "expected_value"),
    [
        ([], []),
        ([1, 1, 0, 1], [(0, 2), (3, 4)]),
        ([0, 0, 0], []),
        ([2, 2, 3, 3, 0], [(0, 2), (2, 4)]),
    ],
)
def test_find_ranges_yields_runs_of_equal_items_passing_the_filter(
    items: list[int], expected_value: list[tuple[int, int]]
):
    assert list(utils.find_ranges(items, lambda a, b: a == b, bool)) == expected_value


class DescribeLazyproperty:
    """Unit-test suite for `draftkit.utils.lazyproperty`."""

    def it_computes_the_value_only_once(self):
        calls: list[int] = []

        class Obj:
            @utils.lazyproperty
            def value(self) -> int:
                calls.append(1)
                return 42

        obj = Obj()

        assert obj.value == 42
        assert obj.value == 42
        assert calls == [1]

    def it_works_on_a_frozen_dataclass(self):
        @dc.dataclass(frozen=True)
        class Frozen:
            n: int

            @utils.lazyproperty
            def doubled(self) -> int:
                return self.n * 2

        assert Frozen(3).doubled == 6

    def but_it_cannot_be_assigned_to(self):
        class Obj:
            @utils.lazyproperty
            def value(self) -> int:
                return 1

        with pytest.raises(AttributeError):
            Obj().value = 2
