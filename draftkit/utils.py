from __future__ import annotations

import functools
import random
from typing import Any, Callable, Generic, Iterator, Optional, Sequence, TypeVar, cast

from draftkit.errors import InvariantViolationError

_T = TypeVar("_T")

_BASE32_DIGITS = "0123456789abcdefghijklmnopqrstuv"
_KEY_MULTIPLIER_BITS = 24
_MAX_KEY_ATTEMPTS = 1000


def generate_random_key(seen_keys: Optional[set[str]] = None) -> str:
    """A short random block key, not among `seen_keys` when those are provided.

    Keys are the base-32 form of a random 24-bit integer, so at most five characters long. The new
    key is added to `seen_keys`, so one set keeps the keys of a document unique. Raises
    `InvariantViolationError` when no unused key turns up in a bounded number of attempts.
    """
    for _ in range(_MAX_KEY_ATTEMPTS):
        n = random.getrandbits(_KEY_MULTIPLIER_BITS)
        digits: list[str] = []
        while True:
            n, remainder = divmod(n, 32)
            digits.append(_BASE32_DIGITS[remainder])
            if n == 0:
                break
        key = "".join(reversed(digits))
        if seen_keys is None:
            return key
        if key not in seen_keys:
            seen_keys.add(key)
            return key

    raise InvariantViolationError(
        f"no unused block key found in {_MAX_KEY_ATTEMPTS} attempts, {len(seen_keys or ())} in use"
    )


def invariant(condition: Any, message: str) -> None:
    """Raise `InvariantViolationError` with `message` when `condition` is falsy."""
    if not condition:
        raise InvariantViolationError(message)


def find_ranges(
    items: Sequence[_T],
    are_equal: Callable[[_T, _T], bool],
    filter_fn: Callable[[_T], bool],
) -> Iterator[tuple[int, int]]:
    """Generate `(start, end)` for each run of adjacent equal items in `items` passing `filter_fn`.

    `end` is exclusive. Items are compared to the first item of the run so far with `are_equal`.
    Runs that fail `filter_fn` are skipped but still terminate the run before them.
    """
    if not items:
        return

    cursor = 0
    for i in range(1, len(items) + 1):
        if i == len(items) or not are_equal(items[cursor], items[i]):
            if filter_fn(items[cursor]):
                yield cursor, i
            cursor = i


class lazyproperty(Generic[_T]):
    """Decorator like @property, but evaluated only on first access.

    Like @property, this can only be used to decorate methods having only a `self` parameter, and
    is accessed like an attribute on an instance, i.e. trailing parentheses are not used. Unlike
    @property, the decorated method is only evaluated on first access; the resulting value is
    cached and that same value returned on second and later access without re-evaluation of the
    method.

    The cached value is stored in the instance `__dict__` directly, so this also works on frozen
    dataclasses, whose `__setattr__()` refuses assignment.

    A lazyproperty is read-only. Attempting to assign to a lazyproperty raises AttributeError
    unconditionally.
    """

    def __init__(self, fget: Callable[..., _T]) -> None:
        # --- maintain a reference to the wrapped getter method
        self._fget = fget
        # --- and store the name of that decorated method
        self._name = fget.__name__
        # --- adopt fget's __name__, __doc__, and other attributes
        functools.update_wrapper(self, fget)  # pyright: ignore

    def __get__(self, obj: Any, type: Any = None) -> _T:
        """Called on each access of 'fget' attribute on class or instance."""
        # --- when accessed on class, e.g. Obj.fget, just return this descriptor
        if obj is None:
            return self  # type: ignore

        # --- when accessed on instance, start by checking instance __dict__ for
        # --- item with key matching the wrapped function's name
        value = obj.__dict__.get(self._name)
        if value is None:
            value = self._fget(obj)
            obj.__dict__[self._name] = value
        return cast(_T, value)

    def __set__(self, obj: Any, value: Any) -> None:
        """Raises unconditionally, to preserve read-only behavior."""
        raise AttributeError("can't set attribute")
