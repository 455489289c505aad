"""Structural equality and defensive snapshots of argument values.

Recorded arguments and stub signatures are deep copies of what the caller
passed, so identity can never be used to match them against later calls.
:func:`structurally_equal` compares values the way a reader would: sequences
and mappings element by element, objects without their own ``__eq__`` field
by field, everything else with ``==``.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

_STRING_TYPES = (str, bytes, bytearray)


def snapshot(value: Any) -> Any:
    """Return a deep copy of *value*.

    Parts that cannot be copied (locks, sockets, open files) are shared with
    the original while everything around them is still copied. *value* is
    returned itself only when it cannot be rebuilt even so.
    """

    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error):
        pass

    memo: dict[int, Any] = {}
    _share_uncopyable(value, memo, set())
    try:
        return copy.deepcopy(value, memo)
    except (TypeError, copy.Error):
        logger.debug(
            "Keeping uncopyable %s argument by reference", type(value).__name__
        )
        return value


def _children(value: Any) -> list[Any] | None:
    if isinstance(value, (str, bytes, bytearray, int, float, complex)):
        return None
    if inspect.isclass(value) or inspect.isroutine(value) or inspect.ismodule(value):
        return None
    if isinstance(value, Mapping):
        return [*value.keys(), *value.values()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    state = _object_state(value)
    return list(state.values()) if state else None


def _share_uncopyable(value: Any, memo: dict[int, Any], visited: set[int]) -> None:
    """Seed *memo* so that ``deepcopy`` reuses every uncopyable leaf of *value*."""

    if id(value) in visited:
        return
    visited.add(id(value))

    children = _children(value)
    if children is not None:
        for child in children:
            _share_uncopyable(child, memo, visited)
        return

    try:
        copy.deepcopy(value)
    except (TypeError, copy.Error):
        logger.debug("Sharing uncopyable %s by reference", type(value).__name__)
        memo[id(value)] = value


def snapshot_arguments(arguments: Sequence[Any] | None) -> tuple[Any, ...]:
    """Deep-copy each argument into a new tuple; ``None`` becomes ``()``."""

    if arguments is None:
        return ()
    return tuple(snapshot(argument) for argument in arguments)


def _defines_eq(value: Any) -> bool:
    return type(value).__eq__ is not object.__eq__


def _slot_names(value: Any) -> list[str]:
    names: list[str] = []
    for klass in type(value).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(name for name in slots if name not in ("__dict__", "__weakref__"))
    return names


def _object_state(value: Any) -> dict[str, Any]:
    state: dict[str, Any] = {}
    for name in _slot_names(value):
        if hasattr(value, name):
            state[name] = getattr(value, name)
    state.update(getattr(value, "__dict__", {}))
    return state


def _equal(left: Any, right: Any, seen: set[tuple[int, int]]) -> bool:
    if left is right:
        return True

    pair = (id(left), id(right))
    if pair in seen:
        return True

    if isinstance(left, _STRING_TYPES) or isinstance(right, _STRING_TYPES):
        return bool(left == right)

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if type(left) is not type(right) and not (
            isinstance(left, dict) and isinstance(right, dict)
        ):
            return bool(left == right)
        if left.keys() != right.keys():
            return False
        seen.add(pair)
        return all(_equal(left[key], right[key], seen) for key in left)

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if type(left) is not type(right) or len(left) != len(right):
            return False
        seen.add(pair)
        return all(_equal(a, b, seen) for a, b in zip(left, right))

    if type(left) is not type(right):
        return bool(left == right)

    if _defines_eq(left):
        return bool(left == right)

    left_state = _object_state(left)
    right_state = _object_state(right)
    if not left_state and not right_state:
        return False
    if left_state.keys() != right_state.keys():
        return False
    seen.add(pair)
    return all(_equal(left_state[key], right_state[key], seen) for key in left_state)


def structurally_equal(left: Any, right: Any) -> bool:
    """Return True when *left* and *right* are deeply, not identically, equal.

    Objects that define ``__eq__`` decide for themselves. Plain objects with no
    ``__eq__`` compare their instance state, so a deep copy of an argument
    still matches the original. Stateless plain objects compare by identity.
    """

    return _equal(left, right, set())


def arguments_equal(left: Sequence[Any], right: Sequence[Any]) -> bool:
    """Return True when two argument sequences match element by element."""

    if len(left) != len(right):
        return False
    seen: set[tuple[int, int]] = set()
    return all(_equal(a, b, seen) for a, b in zip(left, right))


__all__ = [
    "arguments_equal",
    "snapshot",
    "snapshot_arguments",
    "structurally_equal",
]
