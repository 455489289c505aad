"""Configured return values keyed by operation and argument signature.

Resolution order for a call:

1. an entry for the same operation whose signature is structurally equal to
   the actual arguments;
2. the operation's catch-all entry, registered with an empty signature;
3. nothing.

There is no partial or wildcard matching between two non-empty signatures.
Signatures are compared structurally rather than hashed, so unhashable
arguments (lists, dicts, plain objects) are valid stub keys.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, NamedTuple, Sequence

from understudy.domain.equality import arguments_equal, snapshot_arguments
from understudy.domain.errors import InvalidConfigurationError
from understudy.domain.operations import OperationDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StubEntry:
    """A configured value for one (operation, argument signature) key."""

    operation: OperationDescriptor
    arguments: tuple[Any, ...]
    value: Any

    @property
    def is_catch_all(self) -> bool:
        return not self.arguments


class StubLookup(NamedTuple):
    """Outcome of :meth:`StubRegistry.lookup`."""

    value: Any
    found: bool


_MISSING = StubLookup(None, False)


class StubRegistry:
    """Thread-safe store of stub entries for one substitute."""

    def __init__(self) -> None:
        self._entries: dict[OperationDescriptor, list[StubEntry]] = {}
        self._lock = threading.RLock()

    def register(
        self,
        operation: OperationDescriptor | None,
        arguments: Sequence[Any] | None,
        value: Any,
    ) -> StubEntry:
        """Store *value* for calls of *operation* with *arguments*.

        ``None`` or an empty sequence registers the operation's catch-all.
        Registering an identical key again replaces the earlier value.

        Raises:
            InvalidConfigurationError: If *operation* is absent.
        """

        if operation is None:
            raise InvalidConfigurationError("Stub target operation cannot be None")

        entry = StubEntry(
            operation=operation,
            arguments=snapshot_arguments(arguments),
            value=value,
        )
        with self._lock:
            entries = self._entries.setdefault(operation, [])
            for index, existing in enumerate(entries):
                if arguments_equal(existing.arguments, entry.arguments):
                    entries[index] = entry
                    logger.warning(
                        "Overwriting stub for %s%r", operation.name, entry.arguments
                    )
                    break
            else:
                entries.append(entry)
        logger.debug("Registered stub for %s%r", operation.name, entry.arguments)
        return entry

    def lookup(
        self, operation: OperationDescriptor, arguments: Sequence[Any] | None
    ) -> StubLookup:
        """Resolve the configured value for a call, if any."""

        actual = tuple(arguments or ())
        with self._lock:
            entries = tuple(self._entries.get(operation, ()))

        catch_all: StubEntry | None = None
        for entry in entries:
            if arguments_equal(entry.arguments, actual):
                return StubLookup(entry.value, True)
            if entry.is_catch_all:
                catch_all = entry
        if catch_all is not None:
            return StubLookup(catch_all.value, True)
        return _MISSING

    def entries(self) -> tuple[StubEntry, ...]:
        """Return a snapshot of every registered entry."""

        with self._lock:
            return tuple(entry for group in self._entries.values() for entry in group)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(group) for group in self._entries.values())


__all__ = ["StubEntry", "StubLookup", "StubRegistry"]
