"""Append-only, insertion-ordered log of intercepted calls.

The log is shared by every thread that calls into one substitute. Appends
and snapshots happen under a single lock, so the recorded order is always
some valid interleaving of the concurrent calls that produced it and a
snapshot is never observed half-written.

Usage:
    log = InvocationLog()
    log.record(find_by_email, ["a@example.com"])
    assert [r.operation_name for r in log.all_records()] == ["find_by_email"]
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterator, Sequence

from understudy.domain.invocations import CallRecord
from understudy.domain.operations import OperationDescriptor

logger = logging.getLogger(__name__)


class InvocationLog:
    """Thread-safe record of every call made against one substitute."""

    def __init__(self) -> None:
        self._records: list[CallRecord] = []
        self._lock = threading.Lock()

    def record(
        self, operation: OperationDescriptor, arguments: Sequence[Any] | None
    ) -> CallRecord:
        """Capture a call and append it to the log.

        The arguments are deep-copied before the lock is taken; recording
        always succeeds.
        """

        entry = CallRecord.capture(operation, arguments)
        with self._lock:
            self._records.append(entry)
        logger.debug("Recorded %r", entry)
        return entry

    def all_records(self) -> tuple[CallRecord, ...]:
        """Return a snapshot of every record in call order."""

        with self._lock:
            return tuple(self._records)

    def records_for_operation(self, operation_name: str) -> tuple[CallRecord, ...]:
        """Return the records whose operation is called *operation_name*."""

        return tuple(
            entry
            for entry in self.all_records()
            if entry.operation_name == operation_name
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[CallRecord]:
        return iter(self.all_records())


__all__ = ["InvocationLog"]
