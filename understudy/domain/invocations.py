"""Immutable records of intercepted calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .equality import arguments_equal, snapshot_arguments
from .operations import OperationDescriptor


@dataclass(frozen=True, slots=True, eq=False)
class CallRecord:
    """One intercepted call: which operation, with which arguments.

    ``arguments`` is a deep copy taken at capture time; later mutation of the
    caller's objects never changes recorded history. Two records are equal
    when they name the same operation and their argument sequences are
    structurally equal.
    """

    operation: OperationDescriptor
    arguments: tuple[Any, ...] = field(default=())

    @classmethod
    def capture(
        cls, operation: OperationDescriptor, arguments: Sequence[Any] | None
    ) -> "CallRecord":
        return cls(operation=operation, arguments=snapshot_arguments(arguments))

    @property
    def operation_name(self) -> str:
        return self.operation.name

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, CallRecord):
            return NotImplemented
        return self.operation == other.operation and arguments_equal(
            self.arguments, other.arguments
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rendered = ", ".join(repr(argument) for argument in self.arguments)
        return f"{self.operation.name}({rendered})"


__all__ = ["CallRecord"]
