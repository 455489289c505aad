"""Error taxonomy raised by the substitute engine.

Every error is raised synchronously as the direct result of the offending
call. None of them is retried internally and a failed call leaves every other
substitute (and any state configured earlier) untouched.
"""

from __future__ import annotations

from typing import Any, Sequence


class UnderstudyError(Exception):
    """Base class for all errors raised by understudy."""


class InvalidContractError(UnderstudyError):
    """Raised when a substitute is requested for something that is not a contract."""

    def __init__(self, contract: Any, reason: str):
        name = getattr(contract, "__qualname__", None) or repr(contract)
        super().__init__(f"Cannot substitute {name}: {reason}")
        self.contract = contract
        self.reason = reason


class InvalidHandleError(UnderstudyError):
    """Raised when an operation addresses an object this engine did not create."""

    def __init__(self, handle: Any):
        super().__init__(f"Not a substitute created by this engine: {handle!r}")
        self.handle = handle


class InvalidConfigurationError(UnderstudyError):
    """Raised when stub configuration input is malformed."""


class OperationNotFoundError(InvalidConfigurationError):
    """Raised when configuration names an operation the contract does not declare."""

    def __init__(self, operation_name: str, argument_count: int | None = None):
        if argument_count is None:
            message = f"Operation not found: {operation_name}"
        else:
            message = (
                f"Operation not found: {operation_name} "
                f"with {argument_count} arguments"
            )
        super().__init__(message)
        self.operation_name = operation_name
        self.argument_count = argument_count


class AmbiguousOperationError(InvalidConfigurationError):
    """Raised when configuration matches more than one declared operation."""

    def __init__(self, operation_name: str, candidates: Sequence[Any]):
        rendered = ", ".join(str(candidate) for candidate in candidates)
        super().__init__(
            f"Operation {operation_name} is ambiguous; candidates: {rendered}"
        )
        self.operation_name = operation_name
        self.candidates = tuple(candidates)


__all__ = [
    "AmbiguousOperationError",
    "InvalidConfigurationError",
    "InvalidContractError",
    "InvalidHandleError",
    "OperationNotFoundError",
    "UnderstudyError",
]
