"""Domain types of the substitute engine: operations, call records and errors."""

from .equality import arguments_equal, snapshot, snapshot_arguments, structurally_equal
from .errors import (
    AmbiguousOperationError,
    InvalidConfigurationError,
    InvalidContractError,
    InvalidHandleError,
    OperationNotFoundError,
    UnderstudyError,
)
from .invocations import CallRecord
from .operations import (
    NUMERIC_TYPES,
    Char,
    OperationDescriptor,
    ParameterDescriptor,
    ReturnKind,
    classify_return,
)

__all__ = [
    "AmbiguousOperationError",
    "CallRecord",
    "Char",
    "InvalidConfigurationError",
    "InvalidContractError",
    "InvalidHandleError",
    "NUMERIC_TYPES",
    "OperationDescriptor",
    "OperationNotFoundError",
    "ParameterDescriptor",
    "ReturnKind",
    "UnderstudyError",
    "arguments_equal",
    "classify_return",
    "snapshot",
    "snapshot_arguments",
    "structurally_equal",
]
