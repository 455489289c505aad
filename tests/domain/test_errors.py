"""Tests for the error taxonomy."""

from __future__ import annotations

from understudy.domain.errors import (
    AmbiguousOperationError,
    InvalidConfigurationError,
    InvalidContractError,
    InvalidHandleError,
    OperationNotFoundError,
    UnderstudyError,
)


def test_configuration_errors_share_a_base():
    """Lookup failures are configuration errors."""
    assert issubclass(OperationNotFoundError, InvalidConfigurationError)
    assert issubclass(AmbiguousOperationError, InvalidConfigurationError)
    assert issubclass(InvalidConfigurationError, UnderstudyError)
    assert issubclass(InvalidContractError, UnderstudyError)
    assert issubclass(InvalidHandleError, UnderstudyError)


def test_invalid_contract_error_names_the_contract():
    error = InvalidContractError(str, "not a capability contract")

    assert error.contract is str
    assert error.reason == "not a capability contract"
    assert str(error) == "Cannot substitute str: not a capability contract"


def test_invalid_handle_error_keeps_handle():
    handle = object()
    error = InvalidHandleError(handle)

    assert error.handle is handle
    assert "Not a substitute" in str(error)


def test_operation_not_found_error_messages():
    assert str(OperationNotFoundError("find")) == "Operation not found: find"
    error = OperationNotFoundError("find", 2)
    assert str(error) == "Operation not found: find with 2 arguments"
    assert error.argument_count == 2


def test_ambiguous_operation_error_lists_candidates():
    error = AmbiguousOperationError("find", ["find(a)", "find(b)"])

    assert error.candidates == ("find(a)", "find(b)")
    assert "find(a), find(b)" in str(error)
