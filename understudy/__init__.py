"""understudy: record-and-stub substitutes for capability contracts.

Given a ``typing.Protocol`` or a purely abstract class, understudy builds a
substitute that records every call made against it, returns configured
values for matching calls and otherwise answers with a default derived from
the declared return type.

Usage:
    import understudy

    repository = understudy.create(UserRepository)
    understudy.configure(repository, "find_by_email", ["a@example.com"], alice)
    service = UserService(repository)
    ...
    assert understudy.count_invocations(repository, "save") == 1
"""

from understudy.application import (
    ContractDescriptor,
    EngineSettings,
    StubEntry,
    Substitute,
    SubstituteEngine,
    configure,
    count_invocations,
    create,
    describe_contract,
    get_engine,
    get_settings,
    invocations,
    invoke,
    verify,
)
from understudy.domain import (
    AmbiguousOperationError,
    CallRecord,
    Char,
    InvalidConfigurationError,
    InvalidContractError,
    InvalidHandleError,
    OperationDescriptor,
    OperationNotFoundError,
    ReturnKind,
    UnderstudyError,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousOperationError",
    "CallRecord",
    "Char",
    "ContractDescriptor",
    "EngineSettings",
    "InvalidConfigurationError",
    "InvalidContractError",
    "InvalidHandleError",
    "OperationDescriptor",
    "OperationNotFoundError",
    "ReturnKind",
    "StubEntry",
    "Substitute",
    "SubstituteEngine",
    "UnderstudyError",
    "configure",
    "count_invocations",
    "create",
    "describe_contract",
    "get_engine",
    "get_settings",
    "invocations",
    "invoke",
    "verify",
]
