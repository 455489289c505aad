"""Application layer: contract introspection, stubbing and the substitute engine."""

from .contracts import ContractDescriptor, describe_contract, describe_operation
from .defaults import default_for
from .engine import (
    InterceptionHandler,
    Substitute,
    SubstituteEngine,
    configure,
    count_invocations,
    create,
    get_engine,
    invocations,
    invoke,
    verify,
)
from .invocation_log import InvocationLog
from .settings import EngineSettings, get_settings
from .stub_registry import StubEntry, StubLookup, StubRegistry

__all__ = [
    "ContractDescriptor",
    "EngineSettings",
    "InterceptionHandler",
    "InvocationLog",
    "StubEntry",
    "StubLookup",
    "StubRegistry",
    "Substitute",
    "SubstituteEngine",
    "configure",
    "count_invocations",
    "create",
    "default_for",
    "describe_contract",
    "describe_operation",
    "get_engine",
    "get_settings",
    "invocations",
    "invoke",
    "verify",
]
