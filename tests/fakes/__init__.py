"""Contracts and domain scaffolding exercised by the engine tests.

This package provides:
1. A small user domain (entity, data-access contract, service) whose service
   drives calls through whatever substitute it is handed
2. Contracts covering every return kind and parameter kind
3. Classes that must be rejected as contracts
"""

from .contracts import (
    ConcreteRepository,
    ExtendedGreeter,
    Greeter,
    HookedLedger,
    Instrument,
    Ledger,
    PartialLedger,
    Scheduler,
    SealedLedger,
    StaticFactoryContract,
    UserId,
)
from .users import (
    AbstractUserRepository,
    User,
    UserNotFoundError,
    UserRepository,
    UserService,
)

__all__ = [
    "AbstractUserRepository",
    "ConcreteRepository",
    "ExtendedGreeter",
    "Greeter",
    "HookedLedger",
    "Instrument",
    "Ledger",
    "PartialLedger",
    "Scheduler",
    "SealedLedger",
    "StaticFactoryContract",
    "User",
    "UserId",
    "UserNotFoundError",
    "UserRepository",
    "UserService",
]
