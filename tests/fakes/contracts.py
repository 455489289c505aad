"""Assorted capability contracts, and non-contracts, for engine tests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from fractions import Fraction
from typing import Annotated, NewType, Optional, Protocol, final, runtime_checkable

from understudy import Char

UserId = NewType("UserId", int)


class Instrument(Protocol):
    """One operation per return kind."""

    def reset(self) -> None: ...

    def is_ready(self) -> bool: ...

    def count(self) -> int: ...

    def user_id(self) -> UserId: ...

    def reading(self) -> float: ...

    def phase(self) -> complex: ...

    def total(self) -> Decimal: ...

    def ratio(self) -> Fraction: ...

    def grade(self) -> Char: ...

    def label(self) -> str: ...

    def maybe_count(self) -> Optional[int]: ...

    def tagged(self) -> Annotated[int, "units"]: ...

    def untyped(self): ...

    async def fetch(self, key: str) -> int: ...

    @property
    def name(self) -> str: ...

    @property
    def size(self) -> int: ...


@runtime_checkable
class Greeter(Protocol):
    def greet(self, name: str, greeting: str = "Hello") -> str: ...

    def __call__(self, name: str) -> str: ...

    def __len__(self) -> int: ...


class Scheduler(Protocol):
    """Exercises every parameter kind."""

    def schedule(self, job: str, /, when: int, *tags: str, urgent: bool = False, **options: str) -> bool: ...


class ExtendedGreeter(Greeter, Protocol):
    def farewell(self, name: str) -> str: ...


class Ledger(ABC):
    @abstractmethod
    def post(self, amount: Decimal) -> bool:
        raise NotImplementedError

    @abstractmethod
    def balance(self) -> Decimal:
        raise NotImplementedError


class PartialLedger(Ledger):
    """Implements one operation; not a pure contract."""

    def post(self, amount: Decimal) -> bool:
        return True


@final
class SealedLedger(ABC):
    @abstractmethod
    def balance(self) -> Decimal:
        raise NotImplementedError


class StaticFactoryContract(ABC):
    @staticmethod
    @abstractmethod
    def build() -> "StaticFactoryContract":
        raise NotImplementedError


class ConcreteRepository:
    def find(self, key: str) -> str:
        return key


class HookedLedger(ABC):
    """Declares a private abstract hook no substitute can implement."""

    @abstractmethod
    def balance(self) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def _validate(self) -> None:
        raise NotImplementedError
