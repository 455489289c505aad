"""User domain scaffolding consumed by the engine tests.

Usage:
    from tests.fakes import User, UserRepository, UserService

    def test_service_saves_user(engine):
        repository = engine.create(UserRepository)
        service = UserService(repository)
        service.register(User(user_id=1, email="a@example.com", name="A"))

        assert engine.count_invocations(repository, "save") == 1
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class User:
    """Mutable user entity; mutation after a call must not alter history."""

    user_id: int
    email: str
    name: str
    active: bool = True
    roles: list[str] = field(default_factory=list)


class UserNotFoundError(Exception):
    """Raised when a user cannot be found."""

    def __init__(self, email: str):
        super().__init__(f"User not found: {email}")
        self.email = email


class UserRepository(Protocol):
    """Data-access contract for users."""

    def find_by_email(self, email: str) -> User: ...

    def find_all(self) -> list[User]: ...

    def save(self, user: User) -> None: ...

    def delete(self, user_id: int) -> None: ...

    def exists(self, user_id: int) -> bool: ...

    def count(self) -> int: ...


class AbstractUserRepository(ABC):
    """Nominal variant of :class:`UserRepository`."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, user: User) -> None:
        raise NotImplementedError

    @abstractmethod
    def exists(self, user_id: int) -> bool:
        raise NotImplementedError

    @property
    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError


class UserService:
    """Domain service driving calls through a :class:`UserRepository`."""

    def __init__(self, repository: UserRepository):
        self._repository = repository

    def register(self, user: User) -> User:
        if self._repository.exists(user.user_id):
            raise ValueError(f"User {user.user_id} already registered")
        self._repository.save(user)
        return user

    def get_by_email(self, email: str) -> User:
        user = self._repository.find_by_email(email)
        if user is None:
            raise UserNotFoundError(email)
        return user

    def deactivate(self, email: str) -> User:
        user = self.get_by_email(email)
        user.active = False
        self._repository.save(user)
        return user

    def active_users(self) -> list[User]:
        return [user for user in self._repository.find_all() or [] if user.active]
