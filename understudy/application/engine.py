"""Substitute engine: stands in for capability contracts and mediates calls.

The engine materialises a substitute for a contract, then routes every call
made against it through the same record-then-resolve routine:

1. identity operations (``==``, ``hash``, ``repr``) are answered by the
   substitute itself and never recorded;
2. the call's arguments are normalised against the declared signature;
3. a :class:`~understudy.domain.invocations.CallRecord` is appended to the
   substitute's invocation log;
4. the stub registry is consulted, and a configured value is returned as-is;
5. otherwise the default for the declared return kind is returned.

Usage:
    from understudy import SubstituteEngine

    engine = SubstituteEngine()
    repository = engine.create(UserRepository)
    engine.configure(repository, "find_by_email", ["a@example.com"], alice)

    assert repository.find_by_email("a@example.com") is alice
    assert repository.find_by_email("b@example.com") is None
    assert engine.count_invocations(repository, "find_by_email") == 2
"""

from __future__ import annotations

import inspect
import logging
import threading
import types
import weakref
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar, overload

from understudy.domain.errors import (
    InvalidConfigurationError,
    InvalidContractError,
    InvalidHandleError,
    OperationNotFoundError,
)
from understudy.domain.invocations import CallRecord
from understudy.domain.operations import OperationDescriptor, resolve_annotation

from .contracts import ContractDescriptor, describe_contract
from .defaults import default_for
from .invocation_log import InvocationLog
from .settings import EngineSettings, get_settings
from .stub_registry import StubEntry, StubRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _types_match(operation: OperationDescriptor, args: Sequence[Any]) -> bool:
    for parameter, value in zip(operation.parameters, args):
        if parameter.is_variadic:
            break
        annotation = resolve_annotation(parameter.annotation)
        if isinstance(annotation, type) and not isinstance(value, annotation):
            return False
    return True


class InterceptionHandler:
    """Record-then-resolve routine shared by every operation of one substitute.

    Owns the substitute's invocation log and stub registry; nothing else ever
    holds a reference to either.
    """

    def __init__(
        self, contract: ContractDescriptor, *, strict_signatures: bool = True
    ) -> None:
        self.contract = contract
        self.log = InvocationLog()
        self.stubs = StubRegistry()
        self._strict = strict_signatures

    def handle(
        self,
        operation: OperationDescriptor,
        args: Sequence[Any] | None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:
        """Record a call of *operation* and return its stubbed or default result."""

        arguments = operation.bind(args, kwargs, strict=self._strict)
        self.log.record(operation, arguments)

        value, found = self.stubs.lookup(operation, arguments)
        if found:
            logger.debug(
                "Resolved %s.%s from stub", self.contract.name, operation.name
            )
            return value
        return default_for(operation)

    def select(
        self,
        candidates: Sequence[OperationDescriptor],
        args: Sequence[Any],
        kwargs: Mapping[str, Any] | None = None,
    ) -> OperationDescriptor:
        """Pick the overload among *candidates* that a call addresses.

        Raises:
            TypeError: If no overload, or more than one, fits the call.
        """

        if len(candidates) == 1:
            return candidates[0]

        matching = [
            operation for operation in candidates if self._fits(operation, args, kwargs)
        ]
        if len(matching) > 1:
            typed = [operation for operation in matching if _types_match(operation, args)]
            if typed:
                matching = typed
        if len(matching) == 1:
            return matching[0]

        name = candidates[0].name
        if not matching:
            raise TypeError(f"No overload of {name} accepts the given arguments")
        raise TypeError(f"Call to {name} matches {len(matching)} overloads")

    def _fits(
        self,
        operation: OperationDescriptor,
        args: Sequence[Any],
        kwargs: Mapping[str, Any] | None,
    ) -> bool:
        if not self._strict:
            return operation.accepts(len(args) + (1 if kwargs else 0))
        try:
            operation.signature.bind(*args, **dict(kwargs or {}))
        except TypeError:
            return False
        return True


class Substitute:
    """Base class of every generated substitute.

    Only the identity surface lives here. Equality is reference identity, the
    hash is stable for the instance's lifetime and the description is an
    opaque label. Contract operations are generated methods that forward to
    the instance's :class:`InterceptionHandler`.
    """

    def __init__(self, handler: InterceptionHandler, label_prefix: str) -> None:
        self._understudy_handler = handler
        self._understudy_label = f"{label_prefix} {handler.contract.name}"

    def __eq__(self, other: object) -> bool:
        return self is other

    def __ne__(self, other: object) -> bool:
        return self is not other

    def __hash__(self) -> int:
        return object.__hash__(self)

    def __repr__(self) -> str:
        return f"<{self._understudy_label} at {id(self):#x}>"

    __str__ = __repr__


def _with_receiver(signature: inspect.Signature) -> inspect.Signature:
    receiver = inspect.Parameter("self", inspect.Parameter.POSITIONAL_ONLY)
    return signature.replace(parameters=[receiver, *signature.parameters.values()])


def _operation_member(
    class_name: str, name: str, operations: tuple[OperationDescriptor, ...]
) -> Any:
    if len(operations) > 1:

        def member(self, *args, **kwargs):
            handler = self._understudy_handler
            return handler.handle(handler.select(operations, args, kwargs), args, kwargs)

        member.__name__ = name
        member.__qualname__ = f"{class_name}.{name}"
        return member

    operation = operations[0]
    if operation.is_property:

        def read(self):
            return self._understudy_handler.handle(operation, ())

        read.__name__ = name
        read.__qualname__ = f"{class_name}.{name}"
        return property(read)

    if operation.is_async:

        async def member(self, *args, **kwargs):
            return self._understudy_handler.handle(operation, args, kwargs)

    else:

        def member(self, *args, **kwargs):
            return self._understudy_handler.handle(operation, args, kwargs)

    member.__name__ = name
    member.__qualname__ = f"{class_name}.{name}"
    member.__signature__ = _with_receiver(operation.signature)
    return member


def build_substitute_class(contract: ContractDescriptor) -> type[Substitute]:
    """Generate the class whose instances stand in for *contract*."""

    class_name = f"{contract.name.rsplit('.', 1)[-1]}Substitute"
    grouped: dict[str, list[OperationDescriptor]] = {}
    for operation in contract.operations:
        grouped.setdefault(operation.name, []).append(operation)

    namespace: dict[str, Any] = {
        "__module__": __name__,
        "__doc__": f"Substitute standing in for {contract.name}.",
    }
    for name, operations in grouped.items():
        namespace[name] = _operation_member(class_name, name, tuple(operations))

    bases: tuple[type, ...] = (Substitute,)
    if contract.nominal and contract.contract is not None:
        bases = (Substitute, contract.contract)
    return types.new_class(class_name, bases, exec_body=lambda ns: ns.update(namespace))


class SubstituteEngine:
    """Factory and query surface for substitutes.

    Each engine only recognises the substitutes it created itself. Every
    method is safe to call concurrently with calls made on the substitutes.
    """

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._handles: weakref.WeakKeyDictionary[Substitute, InterceptionHandler] = (
            weakref.WeakKeyDictionary()
        )
        self._classes: dict[Any, tuple[ContractDescriptor, type[Substitute]]] = {}
        self._lock = threading.Lock()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def _substitute_class(
        self, contract: Any
    ) -> tuple[ContractDescriptor, type[Substitute]]:
        # Non-classes never reach the hash-keyed cache.
        if not inspect.isclass(contract) and not isinstance(contract, ContractDescriptor):
            raise InvalidContractError(contract, "not a class")

        if self._settings.cache_contracts:
            with self._lock:
                cached = self._classes.get(contract)
            if cached is not None:
                return cached

        descriptor = describe_contract(contract)
        generated = (descriptor, build_substitute_class(descriptor))
        if self._settings.cache_contracts:
            with self._lock:
                generated = self._classes.setdefault(contract, generated)
        return generated

    @overload
    def create(self, contract: type[T]) -> T: ...

    @overload
    def create(self, contract: ContractDescriptor) -> Any: ...

    def create(self, contract: Any) -> Any:
        """Create a substitute for *contract* with its own log and registry.

        Raises:
            InvalidContractError: If *contract* is not a capability contract.
        """

        descriptor, substitute_class = self._substitute_class(contract)
        handler = InterceptionHandler(
            descriptor, strict_signatures=self._settings.strict_signatures
        )
        substitute = substitute_class(handler, self._settings.label_prefix)
        with self._lock:
            self._handles[substitute] = handler
        logger.info("Created substitute for %s", descriptor.name)
        return substitute

    def _handler_for(self, handle: Any) -> InterceptionHandler:
        if isinstance(handle, Substitute):
            with self._lock:
                handler = self._handles.get(handle)
            if handler is not None:
                return handler
        raise InvalidHandleError(handle)

    def is_substitute(self, candidate: Any) -> bool:
        """Return True if *candidate* was created by this engine."""

        try:
            self._handler_for(candidate)
        except InvalidHandleError:
            return False
        return True

    def contract_of(self, substitute: Any) -> ContractDescriptor:
        return self._handler_for(substitute).contract

    def configure(
        self,
        substitute: Any,
        operation_name: str,
        arguments: Sequence[Any] | None = None,
        value: Any = None,
    ) -> StubEntry:
        """Make calls of *operation_name* with *arguments* return *value*.

        ``arguments=None`` configures the operation regardless of the
        arguments actually supplied. Otherwise the operation is resolved by
        name and argument count and only calls with structurally equal
        (normalised) arguments match. Trailing parameters that have defaults
        may be left out of *arguments*; their defaults are filled in, as they
        are for recorded calls.

        Raises:
            InvalidHandleError: If *substitute* was not created by this engine.
            InvalidConfigurationError: If the input is malformed.
            OperationNotFoundError: If no declared operation matches.
            AmbiguousOperationError: If several declared operations match.
        """

        handler = self._handler_for(substitute)
        if not isinstance(operation_name, str) or not operation_name:
            raise InvalidConfigurationError(
                f"Operation name must be a non-empty string, got {operation_name!r}"
            )
        if arguments is not None and (
            isinstance(arguments, (str, bytes)) or not isinstance(arguments, Sequence)
        ):
            raise InvalidConfigurationError(
                f"Stub arguments must be a sequence, got {type(arguments).__name__}"
            )

        argument_count = None if arguments is None else len(arguments)
        operation = handler.contract.resolve(operation_name, argument_count)
        if arguments and self._settings.strict_signatures:
            # Calls are recorded with defaults applied, so the stub key is too.
            arguments = operation.with_defaults(arguments)
        return handler.stubs.register(operation, arguments, value)

    def invoke(
        self,
        substitute: Any,
        operation_name: str,
        arguments: Sequence[Any] | None = None,
    ) -> Any:
        """Call *operation_name* on *substitute* by name.

        The call takes the same interception path as calling the method
        directly. Asynchronous operations are resolved without awaiting.

        Raises:
            OperationNotFoundError: If the contract declares no such operation.
            TypeError: If the arguments fit no declared signature.
        """

        handler = self._handler_for(substitute)
        candidates = handler.contract.operations_named(operation_name)
        if not candidates:
            raise OperationNotFoundError(operation_name)
        args = tuple(arguments or ())
        return handler.handle(handler.select(candidates, args), args)

    def invocations_of(
        self, substitute: Any, operation_name: str | None = None
    ) -> tuple[CallRecord, ...]:
        """Return the calls made on *substitute* in the order they happened."""

        log = self._handler_for(substitute).log
        if operation_name is None:
            return log.all_records()
        return log.records_for_operation(operation_name)

    def count_invocations(self, substitute: Any, operation_name: str) -> int:
        return len(self.invocations_of(substitute, operation_name))

    def verify(self, substitute: Any, operation_name: str, times: int) -> bool:
        """Return True if *operation_name* was called exactly *times* times."""

        return self.count_invocations(substitute, operation_name) == times


# Engine backing the module-level helpers below.
default_engine = SubstituteEngine()


def get_engine() -> SubstituteEngine:
    """Return the process-wide engine used by the module-level helpers."""

    return default_engine


def create(contract: Any) -> Any:
    return default_engine.create(contract)


def configure(
    substitute: Any,
    operation_name: str,
    arguments: Sequence[Any] | None = None,
    value: Any = None,
) -> StubEntry:
    return default_engine.configure(substitute, operation_name, arguments, value)


def invoke(
    substitute: Any, operation_name: str, arguments: Sequence[Any] | None = None
) -> Any:
    return default_engine.invoke(substitute, operation_name, arguments)


def invocations(
    substitute: Any, operation_name: str | None = None
) -> tuple[CallRecord, ...]:
    return default_engine.invocations_of(substitute, operation_name)


def count_invocations(substitute: Any, operation_name: str) -> int:
    return default_engine.count_invocations(substitute, operation_name)


def verify(substitute: Any, operation_name: str, times: int) -> bool:
    return default_engine.verify(substitute, operation_name, times)


__all__ = [
    "InterceptionHandler",
    "Substitute",
    "SubstituteEngine",
    "build_substitute_class",
    "configure",
    "count_invocations",
    "create",
    "default_engine",
    "get_engine",
    "invocations",
    "invoke",
    "verify",
]
