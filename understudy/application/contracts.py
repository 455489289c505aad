"""Capability contract introspection.

A capability contract is a pure set of operations with no implementation. Two
Python spellings qualify:

- a :class:`typing.Protocol` class, satisfied structurally;
- an abstract class whose public methods and properties are all abstract,
  satisfied nominally (substitutes subclass it so ``isinstance`` holds).

:func:`describe_contract` turns either into a :class:`ContractDescriptor`, the
per-contract dispatch table the engine builds substitutes from. A descriptor
can also be assembled by hand with :meth:`ContractDescriptor.build`, which is
the only way to declare two operations sharing a name.
"""

from __future__ import annotations

import abc
import dataclasses
import inspect
import keyword
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from understudy.domain.errors import (
    AmbiguousOperationError,
    InvalidContractError,
    OperationNotFoundError,
)
from understudy.domain.operations import (
    OperationDescriptor,
    ParameterDescriptor,
    classify_return,
)

logger = logging.getLogger(__name__)

# Identity surface of the substitute itself; never dispatched to the contract.
RESERVED_OPERATIONS = frozenset({"__eq__", "__ne__", "__hash__", "__repr__", "__str__"})

_HOUSEKEEPING = frozenset(
    {
        "__init__",
        "__new__",
        "__del__",
        "__init_subclass__",
        "__subclasshook__",
        "__class_getitem__",
        "__getattr__",
        "__getattribute__",
        "__setattr__",
        "__delattr__",
        "__dir__",
        "__post_init__",
        "__reduce__",
        "__reduce_ex__",
        "__getstate__",
        "__setstate__",
        "__copy__",
        "__deepcopy__",
        "__sizeof__",
        "__format__",
        "__instancecheck__",
        "__subclasscheck__",
    }
)

_FOUNDATION_BASES = (object, typing.Protocol, typing.Generic, abc.ABC)


@dataclass(frozen=True)
class ContractDescriptor:
    """Dispatch table of one capability contract.

    Attributes:
        name: Display name of the contract.
        operations: Every declared operation, in declaration order.
        contract: The described class, or ``None`` for hand-built tables.
        nominal: Whether substitutes must subclass ``contract``.
    """

    name: str
    operations: tuple[OperationDescriptor, ...]
    contract: type | None = None
    nominal: bool = False

    @classmethod
    def build(
        cls, name: str, operations: Iterable[OperationDescriptor]
    ) -> "ContractDescriptor":
        """Assemble a contract description from explicit operation descriptors."""

        declared: list[OperationDescriptor] = []
        for operation in operations:
            if not isinstance(operation, OperationDescriptor):
                raise InvalidContractError(
                    name, f"{operation!r} is not an OperationDescriptor"
                )
            if not operation.name.isidentifier() or keyword.iskeyword(operation.name):
                raise InvalidContractError(
                    name, f"{operation.name!r} is not a valid operation name"
                )
            if operation.name in RESERVED_OPERATIONS:
                raise InvalidContractError(
                    name, f"{operation.name} is reserved for the substitute itself"
                )
            if not operation.contract_name:
                operation = dataclasses.replace(operation, contract_name=name)
            declared.append(operation)

        _reject_conflicting_overloads(name, declared)
        return cls(name=name, operations=tuple(declared))

    @property
    def operation_names(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(operation.name for operation in self.operations))

    def operations_named(self, name: str) -> tuple[OperationDescriptor, ...]:
        return tuple(operation for operation in self.operations if operation.name == name)

    def resolve(
        self, name: str, argument_count: int | None = None
    ) -> OperationDescriptor:
        """Return the single operation called *name*.

        When *argument_count* is given only operations accepting that many
        normalised arguments are considered.

        Raises:
            OperationNotFoundError: If nothing matches.
            AmbiguousOperationError: If more than one operation matches.
        """

        candidates = self.operations_named(name)
        if argument_count is not None:
            candidates = tuple(
                operation for operation in candidates if operation.accepts(argument_count)
            )
        if not candidates:
            raise OperationNotFoundError(name, argument_count)
        if len(candidates) > 1:
            raise AmbiguousOperationError(name, candidates)
        return candidates[0]


def _reject_conflicting_overloads(
    name: str, operations: list[OperationDescriptor]
) -> None:
    seen: dict[str, OperationDescriptor] = {}
    for operation in operations:
        previous = seen.get(operation.name)
        if previous is None:
            seen[operation.name] = operation
            continue
        if operation.is_property or previous.is_property:
            raise InvalidContractError(
                name, f"property {operation.name} cannot be overloaded"
            )
        if operation == previous:
            raise InvalidContractError(name, f"{operation} is declared twice")


def _is_operation_name(name: str) -> bool:
    if name in RESERVED_OPERATIONS or name in _HOUSEKEEPING:
        return False
    if name.startswith("__") and name.endswith("__"):
        return True
    return not name.startswith("_")


def _type_hints(function: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(function, include_extras=True)
    except (NameError, TypeError, AttributeError):
        # Forward references that only exist under TYPE_CHECKING stay strings.
        logger.debug("Could not resolve annotations of %r", function)
        return {}


def describe_operation(
    contract_name: str,
    name: str,
    function: Callable[..., Any],
    *,
    is_property: bool = False,
) -> OperationDescriptor:
    """Derive an :class:`OperationDescriptor` from a contract member."""

    signature = inspect.signature(function)
    hints = _type_hints(function)
    declared = list(signature.parameters.values())[1:]
    parameters = tuple(
        ParameterDescriptor(
            parameter.name,
            parameter.kind,
            annotation=hints.get(parameter.name, parameter.annotation),
            default=parameter.default,
        )
        for parameter in declared
    )
    return_type = hints.get("return", signature.return_annotation)
    return OperationDescriptor(
        name=name,
        parameters=parameters,
        return_type=return_type,
        return_kind=classify_return(return_type),
        contract_name=contract_name,
        is_async=inspect.iscoroutinefunction(function),
        is_property=is_property,
    )


def _collect_members(contract: type) -> dict[str, Any]:
    members: dict[str, Any] = {}
    for klass in reversed(contract.__mro__):
        if klass in _FOUNDATION_BASES:
            continue
        for name, member in vars(klass).items():
            if _is_operation_name(name):
                members[name] = member
    return members


def describe_contract(contract: Any) -> ContractDescriptor:
    """Build the dispatch table for *contract*.

    Raises:
        InvalidContractError: If *contract* is not a Protocol, a purely
            abstract class or a :class:`ContractDescriptor`.
    """

    if isinstance(contract, ContractDescriptor):
        return contract
    if not inspect.isclass(contract):
        raise InvalidContractError(contract, "not a class")
    if getattr(contract, "__final__", False):
        raise InvalidContractError(contract, "class is declared final")

    is_protocol = bool(getattr(contract, "_is_protocol", False))
    if not is_protocol and not inspect.isabstract(contract):
        raise InvalidContractError(
            contract,
            "not a capability contract (expected a Protocol or an abstract class)",
        )

    contract_name = contract.__qualname__
    abstract_names = getattr(contract, "__abstractmethods__", frozenset())
    operations: list[OperationDescriptor] = []
    for name, member in _collect_members(contract).items():
        if isinstance(member, (staticmethod, classmethod)):
            raise InvalidContractError(
                contract, f"class-level member {name} cannot be substituted"
            )
        if isinstance(member, property):
            if member.fget is None:
                raise InvalidContractError(contract, f"property {name} has no getter")
            function, is_property = member.fget, True
        elif inspect.isfunction(member):
            function, is_property = member, False
        else:
            continue

        if not is_protocol and name not in abstract_names:
            raise InvalidContractError(
                contract, f"{name} has an implementation; only abstract members allowed"
            )
        operations.append(
            describe_operation(contract_name, name, function, is_property=is_property)
        )

    # Private or housekeeping abstract members would leave the substitute abstract.
    undescribed = sorted(set(abstract_names) - {operation.name for operation in operations})
    if undescribed and not is_protocol:
        raise InvalidContractError(
            contract,
            f"abstract members cannot be substituted: {', '.join(undescribed)}",
        )

    logger.debug(
        "Described contract %s with %d operations", contract_name, len(operations)
    )
    return ContractDescriptor(
        name=contract_name,
        operations=tuple(operations),
        contract=contract,
        nominal=not is_protocol,
    )


__all__ = [
    "ContractDescriptor",
    "RESERVED_OPERATIONS",
    "describe_contract",
    "describe_operation",
]
