"""Operation descriptors and return-kind classification.

An :class:`OperationDescriptor` identifies one member of a capability
contract: its name, its ordered parameters and its declared return type. One
descriptor exists per declared operation; descriptors are derived once when a
contract is described and never mutated afterwards.

Usage:
    from understudy.domain.operations import OperationDescriptor, ReturnKind

    find = OperationDescriptor.declare("find_by_email", [("email", str)], "User")
    assert find.return_kind is ReturnKind.REFERENCE
    assert find.bind(("a@example.com",), {}) == ("a@example.com",)
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Annotated, Any, Iterable, Mapping, NewType, Sequence

Char = NewType("Char", str)
"""Annotation marking an operation that returns a single character."""

_EMPTY = inspect.Parameter.empty

NUMERIC_TYPES: tuple[type, ...] = (int, float, complex, Decimal, Fraction)

_NOTHING_ANNOTATIONS = (None, type(None), typing.NoReturn, typing.Never)

# Fallback for annotations that cannot be resolved at description time.
_ANNOTATION_NAMES: dict[str, Any] = {
    "None": None,
    "NoReturn": typing.NoReturn,
    "Never": typing.Never,
    "bool": bool,
    "int": int,
    "float": float,
    "complex": complex,
    "Decimal": Decimal,
    "decimal.Decimal": Decimal,
    "Fraction": Fraction,
    "fractions.Fraction": Fraction,
    "Char": Char,
}


class ReturnKind(str, Enum):
    """Families of return types that determine an unconfigured call's result."""

    NOTHING = "nothing"
    TRUTH = "truth"
    NUMERIC = "numeric"
    CHARACTER = "character"
    REFERENCE = "reference"


def resolve_annotation(annotation: Any) -> Any:
    """Strip ``Annotated`` and ``NewType`` wrappers (except :data:`Char`)."""

    if isinstance(annotation, str):
        annotation = _ANNOTATION_NAMES.get(annotation.strip(), annotation)
    if typing.get_origin(annotation) is Annotated:
        annotation = typing.get_args(annotation)[0]
    while isinstance(annotation, NewType) and annotation is not Char:
        annotation = annotation.__supertype__
    return annotation


def classify_return(annotation: Any) -> ReturnKind:
    """Return the :class:`ReturnKind` for a declared return *annotation*.

    Missing annotations, unions, optionals and every class that is not one of
    the scalar kinds classify as :attr:`ReturnKind.REFERENCE`.
    """

    annotation = resolve_annotation(annotation)
    if annotation is _EMPTY or isinstance(annotation, str):
        return ReturnKind.REFERENCE
    if annotation in _NOTHING_ANNOTATIONS:
        return ReturnKind.NOTHING
    if annotation is Char:
        return ReturnKind.CHARACTER
    if annotation is bool:
        return ReturnKind.TRUTH
    if annotation in NUMERIC_TYPES:
        return ReturnKind.NUMERIC
    return ReturnKind.REFERENCE


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """A single declared parameter of an operation."""

    name: str
    kind: inspect._ParameterKind = inspect.Parameter.POSITIONAL_OR_KEYWORD
    annotation: Any = field(default=_EMPTY)
    default: Any = field(default=_EMPTY, compare=False, repr=False)

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY

    @property
    def is_variadic(self) -> bool:
        return self.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        )

    def to_parameter(self) -> inspect.Parameter:
        return inspect.Parameter(
            self.name, self.kind, default=self.default, annotation=self.annotation
        )


@dataclass(frozen=True, slots=True)
class OperationDescriptor:
    """Identity of one operation declared by a capability contract.

    Attributes:
        name: The operation name as exposed on the substitute.
        parameters: Declared parameters in order, receiver excluded.
        return_type: The resolved return annotation (or ``Signature.empty``).
        return_kind: Classification of ``return_type`` driving defaults.
        contract_name: Qualified name of the declaring contract.
        is_async: Whether the operation is a coroutine function.
        is_property: Whether the operation is read as an attribute.
    """

    name: str
    parameters: tuple[ParameterDescriptor, ...] = ()
    return_type: Any = field(default=inspect.Signature.empty, compare=False)
    return_kind: ReturnKind = ReturnKind.REFERENCE
    contract_name: str = ""
    is_async: bool = False
    is_property: bool = False
    signature: inspect.Signature = field(
        init=False, compare=False, repr=False, default=None  # type: ignore[assignment]
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "signature",
            inspect.Signature(
                [parameter.to_parameter() for parameter in self.parameters],
                return_annotation=self.return_type,
            ),
        )

    @classmethod
    def declare(
        cls,
        name: str,
        parameters: Iterable[Any] = (),
        return_type: Any = None,
        *,
        contract_name: str = "",
        is_async: bool = False,
    ) -> "OperationDescriptor":
        """Build a descriptor without a backing function.

        *parameters* holds either bare annotations (named ``arg0``, ``arg1``
        ...) or ``(name, annotation)`` pairs. A *return_type* of ``None``
        declares an operation that returns nothing.
        """

        declared: list[ParameterDescriptor] = []
        for index, parameter in enumerate(parameters):
            if isinstance(parameter, ParameterDescriptor):
                declared.append(parameter)
            elif isinstance(parameter, tuple) and len(parameter) == 2 and isinstance(
                parameter[0], str
            ):
                declared.append(
                    ParameterDescriptor(parameter[0], annotation=parameter[1])
                )
            else:
                declared.append(ParameterDescriptor(f"arg{index}", annotation=parameter))
        return cls(
            name=name,
            parameters=tuple(declared),
            return_type=return_type,
            return_kind=classify_return(return_type),
            contract_name=contract_name,
            is_async=is_async,
        )

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return tuple(parameter.annotation for parameter in self.parameters)

    @property
    def arity(self) -> int:
        """Length of a normalised argument tuple when no ``*args`` are passed."""

        count = 0
        for parameter in self.parameters:
            if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
                continue
            count += 1
        return count

    @property
    def is_variadic(self) -> bool:
        return any(
            parameter.kind is inspect.Parameter.VAR_POSITIONAL
            for parameter in self.parameters
        )

    @property
    def required_arity(self) -> int:
        """Arity once trailing parameters with defaults (and ``**kwargs``) are omitted."""

        if self.is_variadic:
            return self.arity
        optional = 0
        for parameter in reversed(self.parameters):
            if not (parameter.has_default or parameter.kind is inspect.Parameter.VAR_KEYWORD):
                break
            optional += 1
        return self.arity - optional

    def accepts(self, count: int) -> bool:
        """Return True if a normalised argument tuple of *count* values fits.

        Without ``*args`` a shorter tuple fits when the omitted trailing
        parameters all have defaults; see :meth:`with_defaults`.
        """

        if self.is_variadic:
            return count >= self.arity
        return self.required_arity <= count <= self.arity

    def with_defaults(self, arguments: Sequence[Any]) -> tuple[Any, ...]:
        """Pad a short argument tuple with the omitted parameters' defaults."""

        values = list(arguments)
        if self.is_variadic:
            return tuple(values)
        for parameter in self.parameters[len(values):]:
            if parameter.kind is inspect.Parameter.VAR_KEYWORD:
                values.append({})
            elif parameter.has_default:
                values.append(parameter.default)
            else:
                raise TypeError(f"{self} is missing a value for {parameter.name}")
        return tuple(values)

    def bind(
        self,
        args: Sequence[Any] | None,
        kwargs: Mapping[str, Any] | None = None,
        *,
        strict: bool = True,
    ) -> tuple[Any, ...]:
        """Normalise call arguments into one ordered tuple.

        Keyword arguments land in their declared positional slot, defaults
        are applied, ``*args`` are flattened in place and ``**kwargs`` are
        collected into a trailing dict. Raises :class:`TypeError` when the
        arguments do not fit the declared signature and *strict* is set.
        """

        args = tuple(args or ())
        kwargs = dict(kwargs or {})
        if not strict:
            return args + ((kwargs,) if kwargs else ())

        bound = self.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        normalised: list[Any] = []
        for parameter in self.parameters:
            value = bound.arguments[parameter.name]
            if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
                normalised.extend(value)
            elif parameter.kind is inspect.Parameter.VAR_KEYWORD:
                normalised.append(dict(value))
            else:
                normalised.append(value)
        return tuple(normalised)

    def __str__(self) -> str:
        return f"{self.name}{self.signature}"


__all__ = [
    "Char",
    "NUMERIC_TYPES",
    "OperationDescriptor",
    "ParameterDescriptor",
    "ReturnKind",
    "classify_return",
    "resolve_annotation",
]
