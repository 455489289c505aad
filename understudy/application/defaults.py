"""Default results for calls that match no stub.

The default is a function of the operation's declared return kind only, so
repeated unconfigured calls always produce the same value. Every entry is an
immutable singleton; a fresh object is never constructed for a reference
return type.
"""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from types import MappingProxyType
from typing import Any, Mapping

from understudy.domain.operations import (
    OperationDescriptor,
    ReturnKind,
    resolve_annotation,
)

NUMERIC_ZEROS: Mapping[type, Any] = MappingProxyType(
    {
        int: 0,
        float: 0.0,
        complex: 0j,
        Decimal: Decimal(0),
        Fraction: Fraction(0),
    }
)

ZERO_CHARACTER = "\x00"

KIND_DEFAULTS: Mapping[ReturnKind, Any] = MappingProxyType(
    {
        ReturnKind.NOTHING: None,
        ReturnKind.TRUTH: False,
        ReturnKind.CHARACTER: ZERO_CHARACTER,
        ReturnKind.REFERENCE: None,
    }
)


def default_for(operation: OperationDescriptor) -> Any:
    """Return the value an unconfigured call to *operation* produces."""

    if operation.return_kind is ReturnKind.NUMERIC:
        return NUMERIC_ZEROS[resolve_annotation(operation.return_type)]
    return KIND_DEFAULTS[operation.return_kind]


__all__ = ["KIND_DEFAULTS", "NUMERIC_ZEROS", "ZERO_CHARACTER", "default_for"]
