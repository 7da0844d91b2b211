"""
Kind domain for the schema IR.

Every schema node carries a kind tag. Built-in kinds form a closed enumeration
so dispatch over them can be exhaustive; anything else is a user kind and is
only understood when registered with the TypeRegistry.
"""

from __future__ import annotations

from enum import Enum


class Kind(str, Enum):
    """Built-in schema kinds."""

    ANY = "Any"
    UNKNOWN = "Unknown"
    NEVER = "Never"
    VOID = "Void"
    NULL = "Null"
    UNDEFINED = "Undefined"
    BOOLEAN = "Boolean"
    NUMBER = "Number"
    INTEGER = "Integer"
    BIGINT = "BigInt"
    STRING = "String"
    SYMBOL = "Symbol"
    LITERAL = "Literal"
    DATE = "Date"
    UINT8ARRAY = "Uint8Array"
    FUNCTION = "Function"
    CONSTRUCTOR = "Constructor"
    PROMISE = "Promise"
    TEMPLATE_LITERAL = "TemplateLiteral"
    ARRAY = "Array"
    TUPLE = "Tuple"
    OBJECT = "Object"
    RECORD = "Record"
    UNION = "Union"
    INTERSECT = "Intersect"
    REF = "Ref"
    THIS = "This"

    def __str__(self) -> str:
        return self.value


BUILTIN_KINDS: frozenset[str] = frozenset(k.value for k in Kind)


def is_builtin(kind: Kind | str) -> bool:
    """Return True when kind names one of the built-in kinds."""
    return isinstance(kind, Kind) or kind in BUILTIN_KINDS
