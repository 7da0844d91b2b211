"""
Schema IR domain.

This module defines the tagged, immutable schema nodes that every other part of
the package consumes. Each node class is a frozen dataclass tagged with a kind;
subclassing SchemaNode with a new kind string is how user kinds are declared.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeAlias, dataclass_transform

from structype.kinds import Kind

# =============================================================================
# Record Key Patterns
# =============================================================================

PATTERN_NUMBER = "^(0|[1-9][0-9]*)$"
PATTERN_STRING = "^.*$"

LiteralValue: TypeAlias = str | int | float | bool

# =============================================================================
# Schema Node Base
# =============================================================================


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class SchemaNode:
    """Base for schema nodes. Subclasses are tagged with a kind."""

    _kind: ClassVar[Kind | str]
    _registry: ClassVar[dict[str, type[SchemaNode]]] = {}

    id: str | None = field(default=None, kw_only=True)
    optional: bool = field(default=False, kw_only=True)

    def __init_subclass__(cls, kind: Kind | str | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        dataclass(frozen=True)(cls)

        cls._kind = kind if kind is not None else cls.__name__.removesuffix("Type")
        key = str(cls._kind)

        if (existing := SchemaNode._registry.get(key)) and existing is not cls:
            raise ValueError(
                f"Kind '{key}' already registered to {existing}. "
                f"Choose a different kind."
            )

        SchemaNode._registry[key] = cls

    @property
    def kind(self) -> Kind | str:
        return self._kind

    @classmethod
    def class_for(cls, kind: Kind | str) -> type[SchemaNode] | None:
        """Look up the node class declared for a kind."""
        return cls._registry.get(str(kind))

    def _freeze(self, name: str) -> None:
        # Accept any sequence from callers but store tuples
        value = getattr(self, name)
        if not isinstance(value, tuple):
            object.__setattr__(self, name, tuple(value))


# =============================================================================
# Top, Bottom and Unit Types
# =============================================================================


class AnyType(SchemaNode, kind=Kind.ANY):
    """Accepts every value; every schema extends it."""


class UnknownType(SchemaNode, kind=Kind.UNKNOWN):
    """Accepts every value, but extends almost nothing."""


class NeverType(SchemaNode, kind=Kind.NEVER):
    """Accepts no value; extends every schema."""


class VoidType(SchemaNode, kind=Kind.VOID):
    pass


class NullType(SchemaNode, kind=Kind.NULL):
    pass


class UndefinedType(SchemaNode, kind=Kind.UNDEFINED):
    pass


# =============================================================================
# Primitive Types
# =============================================================================


class BooleanType(SchemaNode, kind=Kind.BOOLEAN):
    pass


class NumberType(SchemaNode, kind=Kind.NUMBER):
    pass


class IntegerType(SchemaNode, kind=Kind.INTEGER):
    """Integral numbers; a narrower subset of NumberType."""


class BigIntType(SchemaNode, kind=Kind.BIGINT):
    pass


class StringType(SchemaNode, kind=Kind.STRING):
    pass


class SymbolType(SchemaNode, kind=Kind.SYMBOL):
    pass


class DateType(SchemaNode, kind=Kind.DATE):
    pass


class Uint8ArrayType(SchemaNode, kind=Kind.UINT8ARRAY):
    pass


class LiteralType(SchemaNode, kind=Kind.LITERAL):
    """
    A single constant value.

    Examples:
        LiteralType("red")
        LiteralType(10)
        LiteralType(True)
    """

    value: LiteralValue

    def __post_init__(self):
        if not isinstance(self.value, str | int | float | bool):
            raise TypeError(
                f"Literal values must be str, int, float or bool, got {type(self.value)}"
            )


# =============================================================================
# Callable and Deferred Types
# =============================================================================


class FunctionType(SchemaNode, kind=Kind.FUNCTION):
    """
    Callable with positional parameters and a return schema.

    Example: (x: string) => number → FunctionType((StringType(),), NumberType())
    """

    parameters: tuple[SchemaNode, ...]
    returns: SchemaNode

    def __post_init__(self):
        self._freeze("parameters")


class ConstructorType(SchemaNode, kind=Kind.CONSTRUCTOR):
    parameters: tuple[SchemaNode, ...]
    returns: SchemaNode

    def __post_init__(self):
        self._freeze("parameters")


class PromiseType(SchemaNode, kind=Kind.PROMISE):
    item: SchemaNode


class TemplateLiteralType(SchemaNode, kind=Kind.TEMPLATE_LITERAL):
    """
    String built by concatenating fixed text and schema-described parts.

    Examples:
        TemplateLiteralType(("on", UnionType((LiteralType("Click"), LiteralType("Key")))))
        → "onClick" | "onKey"
        TemplateLiteralType(("id-", NumberType())) → any string
    """

    parts: tuple[str | SchemaNode, ...]

    def __post_init__(self):
        self._freeze("parts")


# =============================================================================
# Container Types
# =============================================================================


class ArrayType(SchemaNode, kind=Kind.ARRAY):
    """
    Indefinite-length homogeneous array.

    Example: string[] → ArrayType(StringType())
    """

    items: SchemaNode


class TupleType(SchemaNode, kind=Kind.TUPLE):
    """
    Fixed-length heterogeneous tuple. An empty items tuple is the zero-length tuple.

    Example: [string, number] → TupleType((StringType(), NumberType()))
    """

    items: tuple[SchemaNode, ...] = ()

    def __post_init__(self):
        self._freeze("items")


class ObjectType(SchemaNode, kind=Kind.OBJECT):
    """
    Object with named properties.

    Properties marked ``optional=True`` may be absent. ``additional_properties``
    is None when unspecified, a bool for an open/closed policy, or a schema
    every undeclared property must satisfy.
    """

    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    additional_properties: bool | SchemaNode | None = None

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(name for name, prop in self.properties.items() if not prop.optional)


class RecordType(SchemaNode, kind=Kind.RECORD):
    """
    Object keyed by a single implicit pattern with one value schema.

    Example: Record<number, string> → RecordType(NumberType(), StringType())
    """

    key: SchemaNode
    value: SchemaNode

    @property
    def pattern(self) -> str:
        if self.key.kind in (Kind.NUMBER, Kind.INTEGER):
            return PATTERN_NUMBER
        return PATTERN_STRING

    @property
    def numeric_keys(self) -> bool:
        return self.pattern == PATTERN_NUMBER


# =============================================================================
# Combinators
# =============================================================================


class UnionType(SchemaNode, kind=Kind.UNION):
    """
    Union of variants.

    Example: string | number → UnionType((StringType(), NumberType()))
    """

    variants: tuple[SchemaNode, ...]

    def __post_init__(self):
        self._freeze("variants")


class IntersectType(SchemaNode, kind=Kind.INTERSECT):
    """
    Intersection of variants.

    Example: A & B → IntersectType((A, B))
    """

    variants: tuple[SchemaNode, ...]

    def __post_init__(self):
        self._freeze("variants")


# =============================================================================
# References
# =============================================================================


class RefType(SchemaNode, kind=Kind.REF):
    """
    Reference to a schema carrying ``id == target`` somewhere in scope.

    Example: RefType("Vector") resolves to NumberType(id="Vector") when in scope
    """

    target: str


class ThisType(SchemaNode, kind=Kind.THIS):
    """Self reference to an enclosing recursive schema."""

    target: str


def ref(schema: SchemaNode, **options: Any) -> RefType:
    """Create a RefType pointing at an identified schema."""
    if schema.id is None:
        raise ValueError("Reference target schema must specify an id")
    return RefType(schema.id, **options)
