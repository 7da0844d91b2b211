"""structype - Structural subtype checks over a runtime schema IR."""

from structype.config import ExtendsSettings
from structype.errors import (
    DereferenceError,
    StructypeError,
    UnknownTypeError,
)
from structype.extends import (
    ExtendsEngine,
    # Extends
    extends,
)
from structype.kinds import Kind
from structype.references import (
    EMPTY_SCOPE,
    Scope,
    dereference,
    push,
    resolve,
)
from structype.registry import KindRecord, TypeRegistry
from structype.serialization import (
    from_dict,
    from_json,
    # Serialization
    to_dict,
    to_json,
)
from structype.templates import resolve_template
from structype.types import (
    AnyType,
    ArrayType,
    BigIntType,
    BooleanType,
    ConstructorType,
    DateType,
    FunctionType,
    IntegerType,
    IntersectType,
    LiteralType,
    NeverType,
    NullType,
    NumberType,
    ObjectType,
    PromiseType,
    RecordType,
    RefType,
    # Schema IR
    SchemaNode,
    StringType,
    SymbolType,
    TemplateLiteralType,
    ThisType,
    TupleType,
    Uint8ArrayType,
    UndefinedType,
    UnionType,
    UnknownType,
    VoidType,
    ref,
)
from structype.visitor import SchemaVisitor

__all__ = [
    "EMPTY_SCOPE",
    "AnyType",
    "ArrayType",
    "BigIntType",
    "BooleanType",
    "ConstructorType",
    "DateType",
    "DereferenceError",
    "ExtendsEngine",
    "ExtendsSettings",
    "FunctionType",
    "IntegerType",
    "IntersectType",
    "Kind",
    "KindRecord",
    "LiteralType",
    "NeverType",
    "NullType",
    "NumberType",
    "ObjectType",
    "PromiseType",
    "RecordType",
    "RefType",
    # Schema IR
    "SchemaNode",
    "SchemaVisitor",
    "Scope",
    "StringType",
    "StructypeError",
    "SymbolType",
    "TemplateLiteralType",
    "ThisType",
    "TupleType",
    "TypeRegistry",
    "Uint8ArrayType",
    "UndefinedType",
    "UnionType",
    "UnknownType",
    "UnknownTypeError",
    "VoidType",
    "dereference",
    # Extends
    "extends",
    "from_dict",
    "from_json",
    "push",
    "ref",
    "resolve",
    "resolve_template",
    # Serialization
    "to_dict",
    "to_json",
]
