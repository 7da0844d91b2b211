"""
Serialization of schema nodes to JSON-Schema flavoured dicts and back.

Every dict carries a ``kind`` tag naming the node class; the remaining keys
follow JSON Schema vocabulary where one exists (``$id``, ``$ref``, ``anyOf``,
``allOf``, ``properties``, ``required``, ``patternProperties``). References are
emitted as ``$ref`` and never expanded.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from structype.errors import UnknownTypeError
from structype.kinds import BUILTIN_KINDS, Kind, is_builtin
from structype.references import EMPTY_SCOPE, Scope
from structype.registry import TypeRegistry
from structype.types import (
    PATTERN_NUMBER,
    ArrayType,
    ConstructorType,
    FunctionType,
    IntersectType,
    LiteralType,
    NumberType,
    ObjectType,
    PromiseType,
    RecordType,
    RefType,
    SchemaNode,
    StringType,
    TemplateLiteralType,
    ThisType,
    TupleType,
    UnionType,
)
from structype.visitor import SchemaVisitor

# JSON Schema "type" for kinds that need nothing beyond it
_SIMPLE_TYPES: dict[Kind, str | None] = {
    Kind.ANY: None,
    Kind.UNKNOWN: None,
    Kind.VOID: "void",
    Kind.NULL: "null",
    Kind.UNDEFINED: "undefined",
    Kind.BOOLEAN: "boolean",
    Kind.NUMBER: "number",
    Kind.INTEGER: "integer",
    Kind.BIGINT: "bigint",
    Kind.STRING: "string",
    Kind.SYMBOL: "symbol",
    Kind.DATE: "Date",
    Kind.UINT8ARRAY: "Uint8Array",
}

_LITERAL_TYPES: dict[type, str] = {bool: "boolean", int: "number", float: "number", str: "string"}


class _Serializer(SchemaVisitor[dict[str, Any]]):
    """Render nodes as dicts. Scope is threaded through but never resolved."""

    def visit(self, node: SchemaNode, scope: Scope, *args: Any) -> dict[str, Any]:
        body = super().visit(node, scope, *args)
        result: dict[str, Any] = {"kind": str(node.kind)}
        if node.id is not None:
            result["$id"] = node.id
        result.update(body)
        return result

    def _simple(self, node, scope):
        type_name = _SIMPLE_TYPES[node.kind]
        return {} if type_name is None else {"type": type_name}

    visit_any = visit_unknown = visit_void = visit_null = visit_undefined = _simple
    visit_boolean = visit_number = visit_integer = visit_bigint = _simple
    visit_string = visit_symbol = visit_date = visit_uint8array = _simple

    def visit_never(self, node, scope):
        return {"not": {}}

    def visit_literal(self, node, scope):
        return {"const": node.value, "type": _LITERAL_TYPES[type(node.value)]}

    def _callable(self, node, scope):
        return {
            "type": str(node.kind),
            "parameters": [self.visit(p, scope) for p in node.parameters],
            "returns": self.visit(node.returns, scope),
        }

    visit_function = visit_constructor = _callable

    def visit_promise(self, node, scope):
        return {"type": "Promise", "item": self.visit(node.item, scope)}

    def visit_template_literal(self, node, scope):
        parts = [p if isinstance(p, str) else self.visit(p, scope) for p in node.parts]
        return {"type": "string", "parts": parts}

    def visit_array(self, node, scope):
        return {"type": "array", "items": self.visit(node.items, scope)}

    def visit_tuple(self, node, scope):
        count = len(node.items)
        result: dict[str, Any] = {"type": "array", "minItems": count, "maxItems": count}
        if count:
            result["items"] = [self.visit(item, scope) for item in node.items]
        return result

    def visit_object(self, node, scope):
        result: dict[str, Any] = {
            "type": "object",
            "properties": {name: self.visit(prop, scope) for name, prop in node.properties.items()},
        }
        if required := list(node.required):
            result["required"] = required
        extra = node.additional_properties
        if isinstance(extra, SchemaNode):
            result["additionalProperties"] = self.visit(extra, scope)
        elif extra is not None:
            result["additionalProperties"] = extra
        return result

    def visit_record(self, node, scope):
        return {
            "type": "object",
            "key": self.visit(node.key, scope),
            "patternProperties": {node.pattern: self.visit(node.value, scope)},
        }

    def visit_union(self, node, scope):
        return {"anyOf": [self.visit(v, scope) for v in node.variants]}

    def visit_intersect(self, node, scope):
        return {"allOf": [self.visit(v, scope) for v in node.variants]}

    def visit_ref(self, node, scope):
        return {"$ref": node.target}

    visit_this = visit_ref

    def visit_user_defined(self, node, scope):
        result: dict[str, Any] = {}
        for f in dataclasses.fields(node):
            if f.name in ("id", "optional"):
                continue
            result[f.name] = self._field(getattr(node, f.name), scope)
        return result

    def _field(self, value, scope):
        if isinstance(value, SchemaNode):
            return self.visit(value, scope)
        if isinstance(value, tuple | list):
            return [self._field(item, scope) for item in value]
        return value


def to_dict(node: SchemaNode, scope: Scope = EMPTY_SCOPE) -> dict[str, Any]:
    """Serialize a schema node to a JSON-compatible dict."""
    return _Serializer().visit(node, scope)


def to_json(node: SchemaNode, **kwargs: Any) -> str:
    """Serialize a schema node to a JSON string."""
    return json.dumps(to_dict(node), **kwargs)


# =============================================================================
# Deserialization
# =============================================================================


def _record_key(data: dict[str, Any], pattern: str) -> SchemaNode:
    if "key" in data:
        return from_dict(data["key"])
    return NumberType() if pattern == PATTERN_NUMBER else StringType()


def _field(value: Any) -> Any:
    if isinstance(value, dict) and "kind" in value:
        return from_dict(value)
    if isinstance(value, list):
        return tuple(_field(item) for item in value)
    return value


def from_dict(data: dict[str, Any], *, optional: bool = False) -> SchemaNode:
    """Rebuild a schema node from a dict produced by to_dict."""
    if "kind" not in data:
        raise ValueError(f"Missing 'kind' in schema data: {data!r}")

    kind = data["kind"]
    if kind in BUILTIN_KINDS:
        kind = Kind(kind)
    cls = SchemaNode.class_for(kind)
    options: dict[str, Any] = {"id": data.get("$id"), "optional": optional}

    match kind:
        case Kind.LITERAL:
            return LiteralType(data["const"], **options)
        case Kind.FUNCTION | Kind.CONSTRUCTOR:
            node_cls = FunctionType if kind == Kind.FUNCTION else ConstructorType
            return node_cls(
                tuple(from_dict(p) for p in data["parameters"]),
                from_dict(data["returns"]),
                **options,
            )
        case Kind.PROMISE:
            return PromiseType(from_dict(data["item"]), **options)
        case Kind.TEMPLATE_LITERAL:
            parts = tuple(p if isinstance(p, str) else from_dict(p) for p in data["parts"])
            return TemplateLiteralType(parts, **options)
        case Kind.ARRAY:
            return ArrayType(from_dict(data["items"]), **options)
        case Kind.TUPLE:
            return TupleType(tuple(from_dict(i) for i in data.get("items", ())), **options)
        case Kind.OBJECT:
            required = set(data.get("required", ()))
            properties = {
                name: from_dict(prop, optional=name not in required)
                for name, prop in data.get("properties", {}).items()
            }
            extra = data.get("additionalProperties")
            if isinstance(extra, dict):
                extra = from_dict(extra)
            return ObjectType(properties, extra, **options)
        case Kind.RECORD:
            ((pattern, value),) = data["patternProperties"].items()
            return RecordType(_record_key(data, pattern), from_dict(value), **options)
        case Kind.UNION:
            return UnionType(tuple(from_dict(v) for v in data["anyOf"]), **options)
        case Kind.INTERSECT:
            return IntersectType(tuple(from_dict(v) for v in data["allOf"]), **options)
        case Kind.REF:
            return RefType(data["$ref"], **options)
        case Kind.THIS:
            return ThisType(data["$ref"], **options)

    if cls is None or not (is_builtin(kind) or TypeRegistry.has(kind)):
        raise UnknownTypeError(data, kind)
    if kind in _SIMPLE_TYPES or kind == Kind.NEVER:
        return cls(**options)

    # User kinds: remaining keys are dataclass fields
    values = {key: _field(value) for key, value in data.items() if key not in ("kind", "$id")}
    return cls(**values, **options)


def from_json(text: str) -> SchemaNode:
    """Deserialize a schema node from a JSON string."""
    return from_dict(json.loads(text))

