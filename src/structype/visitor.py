"""
Schema traversal substrate.

SchemaVisitor maps a node's kind to a ``visit_<kind>`` method through a single
match statement. Every traversal over the IR (extends comparison,
serialization) subclasses it, so they all enumerate kinds the same way.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from structype.errors import UnknownTypeError
from structype.kinds import Kind
from structype.references import Scope, push, resolve
from structype.registry import TypeRegistry
from structype.types import SchemaNode


def ensure_known(node: SchemaNode) -> None:
    """Raise UnknownTypeError unless node's kind is built in or registered."""
    kind = node.kind
    if isinstance(kind, Kind):
        return
    if not TypeRegistry.has(kind):
        raise UnknownTypeError(node, kind)


R = TypeVar("R")


class SchemaVisitor(Generic[R]):
    """
    Base class for per-kind schema traversals.

    Type parameters:
    - R: Result type of each visit

    Subclasses override the ``visit_<kind>`` methods they support. Extra
    positional arguments passed to ``visit`` are forwarded to the handler.
    """

    def visit(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        """Enter node: extend the scope with its id and dispatch on its kind."""
        return self.dispatch(node, push(scope, node), *args)

    def dispatch(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        match node.kind:
            case Kind.ANY:
                return self.visit_any(node, scope, *args)
            case Kind.UNKNOWN:
                return self.visit_unknown(node, scope, *args)
            case Kind.NEVER:
                return self.visit_never(node, scope, *args)
            case Kind.VOID:
                return self.visit_void(node, scope, *args)
            case Kind.NULL:
                return self.visit_null(node, scope, *args)
            case Kind.UNDEFINED:
                return self.visit_undefined(node, scope, *args)
            case Kind.BOOLEAN:
                return self.visit_boolean(node, scope, *args)
            case Kind.NUMBER:
                return self.visit_number(node, scope, *args)
            case Kind.INTEGER:
                return self.visit_integer(node, scope, *args)
            case Kind.BIGINT:
                return self.visit_bigint(node, scope, *args)
            case Kind.STRING:
                return self.visit_string(node, scope, *args)
            case Kind.SYMBOL:
                return self.visit_symbol(node, scope, *args)
            case Kind.LITERAL:
                return self.visit_literal(node, scope, *args)
            case Kind.DATE:
                return self.visit_date(node, scope, *args)
            case Kind.UINT8ARRAY:
                return self.visit_uint8array(node, scope, *args)
            case Kind.FUNCTION:
                return self.visit_function(node, scope, *args)
            case Kind.CONSTRUCTOR:
                return self.visit_constructor(node, scope, *args)
            case Kind.PROMISE:
                return self.visit_promise(node, scope, *args)
            case Kind.TEMPLATE_LITERAL:
                return self.visit_template_literal(node, scope, *args)
            case Kind.ARRAY:
                return self.visit_array(node, scope, *args)
            case Kind.TUPLE:
                return self.visit_tuple(node, scope, *args)
            case Kind.OBJECT:
                return self.visit_object(node, scope, *args)
            case Kind.RECORD:
                return self.visit_record(node, scope, *args)
            case Kind.UNION:
                return self.visit_union(node, scope, *args)
            case Kind.INTERSECT:
                return self.visit_intersect(node, scope, *args)
            case Kind.REF:
                return self.visit_ref(node, scope, *args)
            case Kind.THIS:
                return self.visit_this(node, scope, *args)
            case _:
                ensure_known(node)
                return self.visit_user_defined(node, scope, *args)

    def generic_visit(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        raise NotImplementedError(
            f"{type(self).__name__} does not handle kind '{node.kind}'"
        )

    # References resolve and continue into the target by default

    def visit_ref(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.visit(resolve(node, scope), scope, *args)

    def visit_this(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.visit(resolve(node, scope), scope, *args)

    # Everything else must be provided by the subclass

    def visit_any(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_unknown(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_never(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_void(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_null(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_undefined(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_boolean(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_number(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_integer(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_bigint(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_string(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_symbol(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_literal(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_date(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_uint8array(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_function(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_constructor(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_promise(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_template_literal(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_array(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_tuple(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_object(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_record(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_union(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_intersect(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)

    def visit_user_defined(self, node: SchemaNode, scope: Scope, *args: Any) -> R:
        return self.generic_visit(node, scope, *args)
