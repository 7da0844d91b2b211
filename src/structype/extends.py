"""
Structural extends engine.

Answers "does every value described by the left schema also satisfy the right
schema?" for two schema nodes, each with its own reference scope. The relation
is one-directional: left extends right says nothing about right extends left.

Evaluation per pair:

1. Dereference Ref/This and expand TemplateLiteral on both sides.
2. Re-entering a pair that is still being compared returns the configured
   cycle result; finished pairs are memoised for the rest of the query.
3. Absorbing cases, then union/intersect distribution.
4. Kind-paired rules dispatched on the left kind. Anything without a rule is
   False.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Sequence
from typing import TypeAlias

from structype.config import ExtendsSettings
from structype.kinds import Kind
from structype.references import EMPTY_SCOPE, Scope, dereference
from structype.registry import TypeRegistry
from structype.templates import resolve_template
from structype.types import (
    AnyType,
    FunctionType,
    NumberType,
    ObjectType,
    RecordType,
    SchemaNode,
    StringType,
    UndefinedType,
    UnionType,
)
from structype.visitor import SchemaVisitor, ensure_known

logger = logging.getLogger(__name__)

PairKey: TypeAlias = tuple[int, int, int, int]

_NO_ASSUMPTION = sys.maxsize

# =============================================================================
# Value Domain Guards
# =============================================================================


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_integer(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _same_literal(left: object, right: object) -> bool:
    # No coercion: True == 1 and 1 == 1.0 in Python but they are distinct literals
    return type(left) is type(right) and (left is right or left == right)


# =============================================================================
# Engine
# =============================================================================


class ExtendsEngine(SchemaVisitor[bool]):
    """
    Structural subtype comparison over the schema IR.

    One engine may answer many queries; memoised results are kept only for the
    duration of the outermost ``extends`` call. Results that depended on the
    assumed answer of an enclosing cycle are not memoised.

    Query state lives on the instance, so an engine must not be shared between
    threads. The module-level ``extends`` builds a fresh engine per call.
    """

    def __init__(self, settings: ExtendsSettings | None = None):
        self.settings = settings if settings is not None else ExtendsSettings()
        self._results: dict[PairKey, bool] = {}
        # Pairs being compared, mapped to their nesting depth
        self._active: dict[PairKey, int] = {}
        # Shallowest active pair whose assumed answer the current comparison used
        self._assumed = _NO_ASSUMPTION
        # Keep compared nodes and scopes alive so their ids stay unique in the keys
        self._pinned: list[tuple[SchemaNode, SchemaNode, Scope, Scope]] = []

    def extends(
        self,
        left: SchemaNode,
        right: SchemaNode,
        left_scope: Sequence[SchemaNode] = EMPTY_SCOPE,
        right_scope: Sequence[SchemaNode] = EMPTY_SCOPE,
    ) -> bool:
        """Return True when left extends right."""
        outermost = not self._active
        if outermost:
            self._reset()
        try:
            return self.visit(left, tuple(left_scope), right, tuple(right_scope))
        finally:
            if outermost:
                self._reset()

    def _reset(self) -> None:
        self._results.clear()
        self._active.clear()
        self._pinned.clear()
        self._assumed = _NO_ASSUMPTION

    # -------------------------------------------------------------------------
    # Entry
    # -------------------------------------------------------------------------

    def visit(
        self,
        left: SchemaNode,
        left_scope: Scope,
        right: SchemaNode,
        right_scope: Scope,
    ) -> bool:
        left, left_scope = self._prepare(left, left_scope)
        right, right_scope = self._prepare(right, right_scope)

        key = (id(left), id(right), id(left_scope), id(right_scope))
        if key in self._results:
            return self._results[key]
        if key in self._active:
            logger.debug(
                "Cycle re-entered on %s extends %s, assuming %s",
                left.kind, right.kind, self.settings.cycle_result,
            )
            self._assumed = min(self._assumed, self._active[key])
            return self.settings.cycle_result

        depth = len(self._active)
        outer_assumed = self._assumed
        self._assumed = _NO_ASSUMPTION
        self._active[key] = depth
        self._pinned.append((left, right, left_scope, right_scope))
        try:
            result = self._compare(left, left_scope, right, right_scope)
        finally:
            del self._active[key]
            assumed = self._assumed
            # Assumptions on this pair are discharged here; shallower ones propagate
            self._assumed = min(outer_assumed, assumed) if assumed < depth else outer_assumed

        # A result that relied on an enclosing pair's assumed answer is provisional
        if self.settings.memoize and assumed >= depth:
            self._results[key] = result
        if self.settings.trace:
            logger.debug("%s extends %s -> %s", left.kind, right.kind, result)
        return result

    def _prepare(self, node: SchemaNode, scope: Scope) -> tuple[SchemaNode, Scope]:
        node, scope = dereference(node, scope)
        if node.kind == Kind.TEMPLATE_LITERAL:
            node = resolve_template(node)
        ensure_known(node)
        return node, scope

    def _compare(
        self,
        left: SchemaNode,
        left_scope: Scope,
        right: SchemaNode,
        right_scope: Scope,
    ) -> bool:
        if right.kind in (Kind.ANY, Kind.UNKNOWN):
            return True
        if left.kind == Kind.NEVER:
            return True
        if right.kind == Kind.NEVER:
            return False
        if left.kind == Kind.ANY:
            return self.settings.any_left_result

        # A union is assignable only when all of its members are
        if left.kind == Kind.UNION:
            return all(self.visit(v, left_scope, right, right_scope) for v in left.variants)
        if right.kind == Kind.INTERSECT:
            return all(self.visit(left, left_scope, v, right_scope) for v in right.variants)
        if right.kind == Kind.UNION:
            if any(self.visit(left, left_scope, v, right_scope) for v in right.variants):
                return True
            # A part of an intersection may match the union as a whole
            if left.kind != Kind.INTERSECT:
                return False
        if left.kind == Kind.INTERSECT:
            return any(self.visit(v, left_scope, right, right_scope) for v in left.variants)

        return self.dispatch(left, left_scope, right, right_scope)

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def _primitive(
        self,
        left: SchemaNode,
        left_scope: Scope,
        right: SchemaNode,
        right_scope: Scope,
        *accepted: Kind,
    ) -> bool:
        match right.kind:
            case Kind.OBJECT:
                return self._object_right(left, left_scope, right, right_scope)
            case Kind.RECORD:
                return self._record_right(left, left_scope, right, right_scope)
            case kind:
                return kind in accepted

    def visit_unknown(self, left, left_scope, right, right_scope) -> bool:
        # Absorbing and distributive cases were handled before dispatch
        return False

    def visit_void(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.VOID)

    def visit_null(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.NULL)

    def visit_undefined(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.UNDEFINED, Kind.VOID)

    def visit_boolean(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.BOOLEAN)

    def visit_number(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.NUMBER)

    def visit_integer(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.INTEGER, Kind.NUMBER)

    def visit_bigint(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.BIGINT)

    def visit_string(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.STRING)

    def visit_symbol(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.SYMBOL)

    def visit_date(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.DATE)

    def visit_uint8array(self, left, left_scope, right, right_scope) -> bool:
        return self._primitive(left, left_scope, right, right_scope, Kind.UINT8ARRAY)

    def visit_literal(self, left, left_scope, right, right_scope) -> bool:
        value = left.value
        match right.kind:
            case Kind.LITERAL:
                return _same_literal(value, right.value)
            case Kind.STRING:
                return isinstance(value, str)
            case Kind.NUMBER:
                return _is_number(value)
            case Kind.INTEGER:
                return _is_integer(value)
            case Kind.BOOLEAN:
                return isinstance(value, bool)
            case Kind.OBJECT:
                return self._object_right(left, left_scope, right, right_scope)
            case Kind.RECORD:
                return self._record_right(left, left_scope, right, right_scope)
            case _:
                return False

    # -------------------------------------------------------------------------
    # Callables and promises
    # -------------------------------------------------------------------------

    def _callable(self, left, left_scope, right, right_scope) -> bool:
        if right.kind == Kind.OBJECT:
            return self._object_right(left, left_scope, right, right_scope)
        if right.kind != left.kind:
            return False
        if len(left.parameters) > len(right.parameters):
            return False
        # Parameters are contravariant
        for left_param, right_param in zip(left.parameters, right.parameters):
            if not self.visit(right_param, right_scope, left_param, left_scope):
                return False
        return self.visit(left.returns, left_scope, right.returns, right_scope)

    def visit_function(self, left, left_scope, right, right_scope) -> bool:
        return self._callable(left, left_scope, right, right_scope)

    def visit_constructor(self, left, left_scope, right, right_scope) -> bool:
        return self._callable(left, left_scope, right, right_scope)

    def visit_promise(self, left, left_scope, right, right_scope) -> bool:
        match right.kind:
            case Kind.PROMISE:
                return self.visit(left.item, left_scope, right.item, right_scope)
            case Kind.OBJECT:
                return self._object_right(left, left_scope, right, right_scope)
            case _:
                return False

    # -------------------------------------------------------------------------
    # Arrays and tuples
    # -------------------------------------------------------------------------

    def visit_array(self, left, left_scope, right, right_scope) -> bool:
        match right.kind:
            case Kind.ARRAY:
                return self.visit(left.items, left_scope, right.items, right_scope)
            case Kind.OBJECT:
                return self._is_array_like(right, right_scope)
            case Kind.RECORD:
                return right.numeric_keys and self.visit(
                    left.items, left_scope, right.value, right_scope
                )
            case _:
                # An indefinite-length array is never a fixed tuple
                return False

    def visit_tuple(self, left, left_scope, right, right_scope) -> bool:
        match right.kind:
            case Kind.TUPLE:
                if len(left.items) != len(right.items):
                    return False
                return all(
                    self.visit(l, left_scope, r, right_scope)
                    for l, r in zip(left.items, right.items)
                )
            case Kind.ARRAY:
                return all(self.visit(item, left_scope, right.items, right_scope) for item in left.items)
            case Kind.OBJECT:
                return self._is_array_like(right, right_scope)
            case Kind.RECORD:
                return right.numeric_keys and all(
                    self.visit(item, left_scope, right.value, right_scope) for item in left.items
                )
            case _:
                return False

    # -------------------------------------------------------------------------
    # Objects and records
    # -------------------------------------------------------------------------

    def _property(self, left, left_scope, right, right_scope) -> bool:
        if not self.visit(left, left_scope, right, right_scope):
            return False
        return not (left.optional and not right.optional)

    def visit_object(self, left, left_scope, right, right_scope) -> bool:
        match right.kind:
            case Kind.OBJECT:
                return self._object_object(left, left_scope, right, right_scope)
            case Kind.RECORD:
                return self._record_right(left, left_scope, right, right_scope)
            case _:
                return False

    def _object_object(
        self,
        left: ObjectType,
        left_scope: Scope,
        right: ObjectType,
        right_scope: Scope,
    ) -> bool:
        for name, prop in right.properties.items():
            if name not in left.properties:
                if not prop.optional:
                    return False
                continue
            if not self._property(left.properties[name], left_scope, prop, right_scope):
                return False

        extra = right.additional_properties
        if isinstance(extra, SchemaNode):
            for name, prop in left.properties.items():
                if name not in right.properties and not self.visit(
                    prop, left_scope, extra, right_scope
                ):
                    return False
        return True

    def visit_record(self, left, left_scope, right, right_scope) -> bool:
        match right.kind:
            case Kind.RECORD:
                if not self._record_keys_compatible(left, right):
                    return False
                return self.visit(left.value, left_scope, right.value, right_scope)
            case Kind.OBJECT:
                return self._object_right(left, left_scope, right, right_scope)
            case _:
                return False

    @staticmethod
    def _record_keys_compatible(left: RecordType, right: RecordType) -> bool:
        # A string index signature also covers numeric keys
        return left.pattern == right.pattern or not left.numeric_keys

    def _record_right(
        self,
        left: SchemaNode,
        left_scope: Scope,
        right: RecordType,
        right_scope: Scope,
    ) -> bool:
        """Non-record left side against a record."""
        value = right.value
        match left.kind:
            case Kind.STRING | Kind.LITERAL if right.numeric_keys:
                # Indexing a string by position yields strings
                if left.kind == Kind.LITERAL and not isinstance(left.value, str):
                    return False
                return self.visit(StringType(), left_scope, value, right_scope)
            case Kind.UINT8ARRAY if right.numeric_keys:
                return self.visit(NumberType(), left_scope, value, right_scope)
            case Kind.OBJECT:
                pattern = re.compile(right.pattern)
                for name, prop in left.properties.items():
                    if pattern.fullmatch(name) and not self.visit(
                        prop, left_scope, value, right_scope
                    ):
                        return False
                extra = left.additional_properties
                if isinstance(extra, SchemaNode) and not right.numeric_keys:
                    return self.visit(extra, left_scope, value, right_scope)
                return True
            case _:
                return False

    # -------------------------------------------------------------------------
    # Object-likeness of non-object schemas
    # -------------------------------------------------------------------------

    def _has_only(self, right: ObjectType, right_scope: Scope, name: str, member: SchemaNode) -> bool:
        """True when right has no properties, or only ``name`` satisfied by member."""
        properties = right.properties
        if not properties:
            return True
        if len(properties) != 1 or name not in properties:
            return False
        return self.visit(member, EMPTY_SCOPE, properties[name], right_scope)

    def _is_array_like(self, right: ObjectType, right_scope: Scope) -> bool:
        return self._has_only(right, right_scope, "length", NumberType())

    def _object_right(
        self,
        left: SchemaNode,
        left_scope: Scope,
        right: ObjectType,
        right_scope: Scope,
    ) -> bool:
        """Non-object left side against an object."""
        match left.kind:
            case Kind.STRING | Kind.UINT8ARRAY | Kind.FUNCTION:
                return self._is_array_like(right, right_scope)
            case Kind.LITERAL if isinstance(left.value, str):
                return self._is_array_like(right, right_scope)
            case (
                Kind.LITERAL
                | Kind.NUMBER
                | Kind.INTEGER
                | Kind.BOOLEAN
                | Kind.BIGINT
                | Kind.DATE
                | Kind.CONSTRUCTOR
            ):
                return not right.properties
            case Kind.SYMBOL:
                description = UnionType((StringType(), UndefinedType()))
                return self._has_only(right, right_scope, "description", description)
            case Kind.PROMISE:
                then = FunctionType((AnyType(),), AnyType())
                return self._has_only(right, right_scope, "then", then)
            case Kind.RECORD:
                if not right.properties:
                    return True
                if left.numeric_keys:
                    return False
                return all(
                    prop.optional and self.visit(left.value, left_scope, prop, right_scope)
                    for prop in right.properties.values()
                )
            case _:
                return False

    # -------------------------------------------------------------------------
    # User kinds
    # -------------------------------------------------------------------------

    def visit_user_defined(self, left, left_scope, right, right_scope) -> bool:
        record = TypeRegistry.get(left.kind)
        if record is not None and record.extends is not None:
            return bool(record.extends(left, right))
        return right.kind == left.kind


def extends(
    left: SchemaNode,
    right: SchemaNode,
    left_scope: Sequence[SchemaNode] = EMPTY_SCOPE,
    right_scope: Sequence[SchemaNode] = EMPTY_SCOPE,
    *,
    settings: ExtendsSettings | None = None,
) -> bool:
    """
    Return True when every value described by left also satisfies right.

    Args:
        left: Candidate subtype schema.
        right: Candidate supertype schema.
        left_scope: Identified schemas that Ref/This nodes under left may target.
        right_scope: Identified schemas that Ref/This nodes under right may target.
        settings: Engine settings; read from the environment when omitted.

    Raises:
        DereferenceError: A reference target is absent from its scope.
        UnknownTypeError: A node has a kind that is neither built in nor registered.
    """
    return ExtendsEngine(settings).extends(left, right, left_scope, right_scope)
