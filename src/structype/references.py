"""
Reference resolution domain.

A scope is the ordered, append-only tuple of identified schemas seen on the path
from a query's root to the current node. Ref and This nodes resolve against it
by scanning for the first schema whose id equals their target.
"""

from __future__ import annotations

from typing import TypeAlias

from structype.errors import DereferenceError
from structype.kinds import Kind
from structype.types import RefType, SchemaNode, ThisType

Scope: TypeAlias = tuple[SchemaNode, ...]

EMPTY_SCOPE: Scope = ()


def is_reference(node: SchemaNode) -> bool:
    return node.kind in (Kind.REF, Kind.THIS)


def push(scope: Scope, node: SchemaNode) -> Scope:
    """Extend scope with node when it carries an id not already in scope."""
    if node.id is None:
        return scope
    # Identity check: nodes may hold unhashable payloads and deep equality is costly
    if any(entry is node for entry in scope):
        return scope
    return (*scope, node)


def resolve(node: RefType | ThisType, scope: Scope) -> SchemaNode:
    """Return the first schema in scope whose id matches the reference target."""
    for entry in scope:
        if entry.id == node.target:
            return entry
    raise DereferenceError(node)


def dereference(node: SchemaNode, scope: Scope) -> tuple[SchemaNode, Scope]:
    """
    Follow Ref/This chains until a concrete schema is reached.

    Each node visited on the way is pushed onto the scope, so a resolved target
    carrying an id is visible to references nested inside it.

    Returns:
        The concrete schema and the scope to use for its subtree.
    """
    scope = push(scope, node)
    seen: list[SchemaNode] = []
    while is_reference(node):
        if any(entry is node for entry in seen):
            raise DereferenceError(node, "reference chain does not reach a schema")
        seen.append(node)
        node = resolve(node, scope)
        scope = push(scope, node)
    return node, scope
