"""
Template literal expansion.

A template literal describes a set of strings. When every part is drawn from a
finite set (fixed text, literals, booleans and unions of those) the template is
equivalent to a union of string literals; otherwise it is just a string.
"""

from __future__ import annotations

from itertools import product

from structype.kinds import Kind
from structype.types import (
    LiteralType,
    SchemaNode,
    StringType,
    TemplateLiteralType,
    UnionType,
)


def _literal_text(value: str | int | float | bool) -> str:
    # Render the way the values appear when interpolated into a string
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _expand(part: str | SchemaNode) -> tuple[str, ...] | None:
    """Return the finite strings a part can produce, or None when unbounded."""
    if isinstance(part, str):
        return (part,)

    match part.kind:
        case Kind.LITERAL:
            return (_literal_text(part.value),)
        case Kind.BOOLEAN:
            return ("true", "false")
        case Kind.UNION:
            expanded: list[str] = []
            for variant in part.variants:
                strings = _expand(variant)
                if strings is None:
                    return None
                for s in strings:
                    if s not in expanded:
                        expanded.append(s)
            return tuple(expanded)
        case Kind.TEMPLATE_LITERAL:
            return _expand_parts(part.parts)
        case _:
            return None


def _expand_parts(parts: tuple[str | SchemaNode, ...]) -> tuple[str, ...] | None:
    expansions = []
    for part in parts:
        strings = _expand(part)
        if strings is None:
            return None
        expansions.append(strings)
    return tuple("".join(combo) for combo in product(*expansions))


def resolve_template(node: TemplateLiteralType) -> SchemaNode:
    """
    Resolve a template literal to the schema it is equivalent to.

    Examples:
        ("on", "Click" | "Key") → LiteralType("onClick") | LiteralType("onKey")
        ("id-", NumberType())   → StringType()
    """
    strings = _expand_parts(node.parts)
    if strings is None:
        return StringType()
    if len(strings) == 1:
        return LiteralType(strings[0])
    return UnionType(tuple(LiteralType(s) for s in strings))
