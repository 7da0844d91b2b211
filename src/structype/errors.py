"""
Errors raised while traversing schemas.

Mismatched shapes are ordinary results and never raise. The errors here signal
a schema graph the engine cannot interpret at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from structype.kinds import Kind
    from structype.types import RefType, SchemaNode, ThisType


class StructypeError(Exception):
    """Base class for structype errors."""


class DereferenceError(StructypeError):
    """Raised when a Ref or This target is not present in the reference scope.

    Attributes:
        schema: The reference node that failed to resolve
        target: The identifier that was looked up
    """

    def __init__(self, schema: RefType | ThisType, reason: str | None = None):
        self.schema = schema
        self.target = schema.target
        message = f"Unable to dereference schema with $id '{schema.target}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownTypeError(StructypeError):
    """Raised for a kind that is neither built-in nor registered.

    Attributes:
        schema: The offending node
        kind: Its kind tag
    """

    def __init__(self, schema: SchemaNode, kind: Kind | str | None = None):
        self.schema = schema
        self.kind = kind if kind is not None else getattr(schema, "kind", None)
        super().__init__(f"Unknown type '{self.kind}'")
