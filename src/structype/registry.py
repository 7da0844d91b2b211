"""
Extension registry for user-defined kinds.

Built-in kinds are handled by the closed dispatch in the visitor. A node whose
kind is not built in is only accepted when its kind has been registered here;
the record optionally carries the rule deciding how that kind extends others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, TypeAlias

from structype.kinds import is_builtin

if TYPE_CHECKING:
    from structype.types import SchemaNode

logger = logging.getLogger(__name__)

ExtendsHandler: TypeAlias = "Callable[[SchemaNode, SchemaNode], bool]"


@dataclass(frozen=True)
class KindRecord:
    """Registration record for a user kind."""

    kind: str
    extends: ExtendsHandler | None = None


class TypeRegistry:
    """Registry of user kinds consulted when built-in dispatch falls through."""

    _records: ClassVar[dict[str, KindRecord]] = {}

    @classmethod
    def register(
        cls,
        kind: str,
        extends: ExtendsHandler | None = None,
    ) -> KindRecord:
        """
        Register a user kind.

        Args:
            kind: Kind string carried by the user's SchemaNode subclass.
            extends: Optional rule ``(left, right) -> bool`` used when the left
                side of a comparison has this kind. Without one, the kind only
                extends a right side of the same kind.

        Returns:
            The stored record. Re-registering replaces the previous record.
        """
        if is_builtin(kind):
            raise ValueError(f"Kind '{kind}' is built in and cannot be registered")

        record = KindRecord(kind=kind, extends=extends)
        cls._records[kind] = record
        logger.debug("Registered user kind %r", kind)
        return record

    @classmethod
    def has(cls, kind: str) -> bool:
        return kind in cls._records

    @classmethod
    def get(cls, kind: str) -> KindRecord | None:
        return cls._records.get(kind)

    @classmethod
    def delete(cls, kind: str) -> bool:
        """Remove a kind, returning whether it was registered."""
        removed = cls._records.pop(kind, None) is not None
        if removed:
            logger.debug("Removed user kind %r", kind)
        return removed

    @classmethod
    def clear(cls) -> None:
        cls._records.clear()

    @classmethod
    def entries(cls) -> dict[str, KindRecord]:
        return dict(cls._records)
