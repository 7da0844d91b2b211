"""Shared fixtures."""

import pytest

from structype.registry import TypeRegistry


@pytest.fixture
def registry():
    """Yield the registry and remove kinds registered by the test afterwards."""
    before = set(TypeRegistry.entries())
    yield TypeRegistry
    for kind in set(TypeRegistry.entries()) - before:
        TypeRegistry.delete(kind)
