"""Tests for structype.registry module."""

import pytest

from structype.registry import KindRecord


class TestTypeRegistry:
    """Test user kind registration."""

    def test_register(self, registry):
        """Test registering a kind without a handler."""
        record = registry.register("registry_plain")
        assert record == KindRecord(kind="registry_plain")
        assert registry.has("registry_plain")
        assert registry.get("registry_plain") is record

    def test_register_with_handler(self, registry):
        """Test registering a kind with an extends handler."""

        def handler(left, right):
            return True

        registry.register("registry_handled", extends=handler)
        assert registry.get("registry_handled").extends is handler

    def test_reregister_replaces(self, registry):
        """Test that registering again replaces the record."""
        registry.register("registry_replace")
        registry.register("registry_replace", extends=lambda left, right: False)
        assert registry.get("registry_replace").extends is not None

    def test_builtin_rejected(self, registry):
        """Test that built-in kinds cannot be registered."""
        with pytest.raises(ValueError, match="built in"):
            registry.register("String")

    def test_delete(self, registry):
        """Test removing a kind."""
        registry.register("registry_delete")
        assert registry.delete("registry_delete") is True
        assert registry.delete("registry_delete") is False
        assert not registry.has("registry_delete")

    def test_get_missing(self, registry):
        """Test looking up an unregistered kind."""
        assert registry.get("registry_missing") is None

    def test_entries_is_copy(self, registry):
        """Test that entries() cannot mutate the registry."""
        registry.register("registry_copy")
        entries = registry.entries()
        entries.clear()
        assert registry.has("registry_copy")
