"""
Tests for the CommandRegistry.
"""

from dataclasses import dataclass
from typing import ClassVar

import pytest

from pocketstream.pocket.errors import UnknownTagError
from pocketstream.pocket.registry import CommandRegistry, get_command_registry
from pocketstream.pocket.types import Command, FrequencyRangeQuery, SingleQuery


@dataclass
class Ping(Command):
    tag: ClassVar[str] = "pi"


def test_registry_init():
    """Test CommandRegistry initialization."""
    registry = CommandRegistry()
    assert len(registry) == 0
    assert registry.tags() == []


def test_registry_register_and_resolve():
    """Test registering and resolving a variant."""
    registry = CommandRegistry()
    entry = registry.register(Ping)

    assert entry.tag == "pi"
    assert entry.variant is Ping
    assert registry.resolve("pi") is entry
    assert "pi" in registry
    assert entry.decode({"cmd": "pi", "id": "x"}) == Ping(id="x")


def test_registry_register_custom_tag_and_decoder():
    """Test registering under an explicit tag with a custom decoder."""
    registry = CommandRegistry()
    entry = registry.register(Ping, tag="p2", decode=lambda payload: Ping(cmd="p2", t=99))

    assert registry.resolve("p2").decode({}) == Ping(cmd="p2", t=99)
    assert entry.zero() == Ping(cmd="p2")


def test_registry_rejects_duplicate_tags():
    """Test that no two entries can share a tag."""
    registry = CommandRegistry()
    registry.register(Ping)

    with pytest.raises(ValueError):
        registry.register(Ping)
    with pytest.raises(ValueError):
        registry.register(FrequencyRangeQuery, tag="pi")


def test_registry_rejects_untagged_variant():
    """Test that a variant needs a tag."""
    with pytest.raises(ValueError):
        CommandRegistry().register(Command)


def test_registry_resolve_unknown_tag():
    """Test resolving a tag nobody registered."""
    registry = CommandRegistry()

    with pytest.raises(UnknownTagError) as excinfo:
        registry.resolve("zz")
    assert excinfo.value.tag == "zz"


def test_registry_entry_for_value():
    """Test resolving the entry of a command value by its tag."""
    registry = get_command_registry()

    assert registry.entry_for(SingleQuery()).variant is SingleQuery
    with pytest.raises(UnknownTagError):
        registry.entry_for("not a command")
    with pytest.raises(UnknownTagError):
        registry.entry_for(Ping())


def test_default_registry_contents():
    """Test the built-in registry."""
    registry = get_command_registry()

    assert registry.tags() == ["rr", "sq"]
    assert registry.resolve("rr").variant is FrequencyRangeQuery
    assert registry.resolve("sq").variant is SingleQuery
    assert registry.resolve("rr").zero() == FrequencyRangeQuery()
