"""
Registry of command variants.

This module maps each protocol tag to the variant it selects and the
function that decodes it. The pipes only ever go through the registry, so
supporting a new command means registering one more entry.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from pocketstream.pocket.errors import UnknownTagError
from pocketstream.pocket.types import Command, FrequencyRangeQuery, SingleQuery

Decoder = Callable[[Mapping[str, Any]], Command]


@dataclass(frozen=True)
class RegistryEntry:
    """How to handle one tagged variant."""

    tag: str
    variant: Type[Command]
    decode: Decoder

    def zero(self) -> Command:
        """The variant with every field at its default."""
        return self.variant(cmd=self.tag)


class CommandRegistry:
    """Registry of command variants keyed by tag."""

    def __init__(self):
        """Initialize a new, empty command registry."""
        self._entries: Dict[str, RegistryEntry] = {}

    def register(
        self,
        variant: Type[Command],
        tag: Optional[str] = None,
        decode: Optional[Decoder] = None,
    ) -> RegistryEntry:
        """Register a command variant.

        Args:
            variant: The variant class.
            tag: The tag selecting it, defaults to ``variant.tag``.
            decode: Builds the variant from a decoded JSON object, defaults
                to ``variant.from_payload``.

        Returns:
            The new registry entry.

        Raises:
            ValueError: If the tag is empty or already registered.
        """
        tag = tag or variant.tag
        if not tag:
            raise ValueError(f"{variant.__name__} has no tag to register under")
        if tag in self._entries:
            raise ValueError(
                f"Tag {tag!r} is already registered to {self._entries[tag].variant.__name__}"
            )
        entry = RegistryEntry(tag=tag, variant=variant, decode=decode or variant.from_payload)
        self._entries[tag] = entry
        return entry

    def resolve(self, tag: str) -> RegistryEntry:
        """Get the entry for a tag.

        Args:
            tag: The ``cmd`` value of a message.

        Returns:
            The registry entry.

        Raises:
            UnknownTagError: If no variant is registered under the tag.
        """
        try:
            return self._entries[tag]
        except KeyError:
            raise UnknownTagError(tag) from None

    def entry_for(self, value: Any) -> RegistryEntry:
        """Get the entry for a command value, by its ``cmd`` tag.

        Raises:
            UnknownTagError: If the value carries no registered tag.
        """
        tag = getattr(value, "cmd", "")
        if not isinstance(tag, str):
            raise UnknownTagError(repr(tag))
        return self.resolve(tag)

    def tags(self) -> List[str]:
        """Get the registered tags, in registration order."""
        return list(self._entries)

    def __contains__(self, tag: object) -> bool:
        return tag in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _build_default_registry() -> CommandRegistry:
    registry = CommandRegistry()
    registry.register(FrequencyRangeQuery)
    registry.register(SingleQuery)
    return registry


_default_registry = _build_default_registry()


def get_command_registry() -> CommandRegistry:
    """Get the process-wide registry of the built-in commands."""
    return _default_registry
