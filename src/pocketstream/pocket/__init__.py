"""
Pocket VNA command set.

Typed command values, the registry that maps wire tags to them, and the
codec that translates between the two.
"""

from pocketstream.pocket.codec import decode_command, encode_command
from pocketstream.pocket.errors import (
    CodecError,
    DeserializationError,
    MalformedMessageError,
    SerializationError,
    UnknownTagError,
)
from pocketstream.pocket.registry import CommandRegistry, RegistryEntry, get_command_registry
from pocketstream.pocket.types import (
    Command,
    CommandValue,
    FrequencyRangeQuery,
    Range,
    SingleQuery,
    SParam,
    SParamSelect,
)

__all__ = [
    "Command",
    "CommandValue",
    "FrequencyRangeQuery",
    "SingleQuery",
    "Range",
    "SParam",
    "SParamSelect",
    "CommandRegistry",
    "RegistryEntry",
    "get_command_registry",
    "encode_command",
    "decode_command",
    "CodecError",
    "SerializationError",
    "DeserializationError",
    "MalformedMessageError",
    "UnknownTagError",
]
