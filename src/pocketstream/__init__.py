"""
pocketstream: a protocol-translation relay for pocket VNA command streams.

Converts the JSON text frames exchanged with a remote peer into typed command
values and back, with both directions running concurrently under one
cancellation signal.
"""

from pocketstream.concurrency import CancelToken
from pocketstream.errors import ConfigurationError, PocketStreamError
from pocketstream.pocket import (
    Command,
    CommandRegistry,
    CommandValue,
    FrequencyRangeQuery,
    Range,
    SingleQuery,
    SParam,
    SParamSelect,
    get_command_registry,
)
from pocketstream.stream import (
    Relay,
    RelayState,
    pipe_commands_to_wire,
    pipe_wire_to_commands,
    run,
)
from pocketstream.transport import MessageType, WebSocketConnector, WireMessage

__version__ = "0.1.0"

__all__ = [
    "run",
    "Relay",
    "RelayState",
    "CancelToken",
    "pipe_commands_to_wire",
    "pipe_wire_to_commands",
    "Command",
    "CommandValue",
    "FrequencyRangeQuery",
    "SingleQuery",
    "Range",
    "SParam",
    "SParamSelect",
    "CommandRegistry",
    "get_command_registry",
    "WireMessage",
    "MessageType",
    "WebSocketConnector",
    "PocketStreamError",
    "ConfigurationError",
]
