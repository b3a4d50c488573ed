"""
Bidirectional relay between typed command values and a transport session.
"""

from pocketstream.stream.pipes import pipe_commands_to_wire, pipe_wire_to_commands
from pocketstream.stream.relay import Relay, RelayState, run

__all__ = [
    "Relay",
    "RelayState",
    "run",
    "pipe_commands_to_wire",
    "pipe_wire_to_commands",
]
