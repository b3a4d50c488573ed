"""
Wire message type exchanged with the transport.
"""

from dataclasses import dataclass
from enum import IntEnum


class MessageType(IntEnum):
    """Frame kind of a wire message, numbered like WebSocket opcodes."""

    TEXT = 1
    BINARY = 2


@dataclass(frozen=True)
class WireMessage:
    """One frame exchanged with the peer: a raw payload and its frame kind."""

    data: bytes
    type: MessageType = MessageType.TEXT

    @classmethod
    def from_text(cls, text: str) -> "WireMessage":
        """Build a text frame from a string, encoded as UTF-8."""
        return cls(text.encode("utf-8"), MessageType.TEXT)

    @property
    def text(self) -> str:
        """The payload decoded as UTF-8.

        Raises:
            UnicodeDecodeError: If the payload is not valid UTF-8
        """
        return self.data.decode("utf-8")
