"""
Error hierarchy for translating commands to and from the wire format.
"""

from pocketstream.errors import PocketStreamError


class CodecError(PocketStreamError):
    """Base class for errors translating a single message."""

    pass


class SerializationError(CodecError):
    """Error raised when a command value cannot be encoded."""

    pass


class DeserializationError(CodecError):
    """Error raised when a wire payload cannot be decoded."""

    pass


class MalformedMessageError(DeserializationError):
    """Payload is not JSON, lacks a usable ``cmd``, or has the wrong shape."""

    pass


class UnknownTagError(CodecError):
    """Error raised for a ``cmd`` tag that has no registry entry."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Unknown command tag: {tag!r}")
