"""
Error hierarchy for the transport boundary.

Connection-level failures belong to the transport; the relay only ever sees
them as a failed ``connect`` or as a channel that closed underneath it.
"""

from pocketstream.errors import PocketStreamError


class TransportError(PocketStreamError):
    """Base class for all transport-related errors."""

    pass


class ConnectionError(TransportError):
    """Error indicating a connection problem."""

    pass


class ConnectionTimeoutError(ConnectionError):
    """Error indicating a connection timeout."""

    pass


class ChannelClosedError(TransportError):
    """Error indicating a pipe's channel was closed while it was running."""

    pass
