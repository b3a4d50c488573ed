"""
Protocol definitions for the transport boundary.

A :class:`Connector` owns the socket. The relay asks it for a
:class:`Session` and from then on only reads and writes the session's two
message channels.
"""

from dataclasses import dataclass
from typing import AsyncContextManager, Protocol

from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from pocketstream.transport.message import WireMessage


@dataclass
class Session:
    """The two message channels of a live transport session.

    Attributes:
        inbound: Frames received from the peer. Closed when the session ends.
        outbound: Frames to send to the peer.
    """

    inbound: MemoryObjectReceiveStream[WireMessage]
    outbound: MemoryObjectSendStream[WireMessage]


class Connector(Protocol):
    """Source of transport sessions."""

    def connect(self, url: str) -> AsyncContextManager[Session]:
        """Open a session to ``url``.

        The session stays live for the duration of the ``async with`` block.

        Raises:
            ConnectionError: If the session cannot be established.
            ConnectionTimeoutError: If establishing it takes too long.
        """
        ...
