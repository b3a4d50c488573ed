"""
Transport boundary for pocketstream.

The relay core never touches a socket. It reads and writes the two
:class:`WireMessage` channels of a :class:`Session` handed out by a
:class:`Connector`.
"""

from pocketstream.transport.errors import (
    ChannelClosedError,
    ConnectionError,
    ConnectionTimeoutError,
    TransportError,
)
from pocketstream.transport.message import MessageType, WireMessage
from pocketstream.transport.protocol import Connector, Session
from pocketstream.transport.websocket import WebSocketConnector

__all__ = [
    "Connector",
    "Session",
    "WireMessage",
    "MessageType",
    "WebSocketConnector",
    "TransportError",
    "ConnectionError",
    "ConnectionTimeoutError",
    "ChannelClosedError",
]
