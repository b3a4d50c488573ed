"""
WebSocket connector built on the ``websockets`` library.

Bridges one WebSocket connection to a :class:`Session`: a reader task copies
incoming frames into the session's inbound channel and a writer task sends
whatever the relay puts on the outbound channel. Reconnection is not handled
here; when the peer goes away the inbound channel closes and the session
ends.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import anyio
import websockets
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from websockets.exceptions import ConnectionClosed, WebSocketException

from pocketstream.concurrency import shield
from pocketstream.telemetry import get_logger
from pocketstream.transport.errors import ConnectionError, ConnectionTimeoutError
from pocketstream.transport.message import MessageType, WireMessage
from pocketstream.transport.protocol import Session

logger = get_logger(__name__)


class WebSocketConnector:
    """Opens WebSocket sessions for the relay."""

    def __init__(
        self,
        open_timeout: Optional[float] = 10.0,
        ping_interval: Optional[float] = 20.0,
        buffer_size: int = 0,
    ):
        """Initialize the connector.

        Args:
            open_timeout: Seconds allowed for the opening handshake, None to wait forever.
            ping_interval: Seconds between keepalive pings, None to disable them.
            buffer_size: Capacity of the session channels; 0 means unbuffered.
        """
        self.open_timeout = open_timeout
        self.ping_interval = ping_interval
        self.buffer_size = buffer_size

    async def _open(self, url: str) -> Any:
        try:
            return await websockets.connect(
                url,
                open_timeout=self.open_timeout,
                ping_interval=self.ping_interval,
            )
        except asyncio.TimeoutError as e:
            raise ConnectionTimeoutError(f"Timed out connecting to {url}") from e
        except (OSError, WebSocketException) as e:
            raise ConnectionError(f"Failed to connect to {url}: {e}") from e

    @asynccontextmanager
    async def connect(self, url: str) -> AsyncIterator[Session]:
        """Open a WebSocket session to ``url``.

        Args:
            url: The ``ws://`` or ``wss://`` endpoint

        Yields:
            The live session

        Raises:
            ConnectionError: If the handshake fails
            ConnectionTimeoutError: If the handshake times out
        """
        websocket = await self._open(url)
        logger.info("websocket.connected", url=url)

        from_peer_send, from_peer_receive = anyio.create_memory_object_stream(self.buffer_size)
        to_peer_send, to_peer_receive = anyio.create_memory_object_stream(self.buffer_size)

        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._read, websocket, from_peer_send)
                tg.start_soon(self._write, websocket, to_peer_receive)
                try:
                    yield Session(inbound=from_peer_receive, outbound=to_peer_send)
                finally:
                    tg.cancel_scope.cancel()
        finally:
            from_peer_receive.close()
            to_peer_send.close()
            await shield(websocket.close)
            logger.info("websocket.disconnected", url=url)

    async def _read(self, websocket: Any, sink: MemoryObjectSendStream[WireMessage]) -> None:
        async with sink:
            try:
                async for frame in websocket:
                    if isinstance(frame, str):
                        message = WireMessage.from_text(frame)
                    else:
                        message = WireMessage(bytes(frame), MessageType.BINARY)
                    await sink.send(message)
            except ConnectionClosed as e:
                logger.warning("websocket.closed", error=str(e), error_type=type(e).__name__)
            except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                # The session was torn down while a frame was in flight.
                pass

    async def _write(self, websocket: Any, source: MemoryObjectReceiveStream[WireMessage]) -> None:
        async with source:
            async for message in source:
                try:
                    if message.type is MessageType.BINARY:
                        await websocket.send(message.data)
                    else:
                        await websocket.send(message.text)
                except ConnectionClosed as e:
                    logger.warning("websocket.send_failed", error=str(e), error_type=type(e).__name__)
                    return
