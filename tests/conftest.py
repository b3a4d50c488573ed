"""
Pytest configuration for pocketstream tests.

This module contains fixtures and configuration for pytest.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import anyio
import pytest

from pocketstream.transport.message import WireMessage
from pocketstream.transport.protocol import Session


class MockPeer:
    """The far end of a mock session, as seen by a test."""

    def __init__(self, send, receive):
        self.send_stream = send
        self.receive_stream = receive

    async def send(self, message: WireMessage) -> None:
        await self.send_stream.send(message)

    async def send_text(self, text: str) -> None:
        await self.send_stream.send(WireMessage.from_text(text))

    async def receive(self) -> WireMessage:
        return await self.receive_stream.receive()

    def hang_up(self) -> None:
        """Close the inbound side, as a transport does when the peer goes away."""
        self.send_stream.close()


class MockConnector:
    """In-memory connector for testing."""

    def __init__(self, raise_on_connect: Optional[BaseException] = None, buffer_size: int = 0):
        self.raise_on_connect = raise_on_connect
        self.buffer_size = buffer_size
        self.urls: List[str] = []
        self.connect_count = 0
        self.disconnect_count = 0
        self.peer: Optional[MockPeer] = None

    @asynccontextmanager
    async def connect(self, url: str) -> AsyncIterator[Session]:
        self.connect_count += 1
        self.urls.append(url)
        if self.raise_on_connect:
            raise self.raise_on_connect

        to_relay_send, to_relay_receive = anyio.create_memory_object_stream(self.buffer_size)
        from_relay_send, from_relay_receive = anyio.create_memory_object_stream(self.buffer_size)
        self.peer = MockPeer(to_relay_send, from_relay_receive)
        try:
            yield Session(inbound=to_relay_receive, outbound=from_relay_send)
        finally:
            self.disconnect_count += 1
            to_relay_receive.close()
            from_relay_send.close()

    async def wait_connected(self) -> MockPeer:
        while self.peer is None:
            await anyio.sleep(0.001)
        return self.peer


@pytest.fixture
def mock_connector():
    """Fixture providing a mock connector."""
    return MockConnector()


# Anyio Backend Selection - only use asyncio
@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Fixture to run tests with different anyio backends."""
    return request.param
