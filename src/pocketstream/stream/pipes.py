"""
Translation pipes between the application and the transport.

Each pipe moves messages in one direction until its cancel token fires or
one of its channels closes. A message that cannot be translated is logged
and dropped; it never stops the pipe.
"""

from typing import Any, Optional, TypeVar

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from pocketstream.concurrency import CancelToken, cancel_on
from pocketstream.pocket.codec import decode_command, encode_command
from pocketstream.pocket.errors import CodecError
from pocketstream.pocket.registry import CommandRegistry, get_command_registry
from pocketstream.pocket.types import Command
from pocketstream.telemetry import get_logger
from pocketstream.transport.errors import ChannelClosedError
from pocketstream.transport.message import MessageType, WireMessage

logger = get_logger(__name__)

T = TypeVar("T")


async def _receive(stream: MemoryObjectReceiveStream[T], name: str) -> T:
    """Take the next item; ``EndOfStream`` once the sender side is done."""
    try:
        return await stream.receive()
    except (anyio.BrokenResourceError, anyio.ClosedResourceError) as e:
        raise ChannelClosedError(f"{name} channel closed") from e


async def _send(stream: MemoryObjectSendStream[T], item: T, name: str) -> None:
    try:
        await stream.send(item)
    except (anyio.BrokenResourceError, anyio.ClosedResourceError) as e:
        raise ChannelClosedError(f"{name} channel closed") from e


async def pipe_commands_to_wire(
    commands: MemoryObjectReceiveStream[Any],
    wire: MemoryObjectSendStream[WireMessage],
    cancel: Optional[CancelToken] = None,
    *,
    registry: Optional[CommandRegistry] = None,
) -> None:
    """Encode command values and send them to the transport as text frames.

    Args:
        commands: Command values from the application.
        wire: The transport's outbound channel.
        cancel: Stops the pipe when fired.
        registry: Resolves each value's tag; defaults to the built-in registry.
    """
    if registry is None:
        registry = get_command_registry()

    with cancel_on(cancel):
        try:
            while True:
                value = await _receive(commands, "command")
                try:
                    data = encode_command(value, registry)
                except CodecError as e:
                    logger.warning(
                        "outbound.dropped",
                        value_type=type(value).__name__,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    continue

                await _send(wire, WireMessage(data, MessageType.TEXT), "wire")
                logger.debug("outbound.sent", cmd=value.cmd, size=len(data))
        except anyio.EndOfStream:
            logger.info("outbound.finished")
        except ChannelClosedError as e:
            logger.info("outbound.channel_closed", error=str(e))


async def pipe_wire_to_commands(
    wire: MemoryObjectReceiveStream[WireMessage],
    commands: MemoryObjectSendStream[Command],
    cancel: Optional[CancelToken] = None,
    *,
    registry: Optional[CommandRegistry] = None,
) -> None:
    """Decode frames from the transport and pass the command values on.

    Args:
        wire: The transport's inbound channel.
        commands: Decoded command values for the application.
        cancel: Stops the pipe when fired.
        registry: Resolves each message's tag; defaults to the built-in registry.
    """
    if registry is None:
        registry = get_command_registry()

    with cancel_on(cancel):
        try:
            while True:
                message = await _receive(wire, "wire")
                try:
                    value = decode_command(message.data, registry)
                except CodecError as e:
                    logger.warning(
                        "inbound.dropped",
                        frame_type=int(message.type),
                        size=len(message.data),
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    continue

                await _send(commands, value, "command")
                logger.debug("inbound.received", cmd=value.cmd)
        except anyio.EndOfStream:
            logger.info("inbound.finished")
        except ChannelClosedError as e:
            logger.info("inbound.channel_closed", error=str(e))
