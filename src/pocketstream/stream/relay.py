"""
Relay orchestration.

A :class:`Relay` owns the application-facing channels, obtains a transport
session for its endpoint and runs both translation pipes against it until
cancelled.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from pocketstream.concurrency import CancelToken, cancel_on, get_cancelled_exc_class
from pocketstream.config import get_env_config, merge_configs
from pocketstream.errors import ConfigurationError
from pocketstream.pocket.registry import CommandRegistry
from pocketstream.pocket.types import Command
from pocketstream.stream.pipes import pipe_commands_to_wire, pipe_wire_to_commands
from pocketstream.telemetry import get_logger, get_telemetry
from pocketstream.transport.errors import TransportError
from pocketstream.transport.protocol import Connector
from pocketstream.transport.websocket import WebSocketConnector

Handler = Callable[
    [MemoryObjectReceiveStream[Command], MemoryObjectSendStream[Any]], Awaitable[None]
]

logger = get_logger(__name__)


class RelayState(str, Enum):
    """Lifecycle of a relay."""

    CONNECTING = "connecting"
    RELAYING = "relaying"
    STOPPED = "stopped"


class Relay:
    """
    Bidirectional relay between typed command values and a transport session.

    The application sends values to the peer through :attr:`results` and
    receives decoded values from the peer through :attr:`commands`.
    """

    def __init__(
        self,
        url: str,
        connector: Optional[Connector] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
        registry: Optional[CommandRegistry] = None,
        enable_telemetry: bool = True,
        **options: Any,
    ):
        """Initialize the relay.

        Args:
            url: The endpoint to connect to.
            connector: Source of transport sessions, a WebSocketConnector by default.
            config: Configuration options for the relay.
            registry: Command registry used by both pipes; the built-in one by default.
            enable_telemetry: Whether to log and trace the relay lifecycle.
            **options: Extra configuration options, overriding ``config``.

        Raises:
            ConfigurationError: If a configuration value is invalid.
        """
        self.url = url
        self._config = merge_configs(config, options)
        self._connector = connector if connector is not None else WebSocketConnector()
        self._registry = registry
        self._tracer, self._logger = get_telemetry("pocketstream.relay") if enable_telemetry else (None, None)

        channel_size = self._channel_size()
        self._results_send, self._results_receive = anyio.create_memory_object_stream(channel_size)
        self._commands_send, self._commands_receive = anyio.create_memory_object_stream(channel_size)

        self.state = RelayState.CONNECTING
        self._started = False

    def _get_config(self, key: str, default: Any = None) -> Any:
        """Get a configuration value from the hierarchy.

        Args:
            key: The configuration key
            default: The default value if not found

        Returns:
            The configuration value
        """
        if key in self._config:
            return self._config[key]

        env_value = get_env_config(key)
        if env_value is not None:
            return env_value

        return default

    def _channel_size(self) -> int:
        value = self._get_config("channel_size", 0)
        try:
            size = int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid channel_size: {value!r}") from None
        if size < 0:
            raise ConfigurationError(f"channel_size must not be negative, got {size}")
        return size

    @property
    def results(self) -> MemoryObjectSendStream[Any]:
        """Values to encode and send to the peer.

        Closing this stream ends the outbound direction and stops the relay.
        """
        return self._results_send

    @property
    def commands(self) -> MemoryObjectReceiveStream[Command]:
        """Values decoded from the peer. Closed once the relay stops."""
        return self._commands_receive

    async def run(self, cancel: Optional[CancelToken] = None) -> None:
        """Relay messages until ``cancel`` fires or the session ends.

        Args:
            cancel: Stops the relay when fired.

        Raises:
            ConnectionError: If no session can be established.
            RuntimeError: If the relay has already been run.
        """
        if self._started:
            raise RuntimeError("A relay can only be run once")
        self._started = True

        if self._tracer:
            with self._tracer.start_as_current_span("pocketstream.relay") as span:
                span.set_attribute("relay.url", self.url)
                try:
                    await self._run(cancel)
                except Exception as e:
                    span.record_exception(e)
                    raise
        else:
            await self._run(cancel)

    async def _run(self, cancel: Optional[CancelToken]) -> None:
        try:
            with cancel_on(cancel):
                async with self._connector.connect(self.url) as session:
                    self.state = RelayState.RELAYING
                    if self._logger:
                        self._logger.info("relay.relaying", url=self.url)

                    async with anyio.create_task_group() as tg:
                        tg.start_soon(
                            self._run_pipe,
                            pipe_commands_to_wire,
                            self._results_receive,
                            session.outbound,
                            cancel,
                            tg.cancel_scope,
                        )
                        tg.start_soon(
                            self._run_pipe,
                            pipe_wire_to_commands,
                            session.inbound,
                            self._commands_send,
                            cancel,
                            tg.cancel_scope,
                        )
        except TransportError as e:
            if self._logger:
                self._logger.error(
                    "relay.connection_failed",
                    url=self.url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            raise
        except get_cancelled_exc_class():
            if self._logger:
                self._logger.info("relay.cancelled", url=self.url)
            raise
        finally:
            self.state = RelayState.STOPPED
            self._commands_send.close()
            self._results_receive.close()
            if self._logger:
                self._logger.info("relay.stopped", url=self.url)

    async def _run_pipe(
        self,
        pipe: Callable[..., Awaitable[None]],
        source: MemoryObjectReceiveStream[Any],
        sink: MemoryObjectSendStream[Any],
        cancel: Optional[CancelToken],
        scope: anyio.CancelScope,
    ) -> None:
        # Once either direction is done the relay is done.
        try:
            await pipe(source, sink, cancel, registry=self._registry)
        finally:
            scope.cancel()


async def _drain(commands: MemoryObjectReceiveStream[Command], results: MemoryObjectSendStream[Any]) -> None:
    async with commands:
        async for command in commands:
            logger.info("relay.unhandled_command", cmd=command.cmd, id=command.id)


async def run(
    url: str,
    cancel: Optional[CancelToken] = None,
    *,
    connector: Optional[Connector] = None,
    handler: Optional[Handler] = None,
    config: Optional[Dict[str, Any]] = None,
    registry: Optional[CommandRegistry] = None,
) -> None:
    """Relay ``url`` until ``cancel`` fires or the session ends.

    Args:
        url: The endpoint to connect to.
        cancel: Stops the relay when fired.
        connector: Source of transport sessions, a WebSocketConnector by default.
        handler: Application logic, called as ``handler(commands, results)``
            alongside the relay. Without one, decoded commands are logged
            and discarded.
        config: Configuration options for the relay.
        registry: Command registry; the built-in one by default.

    Raises:
        ConnectionError: If no session can be established.
    """
    relay = Relay(url, connector, config=config, registry=registry)
    failure: Optional[TransportError] = None
    async with anyio.create_task_group() as tg:
        tg.start_soon(handler or _drain, relay.commands, relay.results)
        try:
            await relay.run(cancel)
        except TransportError as e:
            # Raised below, outside the task group, so callers see it unwrapped.
            failure = e
        finally:
            tg.cancel_scope.cancel()
    if failure is not None:
        raise failure
