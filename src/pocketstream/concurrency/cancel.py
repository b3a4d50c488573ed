"""Cancellation primitives shared by the relay pipes.

Pipes are long-running background tasks that spend most of their time
suspended on a channel. A :class:`CancelToken` is the one signal that stops
all of them, and :func:`cancel_on` binds that signal to an anyio cancel
scope so every suspension point inside it observes the token.
"""

from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator, Optional, Set, Type, TypeVar

import anyio

T = TypeVar("T")


class CancelToken:
    """A one-shot cancellation signal that can be shared between tasks."""

    def __init__(self) -> None:
        self._event = anyio.Event()
        self._scopes: Set[anyio.CancelScope] = set()

    def cancel(self) -> None:
        """Fire the signal, cancelling every scope bound to it.

        Calling it more than once is harmless.
        """
        self._event.set()
        for scope in list(self._scopes):
            scope.cancel()

    @property
    def cancelled(self) -> bool:
        """Whether the signal has fired."""
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until the signal fires."""
        await self._event.wait()

    def _bind(self, scope: anyio.CancelScope) -> None:
        if self.cancelled:
            scope.cancel()
        self._scopes.add(scope)

    def _unbind(self, scope: anyio.CancelScope) -> None:
        self._scopes.discard(scope)


@contextmanager
def cancel_on(token: Optional[CancelToken]) -> Iterator[anyio.CancelScope]:
    """Cancel the body of the ``with`` block when ``token`` fires.

    The cancellation is absorbed by the scope, so the block simply ends at
    its next suspension point. A token that has already fired cancels the
    block straight away. With ``token=None`` the block runs until it
    finishes on its own.

    Args:
        token: The signal to observe, or None

    Yields:
        The cancel scope wrapping the block
    """
    with anyio.CancelScope() as scope:
        if token is None:
            yield scope
            return
        token._bind(scope)
        try:
            yield scope
        finally:
            token._unbind(scope)


def get_cancelled_exc_class() -> Type[BaseException]:
    """Get the exception class the running backend uses for cancellation."""
    return anyio.get_cancelled_exc_class()


async def shield(func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
    """Await ``func(*args, **kwargs)`` protected from outer cancellation.

    Used for teardown steps (closing a socket) that must complete even
    while the surrounding task is being cancelled.
    """
    with anyio.CancelScope(shield=True):
        return await func(*args, **kwargs)
