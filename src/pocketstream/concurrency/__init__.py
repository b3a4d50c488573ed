"""Structured concurrency helpers for pocketstream.

Built on AnyIO so the relay behaves the same on the asyncio and trio
backends.
"""

from pocketstream.concurrency.cancel import (
    CancelToken,
    cancel_on,
    get_cancelled_exc_class,
    shield,
)

__all__ = [
    "CancelToken",
    "cancel_on",
    "get_cancelled_exc_class",
    "shield",
]
