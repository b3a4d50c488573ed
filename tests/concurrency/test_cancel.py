"""Tests for the cancellation primitives."""

import anyio
import pytest

from pocketstream.concurrency import CancelToken, cancel_on, get_cancelled_exc_class, shield


@pytest.mark.asyncio
async def test_cancel_token_creation():
    """Test that a new token has not fired."""
    token = CancelToken()
    assert not token.cancelled


@pytest.mark.asyncio
async def test_cancel_token_cancel_is_idempotent():
    """Test that a token can be fired more than once."""
    token = CancelToken()
    token.cancel()
    token.cancel()
    assert token.cancelled


@pytest.mark.asyncio
async def test_cancel_token_wait():
    """Test that waiters are released when the token fires."""
    token = CancelToken()
    released = []

    async def waiter(name):
        await token.wait()
        released.append(name)

    with anyio.fail_after(1):
        async with anyio.create_task_group() as tg:
            tg.start_soon(waiter, "a")
            tg.start_soon(waiter, "b")
            await anyio.sleep(0.01)
            assert released == []
            token.cancel()

    assert sorted(released) == ["a", "b"]


@pytest.mark.asyncio
async def test_cancel_on_stops_blocked_body():
    """Test that firing the token ends a block suspended on a channel."""
    token = CancelToken()
    send, receive = anyio.create_memory_object_stream(0)
    results = []

    async def blocked():
        with cancel_on(token) as scope:
            try:
                await receive.receive()
            except get_cancelled_exc_class():
                results.append("cancelled")
                raise
        results.append(scope.cancelled_caught)

    with anyio.fail_after(1):
        async with anyio.create_task_group() as tg:
            tg.start_soon(blocked)
            await anyio.sleep(0.01)
            token.cancel()

    assert results == ["cancelled", True]


@pytest.mark.asyncio
async def test_cancel_on_fired_token():
    """Test that an already-fired token cancels the block at its first checkpoint."""
    token = CancelToken()
    token.cancel()
    reached = []

    with cancel_on(token) as scope:
        reached.append("before")
        await anyio.sleep(1)
        reached.append("after")

    assert reached == ["before"]
    assert scope.cancel_called


@pytest.mark.asyncio
async def test_cancel_on_none_runs_to_completion():
    """Test that without a token the block runs until it finishes."""
    with cancel_on(None) as scope:
        await anyio.sleep(0)

    assert not scope.cancel_called


@pytest.mark.asyncio
async def test_cancel_on_releases_scope():
    """Test that a finished block no longer listens to the token."""
    token = CancelToken()
    with cancel_on(token) as scope:
        assert scope in token._scopes

    assert not token._scopes
    token.cancel()
    assert not scope.cancel_called


@pytest.mark.asyncio
async def test_cancel_on_propagates_errors():
    """Test that exceptions from the block are not wrapped."""
    token = CancelToken()
    with pytest.raises(ValueError, match="boom"):
        with cancel_on(token):
            raise ValueError("boom")


@pytest.mark.asyncio
async def test_one_token_stops_many_blocks():
    """Test that a shared token stops every block bound to it."""
    token = CancelToken()
    stopped = []

    async def worker(name):
        with cancel_on(token):
            await anyio.sleep(10)
        stopped.append(name)

    with anyio.fail_after(1):
        async with anyio.create_task_group() as tg:
            for name in ("outbound", "inbound"):
                tg.start_soon(worker, name)
            await anyio.sleep(0.01)
            token.cancel()

    assert sorted(stopped) == ["inbound", "outbound"]


@pytest.mark.asyncio
async def test_shield():
    """Test that shield protects operations from cancellation."""
    results = []

    async def teardown():
        await anyio.sleep(0.05)
        results.append("closed")
        return "done"

    async def task():
        with anyio.CancelScope() as scope:
            scope.cancel()
            results.append(await shield(teardown))

    await task()
    assert results == ["closed", "done"]


@pytest.mark.asyncio
async def test_get_cancelled_exc_class():
    """Test that the backend's cancellation class is returned."""
    import asyncio

    assert get_cancelled_exc_class() is asyncio.CancelledError
