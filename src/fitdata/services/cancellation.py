"""Caller-driven cancellation for in-flight provider requests."""

import asyncio
import inspect
from collections.abc import Awaitable
from contextlib import suppress
from typing import TypeVar

T = TypeVar("T")


class OperationCancelledError(Exception):
    """Raised when a request is abandoned through its cancel token."""


class CancelToken:
    """Handle a caller keeps to abandon a pending provider call."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal every call waiting on this token to stop."""
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class CancelScope:
    """Hands out tokens so only the most recent request stays live.

    Each call to ``renew`` cancels the token handed out before it, which
    keeps a superseded search from overwriting a later one's result.
    """

    def __init__(self) -> None:
        self._current: CancelToken | None = None

    def renew(self) -> CancelToken:
        if self._current is not None:
            self._current.cancel()
        self._current = CancelToken()
        return self._current

    def cancel(self) -> None:
        if self._current is not None:
            self._current.cancel()


async def run_cancellable(awaitable: Awaitable[T], token: CancelToken | None) -> T:
    """Await ``awaitable`` unless ``token`` fires first."""
    if token is None:
        return await awaitable
    if token.cancelled:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise OperationCancelledError

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait(
            {task, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        raise
    if task in done:
        waiter.cancel()
        return task.result()

    task.cancel()
    with suppress(asyncio.CancelledError):
        await task
    raise OperationCancelledError
