"""Cancellable waits and requests for the retry and polling loops."""

import asyncio
import contextlib
from typing import Awaitable, Optional, Tuple, TypeVar

T = TypeVar("T")


async def wait_or_cancel(
    delay: float, cancel_event: Optional[asyncio.Event] = None
) -> bool:
    """Sleep for ``delay`` seconds unless cancellation is requested first.

    This is the select point of the retry and polling loops: it waits on
    "delay elapsed" and "cancellation requested", whichever comes first.

    :param delay: Seconds to wait
    :type delay: float
    :param cancel_event: Event the host sets to cancel the operation
    :type cancel_event: Optional[asyncio.Event]
    :return: True if cancellation was requested, False if the delay elapsed
    :rtype: bool
    """
    if cancel_event is None:
        await asyncio.sleep(max(0.0, delay))
        return False
    if cancel_event.is_set():
        return True
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=max(0.0, delay))
    except asyncio.TimeoutError:
        return False
    return True


async def run_or_cancel(
    coro: Awaitable[T], cancel_event: Optional[asyncio.Event] = None
) -> Tuple[bool, Optional[T]]:
    """Await ``coro`` unless cancellation is requested first.

    Used around in-flight requests so a cancel does not have to wait for
    the request timeout. The losing side is cancelled and awaited.

    :param coro: Awaitable to run, e.g. ``client.send(request)``
    :type coro: Awaitable[T]
    :param cancel_event: Event the host sets to cancel the operation
    :type cancel_event: Optional[asyncio.Event]
    :return: ``(True, None)`` if cancelled, else ``(False, result)``
    :rtype: Tuple[bool, Optional[T]]
    """
    if cancel_event is None:
        return False, await coro

    work = asyncio.ensure_future(coro)
    if cancel_event.is_set():
        work.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await work
        return True, None

    cancelled = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({work, cancelled}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if not work.done():
            work.cancel()
        if not cancelled.done():
            cancelled.cancel()
        await asyncio.gather(work, cancelled, return_exceptions=True)

    if work.done() and not work.cancelled():
        return False, work.result()
    return True, None
