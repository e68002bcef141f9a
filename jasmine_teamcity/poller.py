"""Bounded-time polling for a condition on the hosted page."""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.001
POLL_INTERVAL = 0.1


class CompletionTimeoutError(TimeoutError):
    """Raised when the condition is not met before the deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Condition was not met within {timeout} seconds")
        self.timeout = timeout


async def wait_for[T](
    predicate: Callable[[], Awaitable[bool]],
    on_complete: Callable[[], Awaitable[T]],
    timeout: float = DEFAULT_TIMEOUT,
) -> T:
    """Wait until the predicate holds, then run the ready action.

    The predicate is checked on fixed ticks every ``POLL_INTERVAL`` seconds
    after the start, while the deadline has not passed. A slow predicate does
    not shift later ticks; ticks it overran are skipped. Once it holds,
    polling stops and ``on_complete`` is awaited exactly once.

    Args:
        predicate: Side-effect-free check, e.g. "has the run finished"
        on_complete: Action to run once the predicate holds
        timeout: Maximum wait time in seconds (default: 3.001)

    Returns:
        Whatever ``on_complete`` returns

    Raises:
        CompletionTimeoutError: If the predicate never held before the deadline

    """
    loop = asyncio.get_running_loop()
    start = loop.time()
    deadline = start + timeout

    ticks = 0

    while True:
        ticks = max(ticks + 1, math.floor((loop.time() - start) / POLL_INTERVAL) + 1)
        tick = start + ticks * POLL_INTERVAL
        await asyncio.sleep(max(0.0, tick - loop.time()))

        if tick >= deadline:
            break

        if await predicate():
            log.info(
                "'wait_for()' finished in %dms.", (loop.time() - start) * 1000
            )
            return await on_complete()

    # The loop may wake a clock tick early
    while (remaining := deadline - loop.time()) > 0:
        await asyncio.sleep(remaining)

    log.warning("'wait_for()' timeout after %dms.", timeout * 1000)
    raise CompletionTimeoutError(timeout)
