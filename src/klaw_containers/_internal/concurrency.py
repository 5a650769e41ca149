"""Concurrent joins for async containers.

``zip``, ``values`` and ``first_some_of`` await several inputs at once. They run
them in an anyio task group, optionally bounded by an aiologic CapacityLimiter
(``max_concurrency`` setting), and report outcomes in input order.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

import aiologic
import anyio

from klaw_containers._config import get_config
from klaw_containers.exceptions import Panic

if TYPE_CHECKING:
    from klaw_containers.types.result import Result

__all__ = ['gather', 'gather_settled']


async def _run_all[T, R](
    awaitables: Iterable[Awaitable[T]],
    wrap: Callable[[Awaitable[T]], Awaitable[R]],
) -> list[R]:
    pending = list(awaitables)
    results: list[Any] = [None] * len(pending)
    limit = get_config().max_concurrency
    limiter = aiologic.CapacityLimiter(limit) if limit is not None else None

    async def run_one(i: int, aw: Awaitable[T]) -> None:
        if limiter is None:
            results[i] = await wrap(aw)
            return
        async with limiter:
            results[i] = await wrap(aw)

    try:
        async with anyio.create_task_group() as tg:
            for i, aw in enumerate(pending):
                tg.start_soon(run_one, i, aw)
    except BaseExceptionGroup as group:
        # Surface the original exception (usually a Panic) rather than the group.
        if len(group.exceptions) == 1:
            raise group.exceptions[0]  # noqa: B904
        raise

    return results


async def _passthrough[T](aw: Awaitable[T]) -> T:
    return await aw


async def gather[T](awaitables: Iterable[Awaitable[T]]) -> list[T]:
    """Await all inputs concurrently and return their values in input order.

    The first exception cancels the remaining inputs and propagates.
    """
    return await _run_all(awaitables, _passthrough)


async def gather_settled[T](
    awaitables: Iterable[Awaitable[T]],
) -> list[Result[T, Exception]]:
    """Await all inputs concurrently, keeping each outcome as a Result.

    An input that raised becomes ``Err(exception)``; a Panic still cancels the
    group and propagates, since defects are never settled.
    """
    from klaw_containers.types.result import Err, Ok

    async def settle(aw: Awaitable[T]) -> Result[T, Exception]:
        try:
            return Ok(await aw)
        except Panic:
            raise
        except Exception as exc:
            return Err(exc)

    return await _run_all(awaitables, settle)
