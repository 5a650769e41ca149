"""Generator-based propagation: @do, @do_option, @do_async and @do_option_async.

Sync generators use ``yield from`` on a container. A success variant hands its
payload back without suspending; a failure variant suspends the generator,
which the interpreter takes as the short-circuit signal. The interpreter then
closes the generator so no later statement runs::

    @do
    def transfer(src: str, dst: str, amount: int):
        a = yield from find_account(src)  # Err here stops the function
        b = yield from find_account(dst)
        return Result.ok((a.withdraw(amount), b.deposit(amount)))

Async generators can neither ``yield from`` nor return a value, so they
``yield`` each step instead (a container, an async container or an awaitable
of one) and receive the unwrapped value back. The last successful step is the
final result::

    @do_async
    async def checkout(user_id: str):
        user = yield fetch_user(user_id)
        cart = yield fetch_cart(user)
        yield Result.ok(cart.total())
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncGenerator, Callable, Generator
from typing import TYPE_CHECKING, Any

import wrapt

from klaw_containers._internal.defects import capture, describe
from klaw_containers.exceptions import UnhandledException, panic
from klaw_containers.types.option import Nothing, NothingType, Option
from klaw_containers.types.result import Err, Ok, Result

if TYPE_CHECKING:
    from klaw_containers.async_.option import AsyncOption
    from klaw_containers.async_.result import AsyncResult

__all__ = [
    'do',
    'do_async',
    'do_option',
    'do_option_async',
    'run_option',
    'run_option_async',
    'run_result',
    'run_result_async',
]


# --- Sync interpreters ---


def run_result(gen: Generator[Any, Any, Any]) -> Result[Any, Any]:
    """Drive a Result generator to its final container.

    Args:
        gen: A generator that ``yield from``s Results and returns a Result.

    Returns:
        The returned Result, or ``Err(e)`` for the first error ``e`` yielded.

    Raises:
        Panic: If the generator returns something other than a Result.
    """
    try:
        yielded = next(gen)
    except StopIteration as stop:
        if not isinstance(stop.value, Result):
            panic(f'A Result generator must return a Result, got {describe(stop.value)}')
        return stop.value
    gen.close()
    return Err(yielded)


def run_option(gen: Generator[Any, Any, Any]) -> Option[Any]:
    """Drive an Option generator to its final container.

    Returns:
        The returned Option, or Nothing if the generator was short-circuited.

    Raises:
        Panic: If the generator returns something other than an Option.
    """
    try:
        next(gen)
    except StopIteration as stop:
        if not isinstance(stop.value, Option):
            panic(f'An Option generator must return an Option, got {describe(stop.value)}')
        return stop.value
    gen.close()
    return Nothing


def do[**P](func: Callable[P, Any]) -> Callable[P, Result[Any, Any]]:
    """Decorator for generator-based propagation with Result.

    Generator functions are interpreted with ``run_result``. Plain functions
    are normalized: a returned Result passes through, any other value is
    wrapped in Ok.

    Args:
        func: A generator function (or plain function) to wrap.

    Returns:
        A function returning Result.

    Example:
        ```python
        @do
        def compute(raw: str):
            x = yield from Result.try_(lambda: int(raw))
            y = yield from Result.predicate(lambda n: n > 0)(x)
            return Result.ok(x + y)

        compute('2')   # Ok(4)
        compute('-1')  # Err(FailedPredicateError(-1))
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[Any, Any]:
        output = wrapped(*args, **kwargs)
        if isinstance(output, Result):
            return output
        if inspect.isgenerator(output):
            return run_result(output)
        return Ok(output)

    return wrapper(func)  # type: ignore[return-value]


def do_option[**P](func: Callable[P, Any]) -> Callable[P, Option[Any]]:
    """Decorator for generator-based propagation with Option.

    Plain functions are normalized: a returned Option passes through, None
    becomes Nothing and any other value is wrapped in Some.

    Example:
        ```python
        @do_option
        def full_name(user_id: str):
            user = yield from find_user(user_id)
            last = yield from Option.from_nullable(user.last_name)
            return Option.some(f'{user.first_name} {last}')
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Option[Any]:
        output = wrapped(*args, **kwargs)
        if isinstance(output, Option):
            return output
        if inspect.isgenerator(output):
            return run_option(output)
        return Option.from_nullable(output)

    return wrapper(func)  # type: ignore[return-value]


# --- Async interpreters ---


async def _resolve[C](step: Any, expected: type[C], kind: str) -> C:
    """Await a yielded step down to a sync container of type ``expected``."""
    while not isinstance(step, expected):
        if not inspect.isawaitable(step):
            panic(f'An async {kind} generator must yield {kind}s or awaitables of them, got {describe(step)}')
        step = await step
    return step


async def run_result_async(gen: AsyncGenerator[Any, Any]) -> Result[Any, Any]:
    """Drive an async Result generator.

    Each yielded step is awaited; an Ok resumes the generator with its value,
    an Err closes it and becomes the result. When the generator finishes, the
    last Ok step is the result (``Ok(None)`` if it yielded nothing).

    An exception escaping the generator or a step becomes
    ``Err(UnhandledException)``. A Panic propagates.
    """
    last: Result[Any, Any] = Ok(None)
    try:
        step = await anext(gen)
        while True:
            outcome = await _resolve(step, Result, 'Result')
            if isinstance(outcome, Err):
                return outcome
            last = outcome
            step = await gen.asend(outcome.value)
    except StopAsyncIteration:
        return last
    except Exception as exc:
        capture('AsyncResult.use', exc)
        return Err(UnhandledException(str(exc), cause=exc))
    finally:
        await gen.aclose()


async def run_option_async(gen: AsyncGenerator[Any, Any]) -> Option[Any]:
    """Drive an async Option generator.

    Same protocol as ``run_result_async``; any failure (Nothing step or
    escaping exception) gives Nothing. An empty generator gives Nothing.
    """
    last: Option[Any] = Nothing
    try:
        step = await anext(gen)
        while True:
            outcome = await _resolve(step, Option, 'Option')
            if isinstance(outcome, NothingType):
                return outcome
            last = outcome
            step = await gen.asend(outcome.value)
    except StopAsyncIteration:
        return last
    except Exception as exc:
        capture('AsyncOption.use', exc)
        return Nothing
    finally:
        await gen.aclose()


async def _settle_result(output: Any) -> Result[Any, Any]:
    if inspect.isasyncgen(output):
        return await run_result_async(output)
    try:
        while inspect.isawaitable(output) and not isinstance(output, Result):
            output = await output
    except Exception as exc:
        capture('AsyncResult.fn', exc)
        return Err(UnhandledException(str(exc), cause=exc))
    return output if isinstance(output, Result) else Ok(output)


async def _settle_option(output: Any) -> Option[Any]:
    if inspect.isasyncgen(output):
        return await run_option_async(output)
    try:
        while inspect.isawaitable(output) and not isinstance(output, Option):
            output = await output
    except Exception as exc:
        capture('AsyncOption.fn', exc)
        return Nothing
    return output if isinstance(output, Option) else Option.from_nullable(output)


def do_async[**P](func: Callable[P, Any]) -> Callable[P, AsyncResult[Any, Any]]:
    """Async decorator for generator-based propagation with Result.

    The decorated function returns a lazy ``AsyncResult``: nothing runs until
    it is awaited, and every await runs the function again.

    Accepts async generator functions (interpreted with ``run_result_async``)
    and coroutine functions (the awaited value is normalized like ``do``).
    A raised exception becomes ``Err(UnhandledException)``.

    Example:
        ```python
        @do_async
        async def compute():
            x = yield fetch_x()       # AsyncResult, awaitable or Result
            y = yield fetch_y(x)
            yield Result.ok(x + y)    # final result

        await compute()  # Ok(...) or the first Err
        ```
    """
    from klaw_containers.async_.result import AsyncResult

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> AsyncResult[Any, Any]:
        async def task() -> Result[Any, Any]:
            try:
                output = wrapped(*args, **kwargs)
            except Exception as exc:
                capture('AsyncResult.fn', exc)
                return Err(UnhandledException(str(exc), cause=exc))
            return await _settle_result(output)

        return AsyncResult(task)

    return wrapper(func)  # type: ignore[return-value]


def do_option_async[**P](func: Callable[P, Any]) -> Callable[P, AsyncOption[Any]]:
    """Async decorator for generator-based propagation with Option.

    Like ``do_async``, but failures (a Nothing step, a None result or a raised
    exception) give Nothing.
    """
    from klaw_containers.async_.option import AsyncOption

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> AsyncOption[Any]:
        async def task() -> Option[Any]:
            try:
                output = wrapped(*args, **kwargs)
            except Exception as exc:
                capture('AsyncOption.fn', exc)
                return Nothing
            return await _settle_option(output)

        return AsyncOption(task)

    return wrapper(func)  # type: ignore[return-value]

