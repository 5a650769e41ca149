"""@safe and @safe_async decorators for catching exceptions."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, overload

import wrapt

from klaw_containers._internal.defects import capture, invoke
from klaw_containers.types.result import Err, Ok, Result

__all__ = ['safe', 'safe_async']


@overload
def safe[**P, T](
    func: Callable[P, T],
) -> Callable[P, Result[T, Exception]]: ...


@overload
def safe[**P, T](
    func: None = None,
    *,
    exceptions: tuple[type[Exception], ...] | None = None,
    on_throw: Callable[[Exception], Any] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, Result[T, Any]]]: ...


def safe[**P, T](
    func: Callable[P, T] | None = None,
    *,
    exceptions: tuple[type[Exception], ...] | None = None,
    on_throw: Callable[[Exception], Any] | None = None,
) -> Any:
    """Decorator that catches exceptions and returns Err.

    Unlike ``Result.lift``, the error is the exception itself (or whatever
    ``on_throw`` maps it to), and only the listed exception types are caught.
    A Panic is never caught.

    Can be used with or without arguments:
        @safe
        def risky(): ...

        @safe(exceptions=(ValueError, TypeError))
        def specific(): ...

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).
        on_throw: Maps the caught exception to the error value.

    Returns:
        A wrapped function that returns Result[T, E] instead of T.

    Example:
        ```python
        @safe
        def divide(a: int, b: int) -> float:
            return a / b
        divide(10, 2)
        # Ok(5.0)
        divide(10, 0)
        # Err(ZeroDivisionError('division by zero'))
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        try:
            result = wrapped(*args, **kwargs)
        except catch as e:
            capture(f'safe({wrapped.__qualname__})', e)
            if on_throw is None:
                return Err(e)
            return Err(invoke('A defect occurred while mapping the exception of @safe', on_throw, e))
        return Ok(result)

    if func is not None:
        return wrapper(func)
    return wrapper


@overload
def safe_async[**P, T](
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[Result[T, Exception]]]: ...


@overload
def safe_async[**P, T](
    func: None = None,
    *,
    exceptions: tuple[type[Exception], ...] | None = None,
    on_throw: Callable[[Exception], Any] | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Result[T, Any]]]]: ...


def safe_async[**P, T](
    func: Callable[P, Awaitable[T]] | None = None,
    *,
    exceptions: tuple[type[Exception], ...] | None = None,
    on_throw: Callable[[Exception], Any] | None = None,
) -> Any:
    """Async decorator that catches exceptions and returns Err.

    Args:
        func: The async function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).
        on_throw: Maps the caught exception to the error value.

    Returns:
        A wrapped async function that returns Result[T, E] instead of T.

    Example:
        ```python
        @safe_async(exceptions=(TimeoutError,))
        async def fetch(url: str) -> str:
            return await http_get(url)
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, Awaitable[T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        try:
            result = await wrapped(*args, **kwargs)
        except catch as e:
            capture(f'safe_async({wrapped.__qualname__})', e)
            if on_throw is None:
                return Err(e)
            return Err(invoke('A defect occurred while mapping the exception of @safe_async', on_throw, e))
        return Ok(result)

    if func is not None:
        return wrapper(func)
    return wrapper
