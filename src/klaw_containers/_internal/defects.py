"""The defect boundary: run user callbacks and turn their exceptions into Panic.

Containers model *expected* absence and failure. An exception escaping a user
callback (the function given to ``map``, ``filter``, ``match``...) is a bug, so
it is re-raised as a ``Panic`` naming the operation instead of being folded
into ``Nothing``/``Err``. Only the dedicated ``try_``/``fn``/``lift`` boundaries
convert exceptions into values, and they use ``capture`` to do so.
"""

from __future__ import annotations

import inspect
import reprlib
from collections.abc import Callable
from typing import Any

from klaw_containers._logging import get_logger
from klaw_containers.exceptions import Panic

__all__ = ['ainvoke', 'capture', 'describe', 'ensure', 'invoke']

logger = get_logger(__name__)

_repr = reprlib.Repr()
_repr.maxstring = 80
_repr.maxother = 80


def describe(value: object) -> str:
    """Render a payload for a panic message."""
    if isinstance(value, str | int | float | bool):
        return str(value)
    if isinstance(value, BaseException):
        return str(value) or type(value).__name__
    return _repr.repr(value)


def invoke[R](message: str, f: Callable[..., R], *args: Any) -> R:
    """Call ``f(*args)``, re-raising any exception as a Panic carrying ``message``.

    A Panic raised by ``f`` (for instance a nested ``unwrap`` on the wrong
    variant) propagates unchanged.

    Args:
        message: Describes the operation that failed, e.g. the container method.
        f: The user callback.
        *args: Arguments forwarded to ``f``.

    Returns:
        Whatever ``f`` returns.

    Raises:
        Panic: If ``f`` raised.
    """
    try:
        return f(*args)
    except Panic:
        raise
    except Exception as exc:
        logger.debug('container.defect', operation=message, error=repr(exc))
        raise Panic(message, cause=exc) from exc


def capture(boundary: str, exc: Exception) -> Exception:
    """Record an exception converted into a value at a ``try_``-style boundary.

    Re-raises Panics: a defect crossing a boundary stays a defect.

    Returns:
        ``exc`` unchanged, for use in the failure channel.
    """
    if isinstance(exc, Panic):
        raise exc
    logger.debug('container.exception_captured', boundary=boundary, error=repr(exc))
    return exc


async def ainvoke(message: str, f: Callable[..., Any], *args: Any) -> Any:
    """Like ``invoke``, then await the output (repeatedly) while it is awaitable.

    Async containers are awaitable, so a callback returning one is run to its
    sync container. An exception raised while awaiting is a defect too.
    """
    output = invoke(message, f, *args)
    while inspect.isawaitable(output):
        try:
            output = await output
        except Panic:
            raise
        except Exception as exc:
            logger.debug('container.defect', operation=message, error=repr(exc))
            raise Panic(message, cause=exc) from exc
    return output


def ensure[C](value: object, expected: type[C], operation: str) -> C:
    """Return ``value`` if it is an ``expected`` container, otherwise Panic."""
    if not isinstance(value, expected):
        raise Panic(f'{operation} expected {expected.__name__}, got {describe(value)}')
    return value
