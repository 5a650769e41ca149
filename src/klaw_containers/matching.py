"""Exhaustive dispatch on literals and tagged values.

Python's ``match`` statement covers most needs; ``exhaustive`` is the
expression form for dispatch tables, with a loud failure for values no case
handles::

    exhaustive(state, {
        'IDLE': lambda s: 'waiting',
        'ERROR': lambda s: 'failed',
        '_': lambda s: 'busy',       # fallback
    })

    exhaustive(error, {             # dispatches on error.tag
        'UserNotFound': lambda e: 404,
        'Unauthorized': lambda e: 401,
    })
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, NoReturn

from klaw_containers._internal.defects import describe

__all__ = ['FALLBACK', 'corrupt', 'exhaustive', 'exhaustive_tag']

FALLBACK = '_'
"""Case key used when no other case matches."""

_MISSING = object()


def corrupt(value: object) -> NoReturn:
    """Signal a value that should be impossible at this point.

    Raises:
        TypeError: Always.
    """
    raise TypeError(f'Internal Error: encountered impossible value "{describe(value)}"')


def _field(value: object, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key, _MISSING)
    return getattr(value, key, _MISSING)


def _dispatch[R](value: Any, discriminant: Any, cases: Mapping[Any, Callable[[Any], R]]) -> R:
    handler = cases.get(discriminant) if discriminant is not _MISSING else None
    if handler is None:
        handler = cases.get(FALLBACK)
    if handler is None:
        corrupt(value)
    return handler(value)


def exhaustive[R](value: Any, cases: Mapping[Any, Callable[[Any], R]]) -> R:
    """Dispatch ``value`` to the matching case handler.

    Literals (``str``, ``int``, ``bool``) are looked up directly; booleans also
    match the ``'true'``/``'false'`` keys. Other values are dispatched on their
    ``_tag`` (mapping key or attribute), falling back to ``tag``, so
    TaggedErrors, containers and serialized containers all work.

    Args:
        value: The value to dispatch.
        cases: Handlers keyed by literal or tag. ``'_'`` is the fallback.

    Returns:
        What the selected handler returns. Handlers receive ``value``.

    Raises:
        TypeError: If no case matches and there is no fallback.
    """
    if isinstance(value, bool):
        key: Any = value if value in cases else str(value).lower()
        return _dispatch(value, key, cases)
    if isinstance(value, str | int):
        return _dispatch(value, value, cases)
    tag = _field(value, '_tag')
    if tag is _MISSING:
        tag = _field(value, 'tag')
    return _dispatch(value, tag, cases)


def exhaustive_tag[R](value: Any, key: str, cases: Mapping[Any, Callable[[Any], R]]) -> R:
    """Dispatch ``value`` on the discriminant stored under ``key``.

    Example:
        ```python
        exhaustive_tag({'state': 'SUCCESS', 'data': 1}, 'state', {
            'SUCCESS': lambda v: v['data'],
            '_': lambda v: None,
        })  # 1
        ```
    """
    return _dispatch(value, _field(value, key), cases)
