"""DoContext: the immutable record threaded through do-notation chains."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, NoReturn

from klaw_containers._config import get_config
from klaw_containers.exceptions import panic

__all__ = ['DoContext']


class DoContext(Mapping[str, Any]):
    """Immutable mapping of names bound so far in a do-notation chain.

    Values are reachable both as items and as attributes. Each ``bind``/``let``
    produces a new context through ``with_``; earlier contexts stay valid for
    any closure that captured them.

    Examples:
        >>> ctx = DoContext().with_('a', 2).with_('b', 5)
        >>> ctx.a + ctx['b']
        7
        >>> dict(ctx)
        {'a': 2, 'b': 5}
    """

    __slots__ = ('_data',)

    _data: dict[str, Any]

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, '_data', dict(data) if data else {})

    def with_(self, key: str, value: Any) -> DoContext:
        """Return a new context with ``key`` bound to ``value``.

        Raises:
            Panic: If ``key`` is already bound and ``strict_do_keys`` is enabled.
        """
        if key in self._data and get_config().strict_do_keys:
            panic(f'Key "{key}" is already bound in this do-notation context')
        return DoContext({**self._data, key: value})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __getattr__(self, name: str) -> Any:
        if name == '_data':
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> NoReturn:
        raise AttributeError('DoContext is immutable')

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f'DoContext({self._data!r})'
