"""Builtin collections whose lookups return Option instead of None or -1.

Example:
    ```python
    users = option_dict({'u_1': ada})
    users.get('u_1').map(lambda u: u.name)  # Some('Ada')
    users.get('u_2')                        # Nothing

    queue = option_list([3, 1, 2])
    queue.find(lambda n: n > 2)             # Some(3)
    queue.index_of(7)                       # Nothing
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from klaw_containers._internal.defects import invoke
from klaw_containers.types.option import Nothing, Option, Some

__all__ = ['OptionDict', 'OptionList', 'option_dict', 'option_list']


def _index(position: int) -> Option[int]:
    return Some(position) if position >= 0 else Nothing


class OptionDict[K, V](dict[K, V]):
    """A dict whose ``get`` returns an Option. Stored None values read as Nothing."""

    def get(self, key: K) -> Option[V]:  # type: ignore[override]
        return Option.from_nullable(super().get(key))


class OptionList[T](list[T]):
    """A list whose searching and removing methods return Options.

    Methods inherited from ``list`` keep their usual behaviour; ``pop`` is the
    only one overridden, and returns Nothing on an empty list instead of
    raising.
    """

    def at(self, index: int) -> Option[T]:
        """Return the item at ``index`` (negative counts from the end)."""
        if -len(self) <= index < len(self):
            return Option.from_nullable(self[index])
        return Nothing

    def find(self, predicate: Callable[[T], bool]) -> Option[T]:
        """Return the first item satisfying ``predicate``."""
        for item in self:
            if invoke('A defect occurred while searching an OptionList', predicate, item):
                return Option.from_nullable(item)
        return Nothing

    def find_index(self, predicate: Callable[[T], bool]) -> Option[int]:
        """Return the position of the first item satisfying ``predicate``."""
        for position, item in enumerate(self):
            if invoke('A defect occurred while searching an OptionList', predicate, item):
                return Some(position)
        return Nothing

    def index_of(self, value: T, start: int = 0) -> Option[int]:
        """Return the position of the first item equal to ``value``, from ``start``."""
        try:
            return _index(self.index(value, start))
        except ValueError:
            return Nothing

    def last_index_of(self, value: T) -> Option[int]:
        """Return the position of the last item equal to ``value``."""
        for position in range(len(self) - 1, -1, -1):
            if self[position] == value:
                return Some(position)
        return Nothing

    def pop(self, index: int = -1) -> Option[T]:  # type: ignore[override]
        """Remove and return the item at ``index``; Nothing when out of range."""
        if not -len(self) <= index < len(self):
            return Nothing
        return Option.from_nullable(super().pop(index))

    def shift(self) -> Option[T]:
        """Remove and return the first item."""
        return self.pop(0)


def option_dict[K, V](items: Mapping[K, V] | Iterable[tuple[K, V]] | None = None, **kwargs: Any) -> OptionDict[Any, Any]:
    """Build an OptionDict like ``dict(items, **kwargs)``."""
    if items is None:
        return OptionDict(**kwargs)
    return OptionDict(items, **kwargs)


def option_list[T, U](items: Iterable[T], f: Callable[[T], U] | None = None) -> OptionList[Any]:
    """Build an OptionList from ``items``, optionally mapping each through ``f``."""
    if f is None:
        return OptionList(items)
    return OptionList(f(item) for item in items)
