"""AsyncOption: a lazy, re-runnable computation resolving to an Option."""

from __future__ import annotations

import inspect
import operator
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator, Iterable
from typing import TYPE_CHECKING, Any

from klaw_containers._internal.concurrency import gather, gather_settled
from klaw_containers._internal.defects import ainvoke, capture, ensure
from klaw_containers.exceptions import panic
from klaw_containers.types.do import DoContext
from klaw_containers.types.option import Nothing, NothingType, Option, Some
from klaw_containers.types.result import Ok

if TYPE_CHECKING:
    from klaw_containers.async_.result import AsyncResult
    from klaw_containers.types.result import Result

__all__ = ['AsyncOption', 'OptionResource']


class _DoEntry:
    __slots__ = ()

    def __get__(self, instance: object, owner: type | None = None) -> AsyncOption[DoContext]:
        return AsyncOption.some(DoContext())


async def _as_option(value: AsyncOption[Any] | Option[Any]) -> Option[Any]:
    if isinstance(value, Option):
        return value
    return await value


def _context(option: Some[Any], operation: str) -> DoContext:
    if not isinstance(option.value, DoContext):
        panic(f'AsyncOption.{operation} can only be used on an AsyncOption started with AsyncOption.Do or bind_to')
    return option.value


class AsyncOption[T]:
    """Async-aware Option for composing async lookups that may find nothing.

    Same model as ``AsyncResult``: chain methods build a new AsyncOption and
    run nothing, ``await`` runs the chain and returns the sync Option, and
    every await runs the chain again.

    Example:
        ```python
        nickname = (
            AsyncOption.fn(find_user)('u_1')
            .map(lambda user: user.nickname)   # None becomes Nothing
            .filter(lambda nick: len(nick) > 2)
        )
        await nickname.unwrap_or('anonymous')
        ```
    """

    __slots__ = ('_task',)

    Do = _DoEntry()

    def __init__(self, task: Callable[[], Awaitable[Option[T]]]) -> None:
        self._task = task

    def __await__(self) -> Generator[Any, Any, Option[T]]:
        return self._task().__await__()

    def __repr__(self) -> str:
        return 'AsyncOption(<pending>)'

    # --- Factories ---

    @classmethod
    def from_option(cls, option: Option[T]) -> AsyncOption[T]:
        """Create an AsyncOption resolving to ``option``."""

        async def _option() -> Option[T]:
            return option

        return cls(_option)

    @classmethod
    def some(cls, value: T) -> AsyncOption[T]:
        return cls.from_option(Some(value))

    of = some

    @classmethod
    def none(cls) -> AsyncOption[Any]:
        return cls.from_option(Nothing)

    @classmethod
    def from_nullable(cls, value: T | None) -> AsyncOption[T]:
        return cls.from_option(Option.from_nullable(value))

    @classmethod
    def from_falsy(cls, value: T) -> AsyncOption[T]:
        return cls.from_option(Option.from_falsy(value))

    @classmethod
    def from_result(cls, result: Result[T, Any]) -> AsyncOption[T]:
        return cls.from_option(Option.from_result(result))

    @classmethod
    def from_async_result(cls, result: AsyncResult[T, Any]) -> AsyncOption[T]:
        """Convert an AsyncResult, discarding its error."""

        async def _converted() -> Option[T]:
            return Option.from_result(await result)

        return cls(_converted)

    @classmethod
    def try_(cls, f: Callable[[], Awaitable[T | None] | T | None]) -> AsyncOption[T]:
        """Run ``f``; an exception (raised or awaited) or a None result gives Nothing.

        Example:
            ```python
            await AsyncOption.try_(lambda: cache.get(key))  # Some(...) or Nothing
            ```
        """

        async def _tried() -> Option[T]:
            try:
                value = f()
                while inspect.isawaitable(value):
                    value = await value
            except Exception as exc:
                capture('AsyncOption.try_', exc)
                return Nothing
            if isinstance(value, Option):
                return value
            return Option.from_nullable(value)

        return cls(_tried)

    @classmethod
    def predicate(cls, criteria: Callable[[T], bool]) -> Callable[[T], AsyncOption[T]]:
        """Build a constructor that keeps values satisfying ``criteria``."""

        def construct(value: T) -> AsyncOption[T]:
            return cls.some(value).filter(criteria)

        return construct

    @classmethod
    def first_some_of(cls, options: Iterable[AsyncOption[T] | Option[T]]) -> AsyncOption[T]:
        """Run all inputs concurrently and resolve to the first Some in input order.

        Inputs that raised are skipped. A Panic propagates.
        """
        pending = list(options)

        async def _first() -> Option[T]:
            settled = await gather_settled(_as_option(option) for option in pending)
            return Option.first_some_of(outcome.value for outcome in settled if isinstance(outcome, Ok))

        return cls(_first)

    @staticmethod
    async def values[V](options: Iterable[AsyncOption[V] | Option[V]]) -> list[V]:
        """Await all inputs concurrently and collect the Some values in input order."""
        settled = await gather_settled(_as_option(option) for option in options)
        return Option.values(outcome.value for outcome in settled if isinstance(outcome, Ok))

    @staticmethod
    def fn[**P](f: Callable[P, Any]) -> Callable[P, AsyncOption[Any]]:
        """Wrap an async generator or coroutine function into one returning AsyncOption.

        See ``klaw_containers.decorators.do_option_async``.
        """
        from klaw_containers.decorators.do import do_option_async

        return do_option_async(f)

    @staticmethod
    def use(factory: Callable[[], AsyncGenerator[Any, Any]]) -> AsyncOption[Any]:
        """Run an async generator of yielded steps as an AsyncOption."""
        from klaw_containers.decorators.do import do_option_async

        return do_option_async(factory)()

    @staticmethod
    def resource[R](value: R) -> OptionResource[R]:
        """Wrap a resource whose operations may raise or find nothing."""
        return OptionResource(value)

    @staticmethod
    def is_async_option(value: object) -> bool:
        return isinstance(value, AsyncOption)

    # --- Transformations ---

    def _then[U](self, f: Callable[[Option[T]], Option[U]]) -> AsyncOption[U]:
        async def _mapped() -> Option[U]:
            return f(await self)

        return AsyncOption(_mapped)

    def map[U](self, f: Callable[[T], U | None]) -> AsyncOption[U]:
        """Apply a sync function to the value. A None result becomes Nothing."""
        return self._then(lambda option: option.map(f))

    def filter(self, predicate: Callable[[T], bool]) -> AsyncOption[T]:
        return self._then(lambda option: option.filter(predicate))

    def bind_to(self, key: str) -> AsyncOption[DoContext]:
        return self._then(lambda option: option.bind_to(key))

    def and_then[U](
        self,
        f: Callable[[T], Option[U] | AsyncOption[U] | Awaitable[Option[U]]],
    ) -> AsyncOption[U]:
        """Chain a function returning an Option, an AsyncOption or an awaitable of an Option."""

        async def _chained() -> Option[U]:
            option = await self
            if isinstance(option, NothingType):
                return option
            output = await ainvoke('A defect occurred while chaining an AsyncOption', f, option.value)
            return ensure(output, Option, 'AsyncOption.and_then')

        return AsyncOption(_chained)

    def or_else(self, f: Callable[[], Option[T] | AsyncOption[T] | Awaitable[Option[T]]]) -> AsyncOption[T]:
        """Fall back to the (possibly async) Option returned by ``f`` when empty."""

        async def _recovered() -> Option[T]:
            option = await self
            if isinstance(option, Some):
                return option
            output = await ainvoke('A defect occurred while computing the fallback of an empty AsyncOption', f)
            return ensure(output, Option, 'AsyncOption.or_else')

        return AsyncOption(_recovered)

    def zip[U](self, other: AsyncOption[U] | Option[U]) -> AsyncOption[tuple[T, U]]:
        """Pair both values. Both sides run concurrently."""

        async def _zipped() -> Option[tuple[T, U]]:
            left, right = await gather([_as_option(self), _as_option(other)])
            return left.zip(right)

        return AsyncOption(_zipped)

    def zip_with[U, R](self, other: AsyncOption[U] | Option[U], f: Callable[[T, U], R | None]) -> AsyncOption[R]:
        """Combine both values with ``f``. Both sides run concurrently."""

        async def _zipped() -> Option[R]:
            left, right = await gather([_as_option(self), _as_option(other)])
            return left.zip_with(right, f)

        return AsyncOption(_zipped)

    def inspect(self, f: Callable[[T], Any]) -> AsyncOption[T]:
        """Call ``f`` with the value for its side effects; async callbacks are awaited."""

        async def _tapped() -> Option[T]:
            option = await self
            if isinstance(option, Some):
                await ainvoke('A defect occurred while tapping an AsyncOption value', f, option.value)
            return option

        return AsyncOption(_tapped)

    # --- Do-notation ---

    def bind(
        self,
        key: str,
        f: Callable[[DoContext], Option[Any] | AsyncOption[Any] | Awaitable[Option[Any]]],
    ) -> AsyncOption[DoContext]:
        """Bind the value of the (possibly async) Option returned by ``f`` to ``key``."""

        async def _bound() -> Option[DoContext]:
            option = await self
            if isinstance(option, NothingType):
                return option
            ctx = _context(option, 'bind')
            output = await ainvoke(f'A defect occurred while binding "{key}" in AsyncOption.bind', f, ctx)
            bound = ensure(output, Option, 'AsyncOption.bind')
            return option.bind(key, lambda _: bound)

        return AsyncOption(_bound)

    def let(self, key: str, f: Callable[[DoContext], Any]) -> AsyncOption[DoContext]:
        """Bind the raw (or awaited) value returned by ``f`` to ``key``; None gives Nothing."""

        async def _bound() -> Option[DoContext]:
            option = await self
            if isinstance(option, NothingType):
                return option
            ctx = _context(option, 'let')
            output = await ainvoke(f'A defect occurred while binding "{key}" in AsyncOption.let', f, ctx)
            return option.let(key, lambda _: output)

        return AsyncOption(_bound)

    # --- Elimination ---

    async def match[R](self, *, some: Callable[[T], R], none: Callable[[], R]) -> R:
        """Await the Option and call ``some`` or ``none``; an awaitable outcome is awaited."""
        option = await self
        return await ainvoke(
            'A defect occurred while matching an AsyncOption', lambda: option.match(some=some, none=none)
        )

    async def unwrap(self) -> T:
        """Await and return the value, raising Panic when empty."""
        return (await self).unwrap()

    async def unwrap_or[U](self, default: U) -> T | U:
        return (await self).unwrap_or(default)

    async def unwrap_or_else[U](self, f: Callable[[], U]) -> T | U:
        return (await self).unwrap_or_else(f)

    async def unwrap_or_none(self) -> T | None:
        return (await self).unwrap_or_none()

    async def expect(self, on_nothing: str | Callable[[], BaseException]) -> T:
        return (await self).expect(on_nothing)

    async def contains(self, predicate: Callable[[T], bool]) -> bool:
        return (await self).contains(predicate)

    async def to_list(self) -> list[T]:
        return (await self).to_list()

    async def equals(self, other: AsyncOption[T] | Option[T], eq: Callable[[T, T], bool] = operator.eq) -> bool:
        left, right = await gather([_as_option(self), _as_option(other)])
        return left.equals(right, eq)


class OptionResource[R]:
    """A resource whose operations are run under ``AsyncOption.try_``."""

    __slots__ = ('_value',)

    def __init__(self, value: R) -> None:
        self._value = value

    def run[T](self, f: Callable[[R], Awaitable[T | None] | T | None]) -> AsyncOption[T]:
        """Run ``f`` with the resource; an exception or a None result gives Nothing."""
        value = self._value
        return AsyncOption.try_(lambda: f(value))
