"""AsyncResult: a lazy, re-runnable computation resolving to a Result.

AsyncResult wraps a zero-argument task factory returning an awaitable of a
Result. Building and chaining never run anything; ``await`` runs the whole
chain and gives back the sync Result. Because the factory is called on every
await, an AsyncResult can be awaited any number of times.

Example:
    ```python
    async def fetch_user(user_id: str) -> Result[User, NotFound]:
        ...

    summary = (
        AsyncResult.fn(fetch_user)('u_1')
        .and_then(load_orders)              # may return a Result or AsyncResult
        .map(lambda orders: len(orders))
    )
    await summary           # Ok(3)
    await summary.unwrap()  # 3
    ```
"""

from __future__ import annotations

import inspect
import operator
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator, Iterable
from typing import TYPE_CHECKING, Any

from klaw_containers._internal.concurrency import gather, gather_settled
from klaw_containers._internal.defects import ainvoke, capture, ensure, invoke
from klaw_containers.exceptions import UnhandledException, panic
from klaw_containers.types.do import DoContext
from klaw_containers.types.result import Err, Ok, Result

if TYPE_CHECKING:
    from klaw_containers.async_.option import AsyncOption
    from klaw_containers.types.option import Option

__all__ = ['AsyncResult', 'ResultResource']


class _DoEntry:
    __slots__ = ()

    def __get__(self, instance: object, owner: type | None = None) -> AsyncResult[DoContext, Any]:
        return AsyncResult.ok(DoContext())


async def _as_result(value: AsyncResult[Any, Any] | Result[Any, Any]) -> Result[Any, Any]:
    if isinstance(value, Result):
        return value
    return await value


def _context(result: Ok[Any], operation: str) -> DoContext:
    if not isinstance(result.value, DoContext):
        panic(f'AsyncResult.{operation} can only be used on an AsyncResult started with AsyncResult.Do or bind_to')
    return result.value


class AsyncResult[T, E]:
    """Async-aware Result for composing async operations that may fail.

    Chain methods return new AsyncResult instances and run nothing. Terminal
    methods (``unwrap``, ``match``, ``contains``...) are coroutines.

    Attributes:
        _task: Factory of the awaitable producing the Result.
    """

    __slots__ = ('_task',)

    Do = _DoEntry()

    def __init__(self, task: Callable[[], Awaitable[Result[T, E]]]) -> None:
        """Create an AsyncResult from a task factory.

        Args:
            task: Zero-argument callable returning an awaitable of a Result.
                Called once per await.
        """
        self._task = task

    def __await__(self) -> Generator[Any, Any, Result[T, E]]:
        return self._task().__await__()

    def __repr__(self) -> str:
        return 'AsyncResult(<pending>)'

    # --- Factories ---

    @classmethod
    def from_result(cls, result: Result[T, E]) -> AsyncResult[T, E]:
        """Create an AsyncResult resolving to ``result``."""

        async def _result() -> Result[T, E]:
            return result

        return cls(_result)

    @classmethod
    def ok(cls, value: T = None) -> AsyncResult[T, Any]:  # type: ignore[assignment]
        """Create an AsyncResult resolving to Ok(value)."""
        return cls.from_result(Ok(value))

    of = ok

    @classmethod
    def err(cls, error: E) -> AsyncResult[Any, E]:
        """Create an AsyncResult resolving to Err(error)."""
        return cls.from_result(Err(error))

    @classmethod
    def from_nullable(cls, value: T | None, on_nullable: Callable[[], Any] | None = None) -> AsyncResult[T, Any]:
        """Async counterpart of ``Result.from_nullable``."""
        return cls.from_result(Result.from_nullable(value, on_nullable))

    @classmethod
    def from_falsy(cls, value: T, on_falsy: Callable[[T], Any] | None = None) -> AsyncResult[T, Any]:
        """Async counterpart of ``Result.from_falsy``."""
        return cls.from_result(Result.from_falsy(value, on_falsy))

    @classmethod
    def from_option(cls, option: Option[T], on_nothing: Callable[[], Any] | None = None) -> AsyncResult[T, Any]:
        """Async counterpart of ``Result.from_option``."""
        return cls.from_result(Result.from_option(option, on_nothing))

    @classmethod
    def from_async_option(
        cls,
        option: AsyncOption[T],
        on_nothing: Callable[[], Any] | None = None,
    ) -> AsyncResult[T, Any]:
        """Convert an AsyncOption, mapping Nothing to an error."""

        async def _converted() -> Result[T, Any]:
            return Result.from_option(await option, on_nothing)

        return cls(_converted)

    @classmethod
    def try_(
        cls,
        f: Callable[[], Awaitable[T] | T],
        on_throw: Callable[[Exception], Any] | None = None,
    ) -> AsyncResult[T, Any]:
        """Run ``f`` (usually a coroutine function) and capture its failure in Err.

        Args:
            f: Zero-argument callable. Its output is awaited if awaitable.
            on_throw: Maps the exception to the error value. Defaults to
                ``UnhandledException(str(exc), cause=exc)``.

        Example:
            ```python
            body = AsyncResult.try_(lambda: client.get(url))
            await body  # Ok(response) or Err(UnhandledException(...))
            ```
        """

        async def _tried() -> Result[T, Any]:
            try:
                value = f()
                while inspect.isawaitable(value):
                    value = await value
            except Exception as exc:
                capture('AsyncResult.try_', exc)
                default = UnhandledException(str(exc), cause=exc)
                if on_throw is None:
                    return Err(default)
                error = invoke('A defect occurred while mapping the exception of AsyncResult.try_', on_throw, exc)
                return Err(default if error is None else error)
            return Ok(value)

        return cls(_tried)

    @classmethod
    def predicate(
        cls,
        criteria: Callable[[T], bool],
        on_unfulfilled: Callable[[T], Any] | None = None,
    ) -> Callable[[T], AsyncResult[T, Any]]:
        """Build a constructor that validates values with ``criteria``."""

        def construct(value: T) -> AsyncResult[T, Any]:
            return cls.ok(value).filter(criteria, on_unfulfilled)

        return construct

    @staticmethod
    async def values[V](results: Iterable[AsyncResult[V, Any] | Result[V, Any]]) -> list[V]:
        """Await all inputs concurrently and collect the Ok values in input order.

        Inputs resolving to Err, or raising, are skipped. A Panic propagates.
        """
        settled = await gather_settled(_as_result(result) for result in results)
        return Result.values(outcome.value for outcome in settled if isinstance(outcome, Ok))

    @staticmethod
    def fn[**P](f: Callable[P, Any]) -> Callable[P, AsyncResult[Any, Any]]:
        """Wrap an async generator or coroutine function into one returning AsyncResult.

        See ``klaw_containers.decorators.do_async``.
        """
        from klaw_containers.decorators.do import do_async

        return do_async(f)

    @staticmethod
    def use(factory: Callable[[], AsyncGenerator[Any, Any]]) -> AsyncResult[Any, Any]:
        """Run an async generator of yielded steps as an AsyncResult.

        Example:
            ```python
            async def pipeline():
                user = yield fetch_user(user_id)
                yield Result.ok(user.name)

            await AsyncResult.use(pipeline)  # Ok('Ada')
            ```
        """
        from klaw_containers.decorators.do import do_async

        return do_async(factory)()

    @staticmethod
    def resource[R](value: R, on_rejected: Callable[[Exception], Any] | None = None) -> ResultResource[R]:
        """Wrap a resource whose operations may raise.

        Example:
            ```python
            db = AsyncResult.resource(connection, lambda e: DatabaseError(str(e)))
            rows = db.run(lambda conn: conn.fetch('SELECT 1'))
            ```
        """
        return ResultResource(value, on_rejected)

    @staticmethod
    def is_async_result(value: object) -> bool:
        return isinstance(value, AsyncResult)

    # --- Transformations ---

    def _then[U, F](self, f: Callable[[Result[T, E]], Result[U, F]]) -> AsyncResult[U, F]:
        async def _mapped() -> Result[U, F]:
            return f(await self)

        return AsyncResult(_mapped)

    def map[U](self, f: Callable[[T], U]) -> AsyncResult[U, E]:
        """Apply a sync function to the Ok value."""
        return self._then(lambda result: result.map(f))

    def map_err[F](self, f: Callable[[E], F]) -> AsyncResult[T, F]:
        """Apply a sync function to the Err value."""
        return self._then(lambda result: result.map_err(f))

    def map_both[U, F](self, *, ok: Callable[[T], U], err: Callable[[E], F]) -> AsyncResult[U, F]:
        """Apply ``ok`` or ``err`` depending on the variant."""
        return self._then(lambda result: result.map_both(ok=ok, err=err))

    def filter(
        self,
        predicate: Callable[[T], bool],
        on_unfulfilled: Callable[[T], Any] | None = None,
    ) -> AsyncResult[T, Any]:
        """Keep the Ok value if ``predicate`` holds, see ``Result.filter``."""
        return self._then(lambda result: result.filter(predicate, on_unfulfilled))

    def swap(self) -> AsyncResult[E, T]:
        """Exchange the Ok and Err channels."""
        return self._then(lambda result: result.swap())

    def bind_to(self, key: str) -> AsyncResult[DoContext, E]:
        """Start a do-notation context with the value bound to ``key``."""
        return self._then(lambda result: result.bind_to(key))

    def and_then[U, F](
        self,
        f: Callable[[T], Result[U, F] | AsyncResult[U, F] | Awaitable[Result[U, F]]],
    ) -> AsyncResult[U, E | F]:
        """Chain a function returning a Result, an AsyncResult or an awaitable of a Result.

        Example:
            ```python
            AsyncResult.ok(user_id).and_then(fetch_user).and_then(validate_user)
            ```
        """

        async def _chained() -> Result[U, E | F]:
            result = await self
            if isinstance(result, Err):
                return result
            output = await ainvoke('A defect occurred while chaining an AsyncResult', f, result.value)
            return ensure(output, Result, 'AsyncResult.and_then')

        return AsyncResult(_chained)

    def or_else[F](
        self,
        f: Callable[[E], Result[T, F] | AsyncResult[T, F] | Awaitable[Result[T, F]]],
    ) -> AsyncResult[T, F]:
        """Recover from an Err with a function returning a Result (sync or async)."""

        async def _recovered() -> Result[T, F]:
            result = await self
            if isinstance(result, Ok):
                return result
            output = await ainvoke('A defect occurred while recovering from an AsyncResult error', f, result.error)
            return ensure(output, Result, 'AsyncResult.or_else')

        return AsyncResult(_recovered)

    def zip[U, F](self, other: AsyncResult[U, F] | Result[U, F]) -> AsyncResult[tuple[T, U], E | F]:
        """Pair both values. Both sides run concurrently; the left Err wins."""

        async def _zipped() -> Result[tuple[T, U], E | F]:
            left, right = await gather([_as_result(self), _as_result(other)])
            return left.zip(right)

        return AsyncResult(_zipped)

    def zip_with[U, R, F](
        self,
        other: AsyncResult[U, F] | Result[U, F],
        f: Callable[[T, U], R],
    ) -> AsyncResult[R, E | F]:
        """Combine both values with ``f``. Both sides run concurrently."""

        async def _zipped() -> Result[R, E | F]:
            left, right = await gather([_as_result(self), _as_result(other)])
            return left.zip_with(right, f)

        return AsyncResult(_zipped)

    def inspect(self, f: Callable[[T], Any]) -> AsyncResult[T, E]:
        """Call ``f`` with the Ok value for its side effects; async callbacks are awaited."""

        async def _tapped() -> Result[T, E]:
            result = await self
            if isinstance(result, Ok):
                await ainvoke('A defect occurred while tapping an AsyncResult value', f, result.value)
            return result

        return AsyncResult(_tapped)

    def inspect_err(self, f: Callable[[E], Any]) -> AsyncResult[T, E]:
        """Call ``f`` with the Err value for its side effects; async callbacks are awaited."""

        async def _tapped() -> Result[T, E]:
            result = await self
            if isinstance(result, Err):
                await ainvoke('A defect occurred while tapping an AsyncResult error', f, result.error)
            return result

        return AsyncResult(_tapped)

    # --- Do-notation ---

    def bind(
        self,
        key: str,
        f: Callable[[DoContext], Result[Any, Any] | AsyncResult[Any, Any] | Awaitable[Result[Any, Any]]],
    ) -> AsyncResult[DoContext, Any]:
        """Bind the value of the (possibly async) Result returned by ``f`` to ``key``."""

        async def _bound() -> Result[DoContext, Any]:
            result = await self
            if isinstance(result, Err):
                return result
            ctx = _context(result, 'bind')
            output = await ainvoke(f'A defect occurred while binding "{key}" in AsyncResult.bind', f, ctx)
            bound = ensure(output, Result, 'AsyncResult.bind')
            return result.bind(key, lambda _: bound)

        return AsyncResult(_bound)

    def let(self, key: str, f: Callable[[DoContext], Any]) -> AsyncResult[DoContext, Any]:
        """Bind the raw (or awaited) value returned by ``f`` to ``key``."""

        async def _bound() -> Result[DoContext, Any]:
            result = await self
            if isinstance(result, Err):
                return result
            ctx = _context(result, 'let')
            output = await ainvoke(f'A defect occurred while binding "{key}" in AsyncResult.let', f, ctx)
            return result.let(key, lambda _: output)

        return AsyncResult(_bound)

    # --- Elimination ---

    async def match[R](self, *, ok: Callable[[T], R], err: Callable[[E], R]) -> R:
        """Await the Result and call ``ok`` or ``err``; an awaitable outcome is awaited."""
        result = await self
        return await ainvoke('A defect occurred while matching an AsyncResult', lambda: result.match(ok=ok, err=err))

    async def unwrap(self) -> T:
        """Await and return the Ok value, raising Panic on Err."""
        return (await self).unwrap()

    async def unwrap_err(self) -> E:
        """Await and return the Err value, raising Panic on Ok."""
        return (await self).unwrap_err()

    async def unwrap_or[U](self, default: U) -> T | U:
        return (await self).unwrap_or(default)

    async def unwrap_or_else[U](self, f: Callable[[E], U]) -> T | U:
        return (await self).unwrap_or_else(f)

    async def unwrap_or_none(self) -> T | None:
        return (await self).unwrap_or_none()

    async def expect(self, on_err: str | Callable[[E], BaseException]) -> T:
        """Await and return the Ok value, raising the caller-supplied failure on Err."""
        return (await self).expect(on_err)

    async def merge(self) -> T | E:
        return (await self).merge()

    async def contains(self, predicate: Callable[[T], bool]) -> bool:
        return (await self).contains(predicate)

    async def to_list(self) -> list[T]:
        return (await self).to_list()

    async def equals(
        self,
        other: AsyncResult[T, E] | Result[T, E],
        eq: Callable[[T, T], bool] = operator.eq,
        err_eq: Callable[[E, E], bool] = operator.eq,
    ) -> bool:
        """Await both sides and compare them like ``Result.equals``."""
        left, right = await gather([_as_result(self), _as_result(other)])
        return left.equals(right, eq, err_eq)


class ResultResource[R]:
    """A resource whose operations are run under ``AsyncResult.try_``."""

    __slots__ = ('_on_rejected', '_value')

    def __init__(self, value: R, on_rejected: Callable[[Exception], Any] | None = None) -> None:
        self._value = value
        self._on_rejected = on_rejected

    def run[T](self, f: Callable[[R], Awaitable[T] | T]) -> AsyncResult[T, Any]:
        """Run ``f`` with the resource; a raised or rejected exception becomes Err."""
        value = self._value
        return AsyncResult.try_(lambda: f(value), self._on_rejected)
