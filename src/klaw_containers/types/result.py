"""Result type: Ok[T] | Err[E] for explicit error handling.

``Result`` is the common base of both variants and the namespace of the
factories. The error channel holds any value; the factories default to the
tagged errors of ``klaw_containers.exceptions`` (``NoValueError``,
``UnhandledException``, ``FailedPredicateError``).

Example:
    ```python
    from klaw_containers import Result

    def parse_port(raw: str) -> Result[int, UnhandledException]:
        return Result.try_(lambda: int(raw)).filter(lambda p: 0 < p < 65536)

    parse_port('8080').unwrap()       # 8080
    parse_port('http').is_err()       # True
    ```
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Generator, Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, NoReturn, TypeIs

import msgspec
import wrapt

from klaw_containers._internal.defects import capture, describe, ensure, invoke
from klaw_containers.exceptions import FailedPredicateError, NoValueError, UnhandledException, panic
from klaw_containers.types.do import DoContext

if TYPE_CHECKING:
    from klaw_containers.types.option import Option

__all__ = ['Err', 'Ok', 'Result']


class _DoEntry:
    """Class attribute producing a fresh ``Ok(DoContext())`` on every access."""

    __slots__ = ()

    def __get__(self, instance: object, owner: type | None = None) -> Ok[DoContext]:
        return Ok(DoContext())


def _or_default(error: Any, default: Callable[[], Any]) -> Any:
    return default() if error is None else error


class Result[T, E](msgspec.Struct, frozen=True, gc=False, tag_field='_tag'):
    """Base of the Result variants and namespace of the Result factories."""

    Do = _DoEntry()
    """Starts a do-notation chain: ``Result.Do.bind('user', ...)``."""

    @property
    def tag(self) -> str:
        """The discriminant: ``'Ok'`` or ``'Error'``."""
        return self.__struct_config__.tag  # type: ignore[return-value]

    # --- Factories ---

    @staticmethod
    def ok[V](value: V = None) -> Result[V, Any]:  # type: ignore[assignment]
        """Construct an Ok. Without an argument the value is None."""
        return Ok(value)

    of = ok

    @staticmethod
    def err[F](error: F) -> Result[Any, F]:
        """Construct an Err holding ``error``."""
        return Err(error)

    @staticmethod
    def from_nullable[V](
        value: V | None,
        on_nullable: Callable[[], Any] | None = None,
    ) -> Result[V, Any]:
        """Return Ok(value), or an Err when ``value`` is None.

        Args:
            value: The nullable value.
            on_nullable: Builds the error. Defaults to ``NoValueError()``.
        """
        if value is not None:
            return Ok(value)
        if on_nullable is None:
            return Err(NoValueError())
        error = invoke('A defect occurred while building the error of Result.from_nullable', on_nullable)
        return Err(_or_default(error, NoValueError))

    @staticmethod
    def from_falsy[V](value: V, on_falsy: Callable[[V], Any] | None = None) -> Result[V, Any]:
        """Return Ok(value) for truthy values, an Err otherwise.

        ``on_falsy`` receives the falsy value. Defaults to ``NoValueError()``.
        """
        if value:
            return Ok(value)
        if on_falsy is None:
            return Err(NoValueError())
        error = invoke('A defect occurred while building the error of Result.from_falsy', on_falsy, value)
        return Err(_or_default(error, NoValueError))

    @staticmethod
    def from_option[V](option: Option[V], on_nothing: Callable[[], Any] | None = None) -> Result[V, Any]:
        """Convert Some(v) into Ok(v) and Nothing into an Err."""
        from klaw_containers.types.option import Some

        if isinstance(option, Some):
            return Ok(option.value)
        if on_nothing is None:
            return Err(NoValueError())
        error = invoke('A defect occurred while building the error of Result.from_option', on_nothing)
        return Err(_or_default(error, NoValueError))

    @staticmethod
    def try_[V](
        f: Callable[[], V],
        on_throw: Callable[[Exception], Any] | None = None,
    ) -> Result[V, Any]:
        """Call ``f`` and capture a raised exception in Err.

        Args:
            f: The computation.
            on_throw: Maps the exception to the error value. Defaults to
                ``UnhandledException(str(exc), cause=exc)``; a None return
                falls back to the default too.

        Raises:
            Panic: If ``f`` raised a Panic, or ``on_throw`` itself raised.

        Example:
            ```python
            Result.try_(lambda: json.loads(raw))
            Result.try_(lambda: json.loads(raw), lambda e: InvalidPayload(str(e)))
            ```
        """
        try:
            value = f()
        except Exception as exc:
            capture('Result.try_', exc)
            default = UnhandledException(str(exc), cause=exc)
            if on_throw is None:
                return Err(default)
            error = invoke('A defect occurred while mapping the exception of Result.try_', on_throw, exc)
            return Err(default if error is None else error)
        return Ok(value)

    @staticmethod
    def predicate[V](
        criteria: Callable[[V], bool],
        on_unfulfilled: Callable[[V], Any] | None = None,
    ) -> Callable[[V], Result[V, Any]]:
        """Build a constructor that validates values with ``criteria``."""

        def construct(value: V) -> Result[V, Any]:
            return Ok(value).filter(criteria, on_unfulfilled)

        return construct

    @staticmethod
    def lift[**P, V](
        f: Callable[P, V],
        on_throw: Callable[[Exception], Any] | None = None,
    ) -> Callable[P, Result[V, Any]]:
        """Turn a function that may raise into one returning Result.

        Example:
            ```python
            safe_int = Result.lift(int)
            safe_int('7')   # Ok(7)
            safe_int('x')   # Err(UnhandledException("invalid literal for int()..."))
            ```
        """

        @wrapt.decorator
        def wrapper(
            wrapped: Callable[P, V],
            instance: Any,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
        ) -> Result[V, Any]:
            return Result.try_(lambda: wrapped(*args, **kwargs), on_throw)

        return wrapper(f)  # type: ignore[return-value]

    @staticmethod
    def fn[**P, V](f: Callable[P, Any]) -> Callable[P, Result[V, Any]]:
        """Wrap a generator function (or a plain function) into one returning Result.

        See ``klaw_containers.decorators.do``.
        """
        from klaw_containers.decorators.do import do

        return do(f)

    @staticmethod
    def use[V, F](factory: Callable[[], Generator[Any, Any, Result[V, F]]]) -> Result[V, F]:
        """Run a generator of ``yield from`` steps and return its Result.

        The first Err short-circuits: the generator is closed and no later
        statement runs.

        Example:
            ```python
            def checkout():
                user = yield from find_user(user_id)
                cart = yield from load_cart(user)
                return Result.ok(cart.total())

            Result.use(checkout)
            ```
        """
        from klaw_containers.decorators.do import run_result

        return run_result(factory())

    @staticmethod
    def partition[V, F](results: Iterable[Result[V, F]]) -> tuple[list[V], list[F]]:
        """Split results into ``(values, errors)``, preserving order within each list."""
        values: list[V] = []
        errors: list[F] = []
        for result in results:
            if isinstance(result, Ok):
                values.append(result.value)
            elif isinstance(result, Err):
                errors.append(result.error)
        return values, errors

    @staticmethod
    def values[V](results: Iterable[Result[V, Any]]) -> list[V]:
        """Collect the values of the Ok results, preserving order."""
        return [result.value for result in results if isinstance(result, Ok)]

    @staticmethod
    def hydrate(obj: object) -> Result[Any, Any]:
        """Rebuild a Result from its serialized, tagged form.

        Accepts what ``msgspec.to_builtins`` produces for a Result. An existing
        Result is returned unchanged.

        Raises:
            Panic: If ``obj`` is neither a Result nor a tagged mapping.

        Example:
            ```python
            payload = msgspec.to_builtins(Ok(5))  # {'_tag': 'Ok', 'value': 5}
            Result.hydrate(payload)               # Ok(5)
            ```
        """
        match obj:
            case Result():
                return obj
            case {'_tag': 'Ok', 'value': value}:
                return Ok(value)
            case {'_tag': 'Error', 'error': error}:
                return Err(error)
            case Mapping():
                panic(f'Cannot hydrate a Result from a mapping tagged {describe(obj.get("_tag"))}')
            case _:
                panic(f'Cannot hydrate a Result from {describe(obj)}')

    @staticmethod
    def is_result(value: object) -> TypeIs[Result[Any, Any]]:
        """Return True if ``value`` is an Ok or an Err."""
        return isinstance(value, Result)


class Ok[T](Result[T, Any], tag='Ok'):
    """Success variant of Result containing a value of type T.

    Examples:
        >>> Ok(42).unwrap()
        42
        >>> Ok(42).map(lambda x: x * 2)
        Ok(84)
    """

    value: T

    def is_ok(self) -> TypeIs[Ok[T]]:
        """Return True since this is Ok."""
        return True

    def is_err(self) -> bool:
        """Return False since this is Ok."""
        return False

    # --- Do-notation ---

    def bind_to(self, key: str) -> Ok[DoContext]:
        """Start a do-notation context with the value bound to ``key``."""
        return Ok(DoContext({key: self.value}))

    def _context(self, operation: str) -> DoContext:
        if not isinstance(self.value, DoContext):
            panic(f'Result.{operation} can only be used on a Result started with Result.Do or bind_to')
        return self.value

    def bind(self, key: str, f: Callable[[DoContext], Result[Any, Any]]) -> Result[DoContext, Any]:
        """Bind the value of the Result returned by ``f`` to ``key``.

        Args:
            key: Name under which the value is stored. Must not be bound yet.
            f: Receives the context accumulated so far and returns a Result.

        Returns:
            Ok with the extended context, or the Err returned by ``f``.
        """
        ctx = self._context('bind')
        output = ensure(
            invoke(f'A defect occurred while binding "{key}" in Result.bind', f, ctx),
            Result,
            'Result.bind',
        )
        if isinstance(output, Ok):
            return Ok(ctx.with_(key, output.value))
        return output

    def let(self, key: str, f: Callable[[DoContext], Any]) -> Result[DoContext, Any]:
        """Bind the raw value returned by ``f`` to ``key``. None is a legal value."""
        ctx = self._context('let')
        output = invoke(f'A defect occurred while binding "{key}" in Result.let', f, ctx)
        return Ok(ctx.with_(key, output))

    # --- Transformations ---

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply ``f`` to the value."""
        return Ok(invoke("A defect occurred while mapping a Result's value", f, self.value))

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:  # noqa: ARG002
        """Return self unchanged since this is Ok."""
        return self

    def map_both[U](self, *, ok: Callable[[T], U], err: Callable[[Any], Any]) -> Ok[U]:
        """Apply ``ok`` to the value."""
        return Ok(invoke("A defect occurred while mapping a Result's value", ok, self.value))

    def and_then[U, F](self, f: Callable[[T], Result[U, F]]) -> Result[U, F]:
        """Apply a function returning a Result and flatten the result."""
        return ensure(
            invoke('A defect occurred while chaining a Result', f, self.value),
            Result,
            'Result.and_then',
        )

    def filter(
        self,
        predicate: Callable[[T], bool],
        on_unfulfilled: Callable[[T], Any] | None = None,
    ) -> Result[T, Any]:
        """Keep the value if ``predicate`` holds, otherwise fail.

        Args:
            predicate: The check.
            on_unfulfilled: Builds the error from the rejected value. Defaults
                to ``FailedPredicateError(value)``.
        """
        if invoke("A defect occurred while filtering a Result's value", predicate, self.value):
            return self
        if on_unfulfilled is None:
            return Err(FailedPredicateError(self.value))
        error = invoke('A defect occurred while building the error of Result.filter', on_unfulfilled, self.value)
        return Err(FailedPredicateError(self.value) if error is None else error)

    def or_else(self, f: Callable[[Any], Result[T, Any]]) -> Ok[T]:  # noqa: ARG002
        """Return self; the recovery is not called."""
        return self

    def swap(self) -> Err[T]:
        """Move the value into the error channel."""
        return Err(self.value)

    def zip[U, F](self, other: Result[U, F]) -> Result[tuple[T, U], F]:
        """Pair both values, or return ``other`` if it is an Err."""
        if isinstance(other, Ok):
            return Ok((self.value, other.value))
        return other

    def zip_with[U, R, F](self, other: Result[U, F], f: Callable[[T, U], R]) -> Result[R, F]:
        """Combine both values with ``f``, or return ``other`` if it is an Err."""
        if isinstance(other, Ok):
            return Ok(invoke('A defect occurred while zipping two Results', f, self.value, other.value))
        return other

    def inspect(self, f: Callable[[T], Any]) -> Ok[T]:
        """Call ``f`` with the value for its side effects and return self."""
        invoke(
            f'A defect occurred while tapping the Ok case of a Result containing "{describe(self.value)}"',
            f,
            self.value,
        )
        return self

    def inspect_err(self, f: Callable[[Any], Any]) -> Ok[T]:  # noqa: ARG002
        return self

    # --- Elimination ---

    def match[R](self, *, ok: Callable[[T], R], err: Callable[[Any], R]) -> R:
        """Call ``ok`` with the value."""
        return invoke(
            f'A defect occurred while matching the Ok case of a Result containing "{describe(self.value)}"',
            ok,
            self.value,
        )

    def unwrap(self) -> T:
        """Return the value."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Raise a Panic since there is no error.

        Raises:
            Panic: Always.
        """
        panic('called "Result.unwrap_err()" on an "Ok" value')

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        """Return the value, ignoring the default."""
        return self.value

    def unwrap_or_else(self, f: Callable[[Any], T]) -> T:  # noqa: ARG002
        """Return the value, ignoring the fallback function."""
        return self.value

    def unwrap_or_none(self) -> T | None:
        return self.value

    def expect(self, on_err: str | Callable[[Any], BaseException]) -> T:  # noqa: ARG002
        """Return the value, ignoring the failure description."""
        return self.value

    def merge(self) -> T:
        """Return the value (``merge`` collapses both channels)."""
        return self.value

    def contains(self, predicate: Callable[[T], bool]) -> bool:
        """Return whether the value satisfies ``predicate``."""
        return bool(
            invoke(
                "A defect occurred while checking if a Result's value satisfies a predicate",
                predicate,
                self.value,
            )
        )

    def equals(
        self,
        other: Result[T, Any],
        eq: Callable[[T, T], bool] = operator.eq,
        err_eq: Callable[[Any, Any], bool] = operator.eq,  # noqa: ARG002
    ) -> bool:
        """Compare with another Result, using ``eq`` on Ok values."""
        if not isinstance(other, Ok):
            return False
        return bool(invoke('A defect occurred while comparing Results', eq, self.value, other.value))

    def to_list(self) -> list[T]:
        """Return ``[value]``."""
        return [self.value]

    def iter(self) -> Iterator[T]:
        yield self.value

    def __iter__(self) -> Generator[NoReturn, Any, T]:
        # ``x = yield from Ok(v)`` evaluates to ``v`` without suspending.
        yield from ()
        return self.value

    def __repr__(self) -> str:
        return f'Ok({self.value!r})'


class Err[E](Result[Any, E], tag='Error'):
    """Error variant of Result containing an error of type E.

    Examples:
        >>> err = Err('something went wrong')
        >>> err.is_err()
        True
        >>> err.unwrap_or(0)
        0
    """

    error: E

    def is_ok(self) -> bool:
        """Return False since this is Err."""
        return False

    def is_err(self) -> TypeIs[Err[E]]:
        """Return True since this is Err."""
        return True

    def bind_to(self, key: str) -> Err[E]:  # noqa: ARG002
        return self

    def bind(self, key: str, f: Callable[[DoContext], Result[Any, Any]]) -> Err[E]:  # noqa: ARG002
        return self

    def let(self, key: str, f: Callable[[DoContext], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def map(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Apply ``f`` to the error."""
        return Err(invoke("A defect occurred while mapping a Result's error", f, self.error))

    def map_both[F](self, *, ok: Callable[[Any], Any], err: Callable[[E], F]) -> Err[F]:
        """Apply ``err`` to the error."""
        return Err(invoke("A defect occurred while mapping a Result's error", err, self.error))

    def and_then(self, f: Callable[[Any], Result[Any, Any]]) -> Err[E]:  # noqa: ARG002
        return self

    def filter(
        self,
        predicate: Callable[[Any], bool],  # noqa: ARG002
        on_unfulfilled: Callable[[Any], Any] | None = None,  # noqa: ARG002
    ) -> Err[E]:
        return self

    def or_else[U, F](self, f: Callable[[E], Result[U, F]]) -> Result[U, F]:
        """Recover by calling ``f`` with the error."""
        return ensure(
            invoke('A defect occurred while recovering from a Result error', f, self.error),
            Result,
            'Result.or_else',
        )

    def swap(self) -> Ok[E]:
        """Move the error into the value channel."""
        return Ok(self.error)

    def zip(self, other: Result[Any, Any]) -> Err[E]:  # noqa: ARG002
        return self

    def zip_with(self, other: Result[Any, Any], f: Callable[[Any, Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def inspect(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def inspect_err(self, f: Callable[[E], Any]) -> Err[E]:
        """Call ``f`` with the error for its side effects and return self."""
        invoke(
            f'A defect occurred while tapping the Error case of a Result containing "{describe(self.error)}"',
            f,
            self.error,
        )
        return self

    def match[R](self, *, ok: Callable[[Any], R], err: Callable[[E], R]) -> R:
        """Call ``err`` with the error."""
        return invoke(
            f'A defect occurred while matching the Error case of a Result containing "{describe(self.error)}"',
            err,
            self.error,
        )

    def unwrap(self) -> NoReturn:
        """Raise a Panic since there is no value.

        Raises:
            Panic: Always, chained to the error when it is an exception.
        """
        panic('called "Result.unwrap()" on an "Error" value', self.error)

    def unwrap_err(self) -> E:
        """Return the error."""
        return self.error

    def unwrap_or[U](self, default: U) -> U:
        """Return the default."""
        return default

    def unwrap_or_else[U](self, f: Callable[[E], U]) -> U:
        """Compute a fallback value from the error."""
        return invoke('A defect occurred while computing the fallback value of a failed Result', f, self.error)

    def unwrap_or_none(self) -> None:
        return None

    def expect(self, on_err: str | Callable[[E], BaseException]) -> NoReturn:
        """Raise the caller-supplied failure.

        Args:
            on_err: A message (raised as Panic) or a function mapping the
                error to the exception to raise.
        """
        if isinstance(on_err, str):
            panic(on_err, self.error)
        raise invoke('A defect occurred while building the exception of Result.expect', on_err, self.error)

    def merge(self) -> E:
        """Return the error (``merge`` collapses both channels)."""
        return self.error

    def contains(self, predicate: Callable[[Any], bool]) -> bool:  # noqa: ARG002
        return False

    def equals(
        self,
        other: Result[Any, E],
        eq: Callable[[Any, Any], bool] = operator.eq,  # noqa: ARG002
        err_eq: Callable[[E, E], bool] = operator.eq,
    ) -> bool:
        """Compare with another Result, using ``err_eq`` on errors."""
        if not isinstance(other, Err):
            return False
        return bool(invoke('A defect occurred while comparing Results', err_eq, self.error, other.error))

    def to_list(self) -> list[Any]:
        return []

    def iter(self) -> Iterator[Any]:
        return iter(())

    def __iter__(self) -> Generator[E, Any, None]:
        # Signals the short-circuit to the interpreter driving the generator.
        yield self.error

    def __repr__(self) -> str:
        return f'Err({self.error!r})'
