"""Option type: Some[T] | Nothing for optional values.

``Option`` is the common base of both variants. It carries the static
factories (``Option.some``, ``Option.from_nullable``, ``Option.try_``...) so
that constructors read the same way for every container, and it is the type
to annotate with: ``def find(id: str) -> Option[User]``.

``Nothing`` is absorbing: every transformation except ``or_else``, ``match``
and the unwrap fallbacks returns it unchanged without calling the callback.

Example:
    ```python
    from klaw_containers import Option

    Option.some(5).map(lambda x: x * 2).unwrap()  # 10
    Option.none().map(lambda x: x * 2).unwrap_or_else(lambda: -1)  # -1

    match Option.from_nullable(os.environ.get('HOME')):
        case Some(home):
            ...
        case NothingType():
            ...
    ```
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Generator, Iterable, Iterator
from typing import TYPE_CHECKING, Any, NoReturn, TypeIs

import msgspec
import wrapt

from klaw_containers._internal.defects import capture, describe, ensure, invoke
from klaw_containers.exceptions import panic
from klaw_containers.types.do import DoContext

if TYPE_CHECKING:
    from klaw_containers.types.result import Result

__all__ = ['Nothing', 'NothingType', 'Option', 'Some']


class _DoEntry:
    """Class attribute producing a fresh ``Some(DoContext())`` on every access."""

    __slots__ = ()

    def __get__(self, instance: object, owner: type | None = None) -> Some[DoContext]:
        return Some(DoContext())


class Option[T](msgspec.Struct, frozen=True, gc=False, tag_field='_tag'):
    """Base of the Option variants and namespace of the Option factories."""

    Do = _DoEntry()
    """Starts a do-notation chain: ``Option.Do.bind('user', ...)``."""

    @property
    def tag(self) -> str:
        """The discriminant: ``'Some'`` or ``'None'``."""
        return self.__struct_config__.tag  # type: ignore[return-value]

    # --- Factories ---

    @staticmethod
    def some[V](value: V) -> Option[V]:
        """Construct a Some holding ``value``."""
        return Some(value)

    of = some

    @staticmethod
    def none() -> Option[Any]:
        """Return the empty Option."""
        return Nothing

    @staticmethod
    def from_nullable[V](value: V | None) -> Option[V]:
        """Return Nothing for None, Some(value) otherwise."""
        return Nothing if value is None else Some(value)

    @staticmethod
    def from_falsy[V](value: V) -> Option[V]:
        """Return Nothing for falsy values (None, 0, '', empty collections...), Some otherwise."""
        return Some(value) if value else Nothing

    @staticmethod
    def from_result[V](result: Result[V, Any]) -> Option[V]:
        """Keep the Ok value (None demoted to Nothing) and discard the error."""
        from klaw_containers.types.result import Ok

        if isinstance(result, Ok):
            return Option.from_nullable(result.value)
        return Nothing

    @staticmethod
    def try_[V](f: Callable[[], V | None]) -> Option[V]:
        """Call ``f``; an exception or a None result gives Nothing.

        This is one of the few places where an exception becomes a value. A
        Panic raised by ``f`` still propagates.

        Example:
            ```python
            Option.try_(lambda: int('42'))  # Some(42)
            Option.try_(lambda: int('x'))   # Nothing
            ```
        """
        try:
            value = f()
        except Exception as exc:
            capture('Option.try_', exc)
            return Nothing
        return Option.from_nullable(value)

    @staticmethod
    def first_some_of[V](options: Iterable[Option[V]]) -> Option[V]:
        """Return the first Some of ``options``, or Nothing. Stops at the first match."""
        for option in options:
            if isinstance(option, Some):
                return option
        return Nothing

    @staticmethod
    def predicate[V](criteria: Callable[[V], bool]) -> Callable[[V], Option[V]]:
        """Build a constructor that keeps values satisfying ``criteria``.

        Example:
            ```python
            positive = Option.predicate(lambda n: n > 0)
            positive(3)   # Some(3)
            positive(-1)  # Nothing
            ```
        """

        def construct(value: V) -> Option[V]:
            return Some(value).filter(criteria)

        return construct

    @staticmethod
    def values[V](options: Iterable[Option[V]]) -> list[V]:
        """Collect the values of the Some options, preserving order."""
        return [option.value for option in options if isinstance(option, Some)]

    @staticmethod
    def lift[**P, V](f: Callable[P, V | None]) -> Callable[P, Option[V]]:
        """Turn a function that may raise or return None into one returning Option."""

        @wrapt.decorator
        def wrapper(
            wrapped: Callable[P, V | None],
            instance: Any,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
        ) -> Option[V]:
            return Option.try_(lambda: wrapped(*args, **kwargs))

        return wrapper(f)  # type: ignore[return-value]

    @staticmethod
    def fn[**P, V](f: Callable[P, Any]) -> Callable[P, Option[V]]:
        """Wrap a generator function (or a plain function) into one returning Option.

        See ``klaw_containers.decorators.do_option``.
        """
        from klaw_containers.decorators.do import do_option

        return do_option(f)

    @staticmethod
    def use[V](factory: Callable[[], Generator[Any, Any, Option[V]]]) -> Option[V]:
        """Run a generator of ``yield from`` steps and return its Option.

        Example:
            ```python
            def total():
                price = yield from find_price(item)
                tax = yield from find_tax(region)
                return Option.some(price + tax)

            Option.use(total)
            ```
        """
        from klaw_containers.decorators.do import run_option

        return run_option(factory())

    @staticmethod
    def is_option(value: object) -> TypeIs[Option[Any]]:
        """Return True if ``value`` is a Some or Nothing."""
        return isinstance(value, Option)


class Some[T](Option[T], tag='Some'):
    """Some variant of Option containing a value of type T.

    Examples:
        >>> Some(42).unwrap()
        42
        >>> Some(42).map(lambda x: x * 2)
        Some(84)
        >>> Some(42).map(lambda x: None)
        Nothing
    """

    value: T

    def is_some(self) -> TypeIs[Some[T]]:
        """Return True since this is Some."""
        return True

    def is_none(self) -> bool:
        """Return False since this is Some."""
        return False

    # --- Do-notation ---

    def bind_to(self, key: str) -> Some[DoContext]:
        """Start a do-notation context with the value bound to ``key``."""
        return Some(DoContext({key: self.value}))

    def _context(self, operation: str) -> DoContext:
        if not isinstance(self.value, DoContext):
            panic(f'Option.{operation} can only be used on an Option started with Option.Do or bind_to')
        return self.value

    def bind(self, key: str, f: Callable[[DoContext], Option[Any]]) -> Option[DoContext]:
        """Bind the value of the Option returned by ``f`` to ``key``.

        Args:
            key: Name under which the value is stored. Must not be bound yet.
            f: Receives the context accumulated so far and returns an Option.

        Returns:
            Some with the extended context, or Nothing if ``f`` returned Nothing.
        """
        ctx = self._context('bind')
        output = ensure(
            invoke(f'A defect occurred while binding "{key}" in Option.bind', f, ctx),
            Option,
            'Option.bind',
        )
        if isinstance(output, Some):
            return Some(ctx.with_(key, output.value))
        return Nothing

    def let(self, key: str, f: Callable[[DoContext], Any]) -> Option[DoContext]:
        """Bind the raw value returned by ``f`` to ``key``; None short-circuits to Nothing."""
        ctx = self._context('let')
        output = invoke(f'A defect occurred while binding "{key}" in Option.let', f, ctx)
        if output is None:
            return Nothing
        return Some(ctx.with_(key, output))

    # --- Transformations ---

    def map[U](self, f: Callable[[T], U | None]) -> Option[U]:
        """Apply ``f`` to the value. A None result becomes Nothing.

        Use ``and_then`` when ``f`` itself returns an Option.
        """
        output = invoke("A defect occurred while mapping an Option's value", f, self.value)
        return Nothing if output is None else Some(output)

    def and_then[U](self, f: Callable[[T], Option[U]]) -> Option[U]:
        """Apply a function returning an Option and flatten the result."""
        return ensure(
            invoke('A defect occurred while chaining an Option', f, self.value),
            Option,
            'Option.and_then',
        )

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        """Keep the value only if ``predicate`` holds."""
        if invoke("A defect occurred while filtering an Option's value", predicate, self.value):
            return self
        return Nothing

    def or_else(self, f: Callable[[], Option[T]]) -> Option[T]:  # noqa: ARG002
        """Return self; the fallback is not called."""
        return self

    def zip[U](self, other: Option[U]) -> Option[tuple[T, U]]:
        """Pair both values, or Nothing if ``other`` is Nothing."""
        if isinstance(other, Some):
            return Some((self.value, other.value))
        return Nothing

    def zip_with[U, R](self, other: Option[U], f: Callable[[T, U], R | None]) -> Option[R]:
        """Combine both values with ``f``. A None result becomes Nothing."""
        if not isinstance(other, Some):
            return Nothing
        output = invoke('A defect occurred while zipping two Options', f, self.value, other.value)
        return Nothing if output is None else Some(output)

    def inspect(self, f: Callable[[T], Any]) -> Option[T]:
        """Call ``f`` with the value for its side effects and return self."""
        invoke("A defect occurred while inspecting an Option's value", f, self.value)
        return self

    # --- Elimination ---

    def match[R](self, *, some: Callable[[T], R], none: Callable[[], R]) -> R:
        """Call ``some`` with the value."""
        return invoke(
            f'A defect occurred while matching the Some case of an Option containing "{describe(self.value)}"',
            some,
            self.value,
        )

    def unwrap(self) -> T:
        """Return the value."""
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        """Return the value, ignoring the default."""
        return self.value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:  # noqa: ARG002
        """Return the value, ignoring the fallback function."""
        return self.value

    def unwrap_or_none(self) -> T | None:
        """Return the value."""
        return self.value

    def expect(self, on_nothing: str | Callable[[], BaseException]) -> T:  # noqa: ARG002
        """Return the value, ignoring the failure description."""
        return self.value

    def contains(self, predicate: Callable[[T], bool]) -> bool:
        """Return whether the value satisfies ``predicate``."""
        return bool(
            invoke(
                "A defect occurred while checking if an Option's value satisfies a predicate",
                predicate,
                self.value,
            )
        )

    def equals(self, other: Option[T], eq: Callable[[T, T], bool] = operator.eq) -> bool:
        """Compare with another Option using ``eq`` on the values."""
        if not isinstance(other, Some):
            return False
        return bool(invoke('A defect occurred while comparing two Options', eq, self.value, other.value))

    def to_list(self) -> list[T]:
        """Return ``[value]``."""
        return [self.value]

    def iter(self) -> Iterator[T]:
        """Iterate over the value (a single item)."""
        yield self.value

    def __iter__(self) -> Generator[NoReturn, Any, T]:
        # ``x = yield from Some(v)`` evaluates to ``v`` without suspending.
        yield from ()
        return self.value

    def __repr__(self) -> str:
        return f'Some({self.value!r})'


class NothingType(Option[Any], tag='None'):
    """Nothing variant of Option representing absence of a value.

    Use the ``Nothing`` singleton rather than instantiating directly; all
    instances compare equal.

    Examples:
        >>> Nothing.is_none()
        True
        >>> Nothing.unwrap_or(0)
        0
    """

    def is_some(self) -> bool:
        """Return False since this is Nothing."""
        return False

    def is_none(self) -> TypeIs[NothingType]:
        """Return True since this is Nothing."""
        return True

    def bind_to(self, key: str) -> NothingType:  # noqa: ARG002
        return self

    def bind(self, key: str, f: Callable[[DoContext], Option[Any]]) -> NothingType:  # noqa: ARG002
        return self

    def let(self, key: str, f: Callable[[DoContext], Any]) -> NothingType:  # noqa: ARG002
        return self

    def map(self, f: Callable[[Any], Any]) -> NothingType:  # noqa: ARG002
        return self

    def and_then(self, f: Callable[[Any], Option[Any]]) -> NothingType:  # noqa: ARG002
        return self

    def filter(self, predicate: Callable[[Any], bool]) -> NothingType:  # noqa: ARG002
        return self

    def or_else[U](self, f: Callable[[], Option[U]]) -> Option[U]:
        """Return the Option produced by the fallback ``f``."""
        return ensure(
            invoke('A defect occurred while computing the fallback of an empty Option', f),
            Option,
            'Option.or_else',
        )

    def zip(self, other: Option[Any]) -> NothingType:  # noqa: ARG002
        return self

    def zip_with(self, other: Option[Any], f: Callable[[Any, Any], Any]) -> NothingType:  # noqa: ARG002
        return self

    def inspect(self, f: Callable[[Any], Any]) -> NothingType:  # noqa: ARG002
        return self

    def match[R](self, *, some: Callable[[Any], R], none: Callable[[], R]) -> R:
        """Call ``none``."""
        return invoke('A defect occurred while matching the None case of an Option', none)

    def unwrap(self) -> NoReturn:
        """Raise a Panic since there is no value.

        Raises:
            Panic: Always.
        """
        panic('called unwrap on an empty Option')

    def unwrap_or[U](self, default: U) -> U:
        """Return the default."""
        return default

    def unwrap_or_else[U](self, f: Callable[[], U]) -> U:
        """Compute the fallback value."""
        return invoke('A defect occurred while computing the fallback value of an empty Option', f)

    def unwrap_or_none(self) -> None:
        """Return None."""
        return None

    def expect(self, on_nothing: str | Callable[[], BaseException]) -> NoReturn:
        """Raise the caller-supplied failure.

        Args:
            on_nothing: A message (raised as Panic) or a thunk returning the
                exception to raise.
        """
        if isinstance(on_nothing, str):
            panic(on_nothing)
        raise invoke('A defect occurred while building the exception of Option.expect', on_nothing)

    def contains(self, predicate: Callable[[Any], bool]) -> bool:  # noqa: ARG002
        return False

    def equals(self, other: Option[Any], eq: Callable[[Any, Any], bool] = operator.eq) -> bool:  # noqa: ARG002
        """Return whether ``other`` is Nothing too."""
        return isinstance(other, NothingType)

    def to_list(self) -> list[Any]:
        return []

    def iter(self) -> Iterator[Any]:
        return iter(())

    def __iter__(self) -> Generator[NothingType, Any, None]:
        # Signals the short-circuit to the interpreter driving the generator.
        yield self

    def __repr__(self) -> str:
        return 'Nothing'


Nothing: NothingType = NothingType()
"""Singleton instance representing the absence of a value."""
