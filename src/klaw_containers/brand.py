"""Branded values: nominal constructors and validating parsers.

At runtime a branded value is the plain value; the brand only exists for the
type checker (pair ``Brand.of`` with ``typing.NewType`` to get a distinct
static type). Parsers add validation on top::

    Email = NewType('Email', str)
    email = Brand.of(lambda s: '@' in s, lambda s: InvalidEmail(s))

    email.parse('ada@example.com')       # 'ada@example.com'
    email.safe_parse('nope')             # Err(InvalidEmail('nope'))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, overload

from klaw_containers.types.result import Result

__all__ = ['Brand', 'BrandConstructor', 'BrandParser']


class BrandConstructor[T]:
    """Identity constructor whose ``is_`` accepts every value."""

    __slots__ = ()

    def __call__(self, value: T) -> T:
        return value

    def is_(self, value: T) -> bool:  # noqa: ARG002
        return True


class BrandParser[T, E: BaseException](BrandConstructor[T]):
    """Identity constructor with validation.

    Attributes:
        predicate: Decides whether a value carries the brand.
        on_unfulfilled: Builds the exception for a rejected value.
    """

    __slots__ = ('on_unfulfilled', 'predicate')

    def __init__(self, predicate: Callable[[T], bool], on_unfulfilled: Callable[[T], E]) -> None:
        self.predicate = predicate
        self.on_unfulfilled = on_unfulfilled

    def is_(self, value: T) -> bool:
        return bool(self.predicate(value))

    def parse(self, value: T) -> T:
        """Return ``value`` if valid.

        Raises:
            E: The exception built by ``on_unfulfilled``.
        """
        if not self.predicate(value):
            raise self.on_unfulfilled(value)
        return value

    def safe_parse(self, value: T) -> Result[T, E]:
        """Return Ok(value) if valid, otherwise Err(on_unfulfilled(value))."""
        return Result.predicate(self.predicate, self.on_unfulfilled)(value)


class Brand:
    """Namespace for brand constructors."""

    @overload
    @staticmethod
    def of() -> BrandConstructor[Any]: ...

    @overload
    @staticmethod
    def of[T, E: BaseException](
        predicate: Callable[[T], bool],
        on_unfulfilled: Callable[[T], E],
    ) -> BrandParser[T, E]: ...

    @staticmethod
    def of(
        predicate: Callable[[Any], bool] | None = None,
        on_unfulfilled: Callable[[Any], BaseException] | None = None,
    ) -> BrandConstructor[Any]:
        """Build a brand constructor, or a parser when validation is given.

        Both ``predicate`` and ``on_unfulfilled`` are needed for a parser; with
        either missing the result is the plain identity constructor.
        """
        if predicate is None or on_unfulfilled is None:
            return BrandConstructor()
        return BrandParser(predicate, on_unfulfilled)

    @staticmethod
    def unbrand[T](value: T) -> T:
        """Return the underlying value (the identity at runtime)."""
        return value
