"""Tagged error taxonomy used by the containers.

Every error kind exposes a stable string discriminant (``tag``), a ``message``
and an optional ``cause``. The containers only rely on that contract to build
their default errors (``NoValueError``, ``UnhandledException``,
``FailedPredicateError``) and to let ``exhaustive`` dispatch on the tag.

``Panic`` is the odd one out: it signals a defect (a bug) rather than an
expected failure, and the containers never convert it into ``Err``/``Nothing``.

Example:
    ```python
    class UserNotFound(TaggedError):
        def __init__(self, user_id: str) -> None:
            super().__init__(f'User {user_id} was not found')
            self.user_id = user_id

    err = UserNotFound('u_1')
    err.tag  # 'UserNotFound'
    UserNotFound.is_(err)  # True
    ```
"""

from __future__ import annotations

from typing import Any, ClassVar, NoReturn, Self, TypeIs

import msgspec

__all__ = [
    'ErrorInfo',
    'FailedPredicateError',
    'NoValueError',
    'Panic',
    'TaggedError',
    'UnhandledException',
    'is_tagged_error',
    'panic',
    'tagged_error',
]


class ErrorInfo(msgspec.Struct, frozen=True, gc=False):
    """Serializable snapshot of a TaggedError - struct variant for encoded Err payloads."""

    tag: str
    message: str
    cause: str | None = None


class TaggedError(Exception):
    """Base class for errors carrying a stable discriminant.

    Subclasses get their class name as ``tag`` unless they pass one
    explicitly: ``class NotFound(TaggedError, tag='not_found'): ...``.

    Attributes:
        tag: The discriminant shared by every instance of the class.
        message: Human-readable description.
        cause: The underlying cause, if any. Exceptions are also chained
            through ``__cause__`` so tracebacks show them.
    """

    tag: ClassVar[str] = 'TaggedError'

    def __init_subclass__(cls, *, tag: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.tag = tag if tag is not None else cls.__name__

    def __init__(self, message: str = '', *, cause: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    @property
    def _tag(self) -> str:
        return self.tag

    @classmethod
    def is_(cls, value: object) -> TypeIs[Self]:
        """Return True if ``value`` is an instance of this error kind."""
        return isinstance(value, cls)

    @staticmethod
    def is_tagged(value: object) -> TypeIs[TaggedError]:
        """Return True for any TaggedError instance, whatever its kind."""
        return isinstance(value, TaggedError)

    def to_struct(self) -> ErrorInfo:
        """Convert to a struct for serialization boundaries."""
        cause = None if self.cause is None else str(self.cause)
        return ErrorInfo(self.tag, self.message, cause)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.message!r})'


def tagged_error(tag: str) -> type[TaggedError]:
    """Build a new TaggedError subclass for ``tag``.

    Args:
        tag: The discriminant (also used as the class name).

    Returns:
        A fresh TaggedError subclass. Two calls produce two distinct classes.
    """
    return type(tag, (TaggedError,), {'__module__': __name__}, tag=tag)


def is_tagged_error(value: object) -> TypeIs[TaggedError]:
    """Return True for any TaggedError instance."""
    return isinstance(value, TaggedError)


# --- Container errors ---


class UnhandledException(TaggedError):
    """An exception caught at a ``try_``/``fn``/``lift`` boundary."""


class NoValueError(TaggedError):
    """A nullable or falsy value was converted into a Result."""

    def __init__(self, message: str = 'No value was provided', *, cause: object = None) -> None:
        super().__init__(message, cause=cause)


class FailedPredicateError[T](TaggedError):
    """A Result value did not satisfy the predicate passed to ``filter``."""

    def __init__(self, value: T) -> None:
        super().__init__('Predicate not fulfilled for Result value')
        self.value = value

    def __repr__(self) -> str:
        return f'FailedPredicateError({self.value!r})'


class Panic(TaggedError):
    """A defect: misuse of a container or an exception raised by a user callback."""


def panic(message: str, cause: object = None) -> NoReturn:
    """Raise a Panic with ``message``, chained to ``cause`` when it is an exception."""
    raise Panic(message, cause=cause)
