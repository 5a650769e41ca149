"""SafeJSON: msgspec JSON encoding and decoding that returns Result."""

from __future__ import annotations

from typing import Any

import msgspec

from klaw_containers.types.result import Result

__all__ = ['SafeJSON']


def _keep(exc: Exception) -> Exception:
    return exc


def _parse(text: str | bytes) -> Any:
    return msgspec.json.decode(text)


def _stringify(value: Any, indent: int | None = None) -> str:
    encoded = msgspec.json.encode(value)
    if indent is not None:
        encoded = msgspec.json.format(encoded, indent=indent)
    return encoded.decode()


class SafeJSON:
    """JSON helpers whose failures are values.

    Errors are the exceptions msgspec raises: ``msgspec.DecodeError`` for
    invalid documents, ``TypeError`` or ``msgspec.EncodeError`` for values
    that cannot be encoded.

    Example:
        ```python
        SafeJSON.parse('{"a": 1}')       # Ok({'a': 1})
        SafeJSON.parse('{')              # Err(DecodeError(...))
        SafeJSON.stringify({'a': 1})     # Ok('{"a":1}')
        ```
    """

    parse = staticmethod(Result.lift(_parse, _keep))
    stringify = staticmethod(Result.lift(_stringify, _keep))
