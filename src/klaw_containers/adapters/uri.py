"""SafeURI: percent-encoding helpers that return Result."""

from __future__ import annotations

import re
from urllib.parse import quote

from klaw_containers.types.result import Result

__all__ = ['SafeURI']

# Characters a full URI keeps as-is; components keep only the unreserved marks.
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"
_COMPONENT_SAFE = "-_.!~*'()"
_URI_RESERVED = frozenset(';/?:@&=+$,#')

_ESCAPE_RUN = re.compile(r'(?:%[0-9A-Fa-f]{2})+')
_MALFORMED = re.compile(r'%(?![0-9A-Fa-f]{2})')


def _keep(exc: Exception) -> Exception:
    return exc


def _decode(text: str, preserve: frozenset[str]) -> str:
    if _MALFORMED.search(text):
        raise ValueError(f'URI malformed: {text!r}')

    def replace(match: re.Match[str]) -> str:
        run = match.group(0)
        parts: list[str] = []
        pending = bytearray()
        for i in range(0, len(run), 3):
            token = run[i : i + 3]
            byte = int(token[1:], 16)
            if byte < 0x80 and chr(byte) in preserve:
                parts.append(pending.decode('utf-8'))
                pending.clear()
                parts.append(token)
            else:
                pending.append(byte)
        parts.append(pending.decode('utf-8'))
        return ''.join(parts)

    return _ESCAPE_RUN.sub(replace, text)


def _encode(text: str) -> str:
    return quote(text, safe=_URI_SAFE)


def _encode_component(text: str) -> str:
    return quote(text, safe=_COMPONENT_SAFE)


def _decode_uri(text: str) -> str:
    return _decode(text, _URI_RESERVED)


def _decode_component(text: str) -> str:
    return _decode(text, frozenset())


class SafeURI:
    """URI encoding helpers whose failures are values.

    ``encode``/``decode`` work on a full URI and leave its delimiters alone;
    the ``_component`` variants escape and unescape everything but the
    unreserved characters. Malformed escapes and invalid UTF-8 give
    ``Err(ValueError)``; lone surrogates give ``Err(UnicodeEncodeError)``.

    Example:
        ```python
        SafeURI.encode_component('a b&c')   # Ok('a%20b%26c')
        SafeURI.decode_component('%E0%A4%A')  # Err(ValueError(...))
        ```
    """

    encode = staticmethod(Result.lift(_encode, _keep))
    decode = staticmethod(Result.lift(_decode_uri, _keep))
    encode_component = staticmethod(Result.lift(_encode_component, _keep))
    decode_component = staticmethod(Result.lift(_decode_component, _keep))
