"""SafeURL: URL parsing that returns Result."""

from __future__ import annotations

from urllib.parse import SplitResult, urljoin, urlsplit

from klaw_containers.types.result import Result

__all__ = ['SafeURL']

_HOST_REQUIRED = frozenset({'ftp', 'http', 'https', 'ws', 'wss'})


def _keep(exc: Exception) -> Exception:
    return exc


def _parse(url: str, base: str | None = None) -> SplitResult:
    target = urljoin(base, url) if base is not None else url
    parts = urlsplit(target)
    if not parts.scheme:
        raise ValueError(f'Invalid URL: {url!r} has no scheme')
    if parts.scheme in _HOST_REQUIRED and not parts.hostname:
        raise ValueError(f'Invalid URL: {url!r} has no host')
    # Raises ValueError for an out-of-range or non-numeric port.
    _ = parts.port
    return parts


class SafeURL:
    """URL parsing whose failures are values.

    Example:
        ```python
        SafeURL.of('/docs', 'https://example.com/app/')  # Ok(SplitResult(scheme='https', ...))
        SafeURL.of('not a url')                           # Err(ValueError(...))
        ```
    """

    of = staticmethod(Result.lift(_parse, _keep))
