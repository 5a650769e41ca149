"""Library configuration: ContainersConfig, init() and environment detection."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from klaw_containers._logging import configure_logging

__all__ = [
    'ContainersConfig',
    'get_config',
    'init',
    'reset_config',
]

_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_VALUES = frozenset({'0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class ContainersConfig:
    """Configuration for klaw-containers.

    Attributes:
        strict_do_keys: Raise a Panic when a do-notation ``bind``/``let``
            reuses a key that is already bound.
        max_concurrency: Upper bound on concurrently awaited inputs in
            ``zip``/``values``/``first_some_of`` of async containers.
            None means unbounded.
        log_level: Logging level applied by ``init``. None leaves logging alone.
    """

    strict_do_keys: bool = True
    max_concurrency: int | None = None
    log_level: str | None = None


_config: ContainersConfig | None = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logging.warning("Unknown %s value '%s', defaulting to %s", name, raw, default)
    return default


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return None
    try:
        return max(1, int(raw))
    except ValueError:
        logging.warning("Invalid %s value '%s', ignoring", name, raw)
        return None


def init(
    *,
    strict_do_keys: bool | None = None,
    max_concurrency: int | None = None,
    log_level: str | None = None,
) -> ContainersConfig:
    """Initialize klaw-containers with the given configuration.

    Arguments left as None are read from the environment:
    ``KLAW_CONTAINERS_STRICT_DO_KEYS``, ``KLAW_CONTAINERS_MAX_CONCURRENCY`` and
    ``KLAW_CONTAINERS_LOG_LEVEL``.

    Args:
        strict_do_keys: Reject rebinding an existing do-notation key.
        max_concurrency: Bound for concurrent joins of async containers.
        log_level: Logging level ("DEBUG", "INFO", ...). None = leave logging alone.

    Returns:
        The ContainersConfig that was set.

    Example:
        ```python
        from klaw_containers import init

        init(log_level='DEBUG', max_concurrency=8)
        ```
    """
    global _config  # noqa: PLW0603

    if strict_do_keys is None:
        strict_do_keys = _env_bool('KLAW_CONTAINERS_STRICT_DO_KEYS', True)
    if max_concurrency is None:
        max_concurrency = _env_int('KLAW_CONTAINERS_MAX_CONCURRENCY')
    else:
        max_concurrency = max(1, max_concurrency)
    if log_level is None:
        log_level = os.environ.get('KLAW_CONTAINERS_LOG_LEVEL') or None

    _config = ContainersConfig(
        strict_do_keys=strict_do_keys,
        max_concurrency=max_concurrency,
        log_level=log_level,
    )

    if log_level is not None:
        configure_logging(log_level)

    return _config


def get_config() -> ContainersConfig:
    """Get the current configuration, reading the environment on first use.

    Unlike ``init``, the lazy path never touches logging configuration.
    """
    global _config  # noqa: PLW0603

    if _config is None:
        _config = ContainersConfig(
            strict_do_keys=_env_bool('KLAW_CONTAINERS_STRICT_DO_KEYS', True),
            max_concurrency=_env_int('KLAW_CONTAINERS_MAX_CONCURRENCY'),
            log_level=os.environ.get('KLAW_CONTAINERS_LOG_LEVEL') or None,
        )
    return _config


def reset_config() -> None:
    """Forget the current configuration so the next access re-reads the environment."""
    global _config  # noqa: PLW0603
    _config = None
