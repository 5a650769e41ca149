"""Pytest configuration and shared fixtures for klaw-containers tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    """Re-read configuration from the environment for every test."""
    from klaw_containers import reset_config

    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_some():
    """Sample Some value for testing."""
    from klaw_containers import Some

    return Some('hello')


@pytest.fixture
def sample_nothing():
    """Sample Nothing value for testing."""
    from klaw_containers import Nothing

    return Nothing


@pytest.fixture
def sample_ok():
    """Sample Ok value for testing."""
    from klaw_containers import Ok

    return Ok(42)


@pytest.fixture
def sample_err():
    """Sample Err value for testing."""
    from klaw_containers import Err

    return Err(ValueError('test error'))


class Spy:
    """Callable recording every call, returning ``result`` (or calling it)."""

    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        if callable(self.result):
            return self.result(*args)
        return self.result

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def spy() -> Callable[..., Spy]:
    """Factory of call-recording callables."""
    return Spy


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return 'asyncio'
