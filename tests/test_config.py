"""Tests for library configuration and initialization."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from klaw_containers import ContainersConfig, get_config, init, reset_config
from klaw_containers._config import _env_bool, _env_int


class TestContainersConfig:
    """Tests for the ContainersConfig dataclass."""

    def test_default_values(self) -> None:
        config = ContainersConfig()
        assert config.strict_do_keys is True
        assert config.max_concurrency is None
        assert config.log_level is None

    def test_config_is_frozen(self) -> None:
        config = ContainersConfig()
        with pytest.raises(AttributeError):
            config.strict_do_keys = False  # type: ignore[misc]


class TestEnvParsing:
    """Tests for the environment helpers."""

    @pytest.mark.parametrize('raw', ['1', 'true', 'YES', 'on'])
    def test_env_bool_true(self, raw: str) -> None:
        with patch.dict(os.environ, {'KLAW_CONTAINERS_STRICT_DO_KEYS': raw}):
            assert _env_bool('KLAW_CONTAINERS_STRICT_DO_KEYS', False) is True

    @pytest.mark.parametrize('raw', ['0', 'false', 'No', 'off'])
    def test_env_bool_false(self, raw: str) -> None:
        with patch.dict(os.environ, {'KLAW_CONTAINERS_STRICT_DO_KEYS': raw}):
            assert _env_bool('KLAW_CONTAINERS_STRICT_DO_KEYS', True) is False

    def test_env_bool_unknown_uses_default(self) -> None:
        with patch.dict(os.environ, {'KLAW_CONTAINERS_STRICT_DO_KEYS': 'maybe'}):
            assert _env_bool('KLAW_CONTAINERS_STRICT_DO_KEYS', True) is True

    def test_env_int(self) -> None:
        with patch.dict(os.environ, {'KLAW_CONTAINERS_MAX_CONCURRENCY': '8'}):
            assert _env_int('KLAW_CONTAINERS_MAX_CONCURRENCY') == 8

    def test_env_int_minimum_is_one(self) -> None:
        with patch.dict(os.environ, {'KLAW_CONTAINERS_MAX_CONCURRENCY': '0'}):
            assert _env_int('KLAW_CONTAINERS_MAX_CONCURRENCY') == 1

    def test_env_int_invalid(self) -> None:
        with patch.dict(os.environ, {'KLAW_CONTAINERS_MAX_CONCURRENCY': 'lots'}):
            assert _env_int('KLAW_CONTAINERS_MAX_CONCURRENCY') is None

    def test_env_int_unset(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert _env_int('KLAW_CONTAINERS_MAX_CONCURRENCY') is None


class TestInit:
    """Tests for init() and get_config()."""

    def test_init_explicit(self) -> None:
        config = init(strict_do_keys=False, max_concurrency=4)
        assert config.strict_do_keys is False
        assert config.max_concurrency == 4
        assert get_config() is config

    def test_init_clamps_concurrency(self) -> None:
        assert init(max_concurrency=0).max_concurrency == 1

    def test_init_reads_environment(self) -> None:
        env = {'KLAW_CONTAINERS_STRICT_DO_KEYS': 'off', 'KLAW_CONTAINERS_MAX_CONCURRENCY': '3'}
        with patch.dict(os.environ, env):
            config = init()
        assert config.strict_do_keys is False
        assert config.max_concurrency == 3

    def test_get_config_is_lazy(self) -> None:
        with patch.dict(os.environ, {'KLAW_CONTAINERS_MAX_CONCURRENCY': '2'}):
            reset_config()
            assert get_config().max_concurrency == 2
        # Cached until reset.
        assert get_config().max_concurrency == 2

    def test_get_config_does_not_configure_logging(self) -> None:
        with (
            patch.dict(os.environ, {'KLAW_CONTAINERS_LOG_LEVEL': 'DEBUG'}),
            patch('klaw_containers._config.configure_logging') as configure,
        ):
            reset_config()
            assert get_config().log_level == 'DEBUG'
            configure.assert_not_called()

    def test_init_configures_logging(self) -> None:
        with patch('klaw_containers._config.configure_logging') as configure:
            init(log_level='WARNING')
        configure.assert_called_once_with('WARNING')
