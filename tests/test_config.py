"""Tests for wownow.config: layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from wownow.config import AppConfig, LoggingConfig, TactConfig, load_config
from wownow.tact.client import DEFAULT_BASE_URL
from wownow.tact.registry import LIVE_PRODUCTS


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestModels:
    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.tact.base_url == DEFAULT_BASE_URL
        assert cfg.tact.timeout_seconds == 5.0
        assert cfg.tact.products == list(LIVE_PRODUCTS)
        assert cfg.logging.level == "WARNING"
        assert cfg.debug is False

    def test_non_http_base_url_rejected(self):
        with pytest.raises(ValidationError, match="base_url"):
            TactConfig(base_url="us.patch.battle.net:1119")

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_non_positive_timeout_rejected(self, timeout):
        with pytest.raises(ValidationError, match="timeout_seconds"):
            TactConfig(timeout_seconds=timeout)

    def test_empty_products_rejected(self):
        with pytest.raises(ValidationError):
            TactConfig(products=[])

    def test_log_level_normalised(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_bad_log_level_rejected(self):
        with pytest.raises(ValidationError, match="Log level"):
            LoggingConfig(level="LOUD")


class TestLoadConfig:
    def test_toml_values(self, tmp_path, clean_env):
        path = _write(
            tmp_path / "config" / "default.toml",
            'debug = true\n\n[tact]\nbase_url = "http://tact.test/"\n'
            'timeout_seconds = 2.5\nproducts = ["wow"]\n\n[logging]\nlevel = "info"\n',
        )
        cfg = load_config(path)
        assert cfg.tact.base_url == "http://tact.test"
        assert cfg.tact.timeout_seconds == 2.5
        assert cfg.tact.products == ["wow"]
        assert cfg.logging.level == "INFO"
        assert cfg.debug is True

    def test_local_toml_overrides(self, tmp_path, clean_env):
        path = _write(tmp_path / "default.toml", '[tact]\ntimeout_seconds = 2.5\nproducts = ["wow"]\n')
        _write(tmp_path / "local.toml", "[tact]\ntimeout_seconds = 9.0\n")
        cfg = load_config(path)
        assert cfg.tact.timeout_seconds == 9.0
        assert cfg.tact.products == ["wow"]

    def test_env_overrides(self, tmp_path, clean_env):
        path = _write(tmp_path / "default.toml", "[tact]\ntimeout_seconds = 2.5\n")
        clean_env.setenv("WOWNOW_TIMEOUT", "1.5")
        clean_env.setenv("WOWNOW_PRODUCTS", "wow_classic, wow ,")
        clean_env.setenv("WOWNOW_BASE_URL", "https://eu.tact.test")
        clean_env.setenv("WOWNOW_LOG_LEVEL", "debug")
        clean_env.setenv("WOWNOW_DEBUG", "yes")
        cfg = load_config(path)
        assert cfg.tact.timeout_seconds == 1.5
        assert cfg.tact.products == ["wow_classic", "wow"]
        assert cfg.tact.base_url == "https://eu.tact.test"
        assert cfg.logging.level == "DEBUG"
        assert cfg.debug is True

    def test_missing_explicit_path_raises(self, tmp_path, clean_env):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_value_raises(self, tmp_path, clean_env):
        path = _write(tmp_path / "default.toml", "[tact]\ntimeout_seconds = -1\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_project_default_loads(self, clean_env):
        cfg = load_config()
        assert cfg.tact.products == list(LIVE_PRODUCTS)
