"""
Application configuration management.

Load order (each layer overrides the previous):
  1. Built-in defaults            the model defaults below
  2. ``config/default.toml``      committed static defaults
  3. ``config/local.toml``        optional local overrides (gitignored)
  4. ``.env``                     local env overrides (gitignored)
  5. Environment variables        ``WOWNOW_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI builds the ``TactClient`` from ``AppConfig.tact``; library code takes
endpoint and timeout as explicit arguments and never reads the environment.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from wownow.tact.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from wownow.tact.registry import LIVE_PRODUCTS

# ── Sub-config models ─────────────────────────────────────────────────────────


class TactConfig(BaseModel):
    """Version service endpoint and product selection."""

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    products: list[str] = list(LIVE_PRODUCTS)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got '{v}'.")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {v}.")
        return v

    @field_validator("products")
    @classmethod
    def validate_products(cls, v: list[str]) -> list[str]:
        cleaned = [p.strip() for p in v]
        if not cleaned or any(not p for p in cleaned):
            raise ValueError("products must be a non-empty list of non-empty ids.")
        return cleaned


class LoggingConfig(BaseModel):
    """Logging output settings.  Logs go to stderr; stdout carries the JSON."""

    model_config = ConfigDict(frozen=True)

    level: str = "WARNING"
    log_file: Optional[str] = None
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth."""

    model_config = ConfigDict(frozen=True)

    tact: TactConfig = TactConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml`` when that file exists;
            otherwise built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        config_path = default_path if default_path.exists() else None
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply WOWNOW_* env vars to the raw config dict.

    Supported overrides:
      WOWNOW_BASE_URL   → raw["tact"]["base_url"]
      WOWNOW_TIMEOUT    → raw["tact"]["timeout_seconds"]
      WOWNOW_PRODUCTS   → raw["tact"]["products"]  (comma separated)
      WOWNOW_LOG_LEVEL  → raw["logging"]["level"]
      WOWNOW_DEBUG      → raw["debug"]
    """
    if base_url := os.environ.get("WOWNOW_BASE_URL"):
        raw.setdefault("tact", {})["base_url"] = base_url

    if timeout := os.environ.get("WOWNOW_TIMEOUT"):
        raw.setdefault("tact", {})["timeout_seconds"] = timeout

    if products := os.environ.get("WOWNOW_PRODUCTS"):
        raw.setdefault("tact", {})["products"] = [
            p for p in (s.strip() for s in products.split(",")) if p
        ]

    if log_level := os.environ.get("WOWNOW_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("WOWNOW_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        tact=TactConfig(**raw.get("tact", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
