"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return Path(config_dir)
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    directory = _find_config_dir(config_dir)
    default_path = directory / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = directory / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        hyperlane: dict[str, Any] | None = None,
        debridge: dict[str, Any] | None = None,
        retry: dict[str, Any] | None = None,
        dashboard: dict[str, Any] | None = None,
        fallback: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.hyperlane = hyperlane or {}
        self.debridge = debridge or {}
        self.retry = retry or {}
        self.dashboard = dashboard or {}
        self.fallback = fallback or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            hyperlane=raw.get("hyperlane"),
            debridge=raw.get("debridge"),
            retry=raw.get("retry"),
            dashboard=raw.get("dashboard"),
            fallback=raw.get("fallback"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def hyperlane_api_base(self) -> str:
        return self.hyperlane.get("api_base", "https://explorer.hyperlane.xyz/api")

    @property
    def page_size(self) -> int:
        return int(self.hyperlane.get("page_size", 1000))

    @property
    def page_delay_sec(self) -> float:
        return float(self.hyperlane.get("page_delay_sec", 0.2))

    @property
    def request_timeout_sec(self) -> float:
        return float(self.hyperlane.get("request_timeout_sec", 15.0))

    @property
    def message_status(self) -> str:
        return self.hyperlane.get("status", "delivered")

    @property
    def user_agent(self) -> str:
        return self.hyperlane.get("user_agent", "Hyperliquid-Bridge-Dashboard/1.0")

    @property
    def debridge_api_base(self) -> str | None:
        base = self.debridge.get("api_base") or ""
        return base or None

    @property
    def retry_max_attempts(self) -> int:
        return int(self.retry.get("max_attempts", 3))

    @property
    def retry_base_delay_sec(self) -> float:
        return float(self.retry.get("base_delay_sec", 1.0))

    @property
    def retry_max_delay_sec(self) -> float:
        return float(self.retry.get("max_delay_sec", 30.0))

    @property
    def default_timeframe(self) -> str:
        return self.dashboard.get("default_timeframe", "24h")

    @property
    def default_chain(self) -> str | None:
        chain = self.dashboard.get("chain", "hyperliquid")
        return chain or None

    @property
    def refresh_interval_sec(self) -> float:
        return float(self.dashboard.get("refresh_interval_sec", 30.0))

    @property
    def cache_ttl_sec(self) -> float:
        return float(self.dashboard.get("cache_ttl_sec", 0.0))

    @property
    def fallback_count(self) -> int:
        return int(self.fallback.get("count", 30))

    @property
    def fallback_seed(self) -> int:
        return int(self.fallback.get("seed", 42))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
