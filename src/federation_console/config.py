from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "FEDCONSOLE_"
DEFAULT_PAGE_SIZE = 50


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ConsoleConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    max_connections: int = 10
    verify_ssl: bool = True
    page_size: int = DEFAULT_PAGE_SIZE
    export_dir: Path = Path("exports")
    telemetry_enabled: bool = False


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = _env(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {ENV_PREFIX}{name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = _env(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {ENV_PREFIX}{name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ConsoleConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (_env("ENV") or "dev").strip()
    api_base_url = (_env(f"API_BASE_URL_{env_name.upper()}") or "").strip() or (_env("API_BASE_URL") or "").strip()
    if not api_base_url:
        raise ConfigError(f"Missing required config values: {ENV_PREFIX}API_BASE_URL")

    timeout_seconds = _read_float("TIMEOUT_SECONDS", "10")
    _validate(timeout_seconds > 0, f"Invalid {ENV_PREFIX}TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}")

    connect_timeout_seconds = _read_float("CONNECT_TIMEOUT_SECONDS", str(min(timeout_seconds, 5.0)))
    _validate(
        connect_timeout_seconds > 0,
        f"Invalid {ENV_PREFIX}CONNECT_TIMEOUT_SECONDS: expected > 0, got {connect_timeout_seconds}",
    )

    read_timeout_seconds = _read_float("READ_TIMEOUT_SECONDS", str(max(timeout_seconds, connect_timeout_seconds)))
    _validate(
        read_timeout_seconds > 0,
        f"Invalid {ENV_PREFIX}READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )

    retries = _read_int("RETRIES", "2")
    _validate(retries >= 0, f"Invalid {ENV_PREFIX}RETRIES: expected >= 0, got {retries}")

    retry_backoff_seconds = _read_float("RETRY_BACKOFF_SECONDS", "0.3")
    _validate(
        retry_backoff_seconds >= 0,
        f"Invalid {ENV_PREFIX}RETRY_BACKOFF_SECONDS: expected >= 0, got {retry_backoff_seconds}",
    )

    max_connections = _read_int("MAX_CONNECTIONS", "10")
    _validate(max_connections >= 1, f"Invalid {ENV_PREFIX}MAX_CONNECTIONS: expected >= 1, got {max_connections}")

    page_size = _read_int("PAGE_SIZE", str(DEFAULT_PAGE_SIZE))
    _validate(page_size >= 1, f"Invalid {ENV_PREFIX}PAGE_SIZE: expected >= 1, got {page_size}")

    return ConsoleConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        retries=retries,
        retry_backoff_seconds=retry_backoff_seconds,
        max_connections=max_connections,
        verify_ssl=_coerce_bool(_env("VERIFY_SSL"), True),
        page_size=page_size,
        export_dir=Path((_env("EXPORT_DIR") or "exports").strip()),
        telemetry_enabled=_coerce_bool(_env("TELEMETRY_ENABLED"), False),
    )
