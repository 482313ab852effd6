from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Mapping
import logging
import os
import sys


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    logs_dir: Path


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    tax_rate: Decimal = Decimal("0.05")
    seed_sample_data: bool = True
    log_level: int = logging.INFO
    logs_dir: Path | None = None


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "PharmacyManager") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, logs_dir=logs)


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _tax_rate(value: str) -> Decimal:
    try:
        rate = Decimal(value.strip())
    except InvalidOperation as e:
        raise ValueError(f"PMS_TAX_RATE must be a number. Received: {value!r}") from e
    if not rate.is_finite() or rate < 0 or rate > 1:
        raise ValueError(f"PMS_TAX_RATE must be between 0 and 1. Received: {value!r}")
    return rate


def _log_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"PMS_LOG_LEVEL is not a logging level: {value!r}")
    return level


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    defaults = Settings()

    port_raw = env.get("PMS_PORT", str(defaults.port))
    try:
        port = int(port_raw)
    except ValueError as e:
        raise ValueError(f"PMS_PORT must be an integer. Received: {port_raw!r}") from e

    prefix = env.get("PMS_API_PREFIX", defaults.api_prefix).strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix

    logs_dir = env.get("PMS_LOGS_DIR", "").strip()

    return Settings(
        host=env.get("PMS_HOST", defaults.host),
        port=port,
        api_prefix=prefix,
        tax_rate=_tax_rate(env.get("PMS_TAX_RATE", str(defaults.tax_rate))),
        seed_sample_data=_flag(env.get("PMS_SEED_SAMPLE_DATA", "1")),
        log_level=_log_level(env.get("PMS_LOG_LEVEL", "INFO")),
        logs_dir=Path(logs_dir) if logs_dir else None,
    )
