"""Konfigurations-Utilities für die Desktop-Erinnerung."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, load_dotenv, set_key, unset_key

from .api_client import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 5
DEFAULT_MUTE_DURATION = 120
CHECK_INTERVAL_CHOICES = (5, 10, 15, 20, 25, 30)
MUTE_DURATION_CHOICES = (30, 60, 90, 120)

ENV_API_TOKEN = "TOGGLNAG_API_TOKEN"
ENV_CHECK_INTERVAL = "TOGGLNAG_CHECK_INTERVAL"
ENV_MUTE_DURATION = "TOGGLNAG_MUTE_DURATION"
ENV_API_BASE_URL = "TOGGLNAG_API_BASE_URL"
ENV_CONFIG_DIR = "TOGGLNAG_CONFIG_DIR"


@dataclass(slots=True)
class AppConfig:
    """Werte, die der Benutzer in den Einstellungen ändern kann."""

    api_token: Optional[str] = None
    check_interval_minutes: int = DEFAULT_CHECK_INTERVAL
    mute_duration_minutes: int = DEFAULT_MUTE_DURATION
    api_base_url: str = DEFAULT_BASE_URL


def config_dir() -> Path:
    override = os.getenv(ENV_CONFIG_DIR)
    if override:
        return Path(override)
    return Path.home() / ".config" / "togglnag"


def default_env_path() -> Path:
    return config_dir() / ".env"


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Lädt die Konfiguration aus der Umgebung und einer optionalen `.env` Datei."""

    env_path = env_path or default_env_path()
    if env_path.exists():
        load_dotenv(env_path)

    return AppConfig(
        api_token=os.getenv(ENV_API_TOKEN) or None,
        check_interval_minutes=_positive_int(ENV_CHECK_INTERVAL, DEFAULT_CHECK_INTERVAL),
        mute_duration_minutes=_positive_int(ENV_MUTE_DURATION, DEFAULT_MUTE_DURATION),
        api_base_url=os.getenv(ENV_API_BASE_URL, DEFAULT_BASE_URL),
    )


def save_config(config: AppConfig, env_path: Optional[Path] = None) -> Path:
    """Schreibt die änderbaren Werte zurück in die `.env` Datei."""

    env_path = env_path or default_env_path()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)

    values = {
        ENV_CHECK_INTERVAL: str(config.check_interval_minutes),
        ENV_MUTE_DURATION: str(config.mute_duration_minutes),
    }
    if config.api_token:
        values[ENV_API_TOKEN] = config.api_token
    for key, value in values.items():
        set_key(env_path, key, value)
        os.environ[key] = value

    if not config.api_token:
        if ENV_API_TOKEN in dotenv_values(env_path):
            unset_key(env_path, ENV_API_TOKEN)
        os.environ.pop(ENV_API_TOKEN, None)
    return env_path


__all__ = [
    "AppConfig",
    "load_config",
    "save_config",
    "config_dir",
    "CHECK_INTERVAL_CHOICES",
    "MUTE_DURATION_CHOICES",
]
