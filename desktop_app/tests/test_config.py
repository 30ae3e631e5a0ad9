from __future__ import annotations

import os

from togglnag_desktop.api_client import DEFAULT_BASE_URL
from togglnag_desktop.config import (ENV_API_TOKEN, AppConfig, default_env_path,
                                     load_config, save_config)


def test_defaults_without_env_file(clean_env) -> None:
    config = load_config(clean_env / "missing.env")

    assert config.api_token is None
    assert config.check_interval_minutes == 5
    assert config.mute_duration_minutes == 120
    assert config.api_base_url == DEFAULT_BASE_URL


def test_values_are_read_from_env_file(clean_env) -> None:
    env_path = clean_env / ".env"
    env_path.write_text(
        "TOGGLNAG_API_TOKEN=abc123\nTOGGLNAG_CHECK_INTERVAL=15\nTOGGLNAG_MUTE_DURATION=30\n",
        encoding="utf-8",
    )

    config = load_config(env_path)

    assert config.api_token == "abc123"
    assert config.check_interval_minutes == 15
    assert config.mute_duration_minutes == 30


def test_invalid_numbers_fall_back_to_defaults(clean_env, monkeypatch) -> None:
    monkeypatch.setenv("TOGGLNAG_CHECK_INTERVAL", "often")
    monkeypatch.setenv("TOGGLNAG_MUTE_DURATION", "-10")

    config = load_config(clean_env / "missing.env")

    assert config.check_interval_minutes == 5
    assert config.mute_duration_minutes == 120


def test_default_env_path_follows_config_dir(clean_env) -> None:
    assert default_env_path() == clean_env / ".env"


def test_saved_settings_survive_reload(clean_env) -> None:
    env_path = save_config(AppConfig(api_token="tok", check_interval_minutes=20, mute_duration_minutes=60))

    content = env_path.read_text(encoding="utf-8")
    assert "TOGGLNAG_CHECK_INTERVAL" in content
    config = load_config()
    assert config.api_token == "tok"
    assert config.check_interval_minutes == 20
    assert config.mute_duration_minutes == 60


def test_logout_removes_token_from_file(clean_env) -> None:
    env_path = save_config(AppConfig(api_token="tok"))

    save_config(AppConfig(api_token=None), env_path)

    assert ENV_API_TOKEN not in env_path.read_text(encoding="utf-8")
    assert ENV_API_TOKEN not in os.environ
    assert load_config(env_path).api_token is None
