"""Typed configuration management using Pydantic."""

from __future__ import annotations

import configparser
import os
from typing import Any

from loguru import logger
from pydantic import BaseModel, SecretStr, field_validator

from telegram_webapp_auth.secret import validate_bot_token


class BotConfig(BaseModel):
    """Bot credentials and validation settings."""

    bot_token: SecretStr
    hash_expiration: int | None = None
    check_user: bool = False

    @field_validator("bot_token")
    @classmethod
    def validate_token(cls, value: SecretStr) -> SecretStr:
        """Reject tokens that do not have the ``<id>:<secret>`` shape."""
        validate_bot_token(value.get_secret_value())
        return value

    @field_validator("hash_expiration", mode="before")
    @classmethod
    def empty_expiration(cls, value: Any) -> Any:
        """Treat an empty string as "no expiry"."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("hash_expiration")
    @classmethod
    def validate_expiration(cls, value: int | None) -> int | None:
        """Normalize ``0`` to ``None`` and reject negative windows."""
        if value is None:
            return None
        if value < 0:
            raise ValueError("hash_expiration must be non-negative")
        return value or None


class WebConfig(BaseModel):
    """HTTP integration settings."""

    init_data_header: str = "Authorization"
    init_data_scheme: str = "tma"


class Config(BaseModel):
    """Aggregate application configuration."""

    bot: BotConfig
    web: WebConfig = WebConfig()


ENV_MAP: dict[str, tuple[str, str]] = {
    "BOT_TOKEN": ("bot", "bot_token"),
    "BOT_HASH_EXPIRATION": ("bot", "hash_expiration"),
    "BOT_CHECK_USER": ("bot", "check_user"),
    "WEB_INIT_DATA_HEADER": ("web", "init_data_header"),
    "WEB_INIT_DATA_SCHEME": ("web", "init_data_scheme"),
}


def _load_ini(path: str) -> dict[str, Any]:
    """Parse an INI configuration file into a nested dictionary."""
    parser = configparser.ConfigParser()
    parser.read(path)

    data: dict[str, Any] = {}
    section_map: dict[str, tuple[str, type[BaseModel]]] = {
        "Bot": ("bot", BotConfig),
        "Web": ("web", WebConfig),
    }
    for section_name, (key, model) in section_map.items():
        if not parser.has_section(section_name):
            continue
        section_data = {
            field: parser.get(section_name, field)
            for field in model.model_fields
            if parser.has_option(section_name, field)
        }
        if section_data:
            data[key] = section_data
    return data


def _load_env() -> dict[str, Any]:
    """Collect configuration overrides from environment variables."""
    env_data: dict[str, Any] = {}
    for env_name, (section, field) in ENV_MAP.items():
        if env_name not in os.environ:
            continue
        env_data.setdefault(section, {})[field] = os.environ[env_name]
    return env_data


def _deep_update(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``overrides`` into ``base`` and return ``base``."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: str | None = None) -> Config:
    """Read configuration and return a typed ``Config`` instance.

    Values come from the INI file at ``path`` (``CONFIG_PATH`` or
    ``config.ini`` by default), overridden by environment variables listed
    in :data:`ENV_MAP`.
    """
    config_path = path or os.getenv("CONFIG_PATH", "config.ini")
    data = _load_ini(config_path)
    merged = _deep_update(data, _load_env())

    config = Config.model_validate(merged)
    logger.bind(event="config_loaded").info(f"Config loaded: {config}")
    return config


__all__ = ["BotConfig", "WebConfig", "Config", "ENV_MAP", "load_config"]
