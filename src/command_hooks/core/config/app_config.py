from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator

from command_hooks.command_prefix import validate_command_prefix
from command_hooks.constants import (
    DEFAULT_COMMAND_PREFIX,
    DEFAULT_DATABASE_URL,
    DEFAULT_DISPATCH_TIMEOUT,
    DEFAULT_RESPONSE_PREVIEW_CHARS,
    StorageBackend,
)
from command_hooks.core.common.exceptions import ConfigurationError
from command_hooks.core.interfaces.model_bases import DomainModel

logger = logging.getLogger(__name__)


def _get_env_value(
    env: Mapping[str, str],
    name: str,
    default: Any,
    *,
    transform: Callable[[str], Any] | None = None,
) -> Any:
    """Return an environment variable value, transformed when a transform is given."""
    if name in env:
        raw_value = env[name]
        return transform(raw_value) if transform is not None else raw_value
    return default


def _to_int(value: str, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _to_float(value: str, fallback: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(DomainModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    log_file: str | None = None


class StorageConfig(DomainModel):
    """Command store configuration."""

    backend: StorageBackend = StorageBackend.SQLITE
    # Path of the SQLite database file; parent directories are created on open
    database_url: str = DEFAULT_DATABASE_URL


class DispatchConfig(DomainModel):
    """Webhook dispatch configuration."""

    timeout: float = DEFAULT_DISPATCH_TIMEOUT  # seconds
    # Number of response body characters echoed back to the chat
    response_preview_chars: int = DEFAULT_RESPONSE_PREVIEW_CHARS

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("dispatch timeout must be positive")
        return v

    @field_validator("response_preview_chars")
    @classmethod
    def validate_preview(cls, v: int) -> int:
        if v < 0:
            raise ValueError("response_preview_chars cannot be negative")
        return v


class AppConfig(DomainModel):
    """Complete application configuration."""

    command_prefix: str = DEFAULT_COMMAND_PREFIX
    storage: StorageConfig = Field(default_factory=StorageConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("command_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        error = validate_command_prefix(v)
        if error:
            raise ValueError(error)
        return v

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Create AppConfig from environment variables.

        Returns:
            AppConfig instance

        Raises:
            ConfigurationError: If an environment value is invalid
        """
        env: Mapping[str, str] = environ if environ is not None else os.environ
        try:
            return cls.model_validate(_config_dict_from_env(env))
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def _config_dict_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Build a partial config dict holding only the variables that are set."""
    config: dict[str, Any] = {}

    prefix = _get_env_value(env, "COMMAND_PREFIX", None)
    if prefix is not None:
        config["command_prefix"] = prefix

    storage: dict[str, Any] = {}
    if "DATABASE_URL" in env:
        storage["database_url"] = env["DATABASE_URL"]
    if "STORAGE_BACKEND" in env:
        storage["backend"] = env["STORAGE_BACKEND"].strip().lower()
    if storage:
        config["storage"] = storage

    dispatch: dict[str, Any] = {}
    if "DISPATCH_TIMEOUT" in env:
        dispatch["timeout"] = _get_env_value(
            env,
            "DISPATCH_TIMEOUT",
            DEFAULT_DISPATCH_TIMEOUT,
            transform=lambda value: _to_float(value, DEFAULT_DISPATCH_TIMEOUT),
        )
    if "RESPONSE_PREVIEW_CHARS" in env:
        dispatch["response_preview_chars"] = _get_env_value(
            env,
            "RESPONSE_PREVIEW_CHARS",
            DEFAULT_RESPONSE_PREVIEW_CHARS,
            transform=lambda value: _to_int(value, DEFAULT_RESPONSE_PREVIEW_CHARS),
        )
    if dispatch:
        config["dispatch"] = dispatch

    logging_cfg: dict[str, Any] = {}
    if "LOG_LEVEL" in env:
        logging_cfg["level"] = env["LOG_LEVEL"].strip().upper()
    if "LOG_FILE" in env:
        logging_cfg["log_file"] = env["LOG_FILE"]
    if logging_cfg:
        config["logging"] = logging_cfg

    return config


def _merge_dicts(d1: dict[str, Any], d2: dict[str, Any]) -> dict[str, Any]:
    for k, v in d2.items():
        if k in d1 and isinstance(d1[k], dict) and isinstance(v, dict):
            _merge_dicts(d1[k], v)
        else:
            d1[k] = v
    return d1


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Load configuration from an optional YAML file, then apply environment overrides.

    Args:
        config_path: Optional path to a YAML configuration file
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        AppConfig instance

    Raises:
        ConfigurationError: If the file cannot be read or the result is invalid
    """
    env = environ if environ is not None else os.environ

    config_data: dict[str, Any] = AppConfig().model_dump(mode="json")

    if config_path:
        import yaml

        path = Path(config_path)
        if not path.exists():
            logger.warning("Configuration file not found: %s", config_path)
        else:
            if path.suffix.lower() not in [".yaml", ".yml"]:
                raise ConfigurationError(
                    f"Unsupported configuration file format: {path.suffix}. Use YAML (.yaml/.yml)."
                )
            try:
                with open(path, encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.error(
                    "Failed to read config file %s: %s", path, e, exc_info=True
                )
                raise ConfigurationError(
                    f"Failed to read config file {path.name}."
                ) from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Config file {path.name} must contain a mapping at top level."
                )
            _merge_dicts(config_data, file_config)

    _merge_dicts(config_data, _config_dict_from_env(env))

    try:
        return AppConfig.model_validate(config_data)
    except ValueError as e:
        logger.critical("Invalid configuration: %s", e)
        raise ConfigurationError(f"Invalid configuration: {e}") from e
