"""Configuration for hostini.

Settings are read from a YAML file (``~/.hostini/config.yml`` by default)
and may be overridden through environment variables:

    HOSTINI_LEGACY_HEADERS   "1", "true" or "yes" enables legacy headers
    HOSTINI_LOG_LEVEL        trace, debug, info, warning, error, critical
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .logging import LEVEL_NAMES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".hostini" / "config.yml"

ENV_LEGACY_HEADERS = "HOSTINI_LEGACY_HEADERS"
ENV_LOG_LEVEL = "HOSTINI_LOG_LEVEL"

TRUE_VALUES = ("1", "true", "yes", "on")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


@dataclass
class InventoryConfig:
    """Settings for reading inventories and logging.

    Attributes:
        legacy_headers: Keep a vars/children section mode active across a
            following plain group header
        log_level: Console log level name
        log_file: Optional file to also write logs to
    """

    legacy_headers: bool = False
    log_level: str = "warning"
    log_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        result: dict[str, Any] = {
            "legacy_headers": self.legacy_headers,
            "log_level": self.log_level,
        }
        if self.log_file is not None:
            result["log_file"] = self.log_file
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InventoryConfig":
        """Create from dictionary, ignoring unknown keys."""
        log_level = str(data.get("log_level", "warning")).lower()
        if log_level not in LEVEL_NAMES:
            raise ConfigError(f"Invalid log_level: {log_level}")
        log_file = data.get("log_file")
        return cls(
            legacy_headers=_parse_bool(data.get("legacy_headers", False)),
            log_level=log_level,
            log_file=str(log_file) if log_file is not None else None,
        )


def _apply_environment(config: InventoryConfig) -> InventoryConfig:
    legacy = os.environ.get(ENV_LEGACY_HEADERS)
    if legacy is not None:
        config.legacy_headers = _parse_bool(legacy)

    log_level = os.environ.get(ENV_LOG_LEVEL)
    if log_level:
        if log_level.lower() not in LEVEL_NAMES:
            raise ConfigError(f"Invalid {ENV_LOG_LEVEL}: {log_level}")
        config.log_level = log_level.lower()
    return config


def load_config(path: str | Path | None = None) -> InventoryConfig:
    """Load configuration from a YAML file and the environment.

    A missing file yields the defaults.

    Args:
        path: Config file (default: ~/.hostini/config.yml)

    Returns:
        The loaded configuration

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return _apply_environment(InventoryConfig())

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config: {e}", path=str(config_path)) from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping", path=str(config_path))

    logger.debug(f"Loaded config from {config_path}")
    return _apply_environment(InventoryConfig.from_dict(data))


def save_config(config: InventoryConfig, path: str | Path | None = None) -> Path:
    """Save configuration to a YAML file.

    Args:
        config: Configuration to save
        path: Config file (default: ~/.hostini/config.yml)

    Returns:
        Path the configuration was written to
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False), encoding="utf-8")
    logger.info(f"Saved config to {config_path}")
    return config_path
