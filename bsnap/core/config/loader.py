"""
Configuration loader — reads the bsnap config file into Settings.

Reads YAML, validates against the Pydantic schema, and returns typed
settings. A missing config file is not an error: defaults apply.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from bsnap.core.models.settings import Settings

logger = logging.getLogger(__name__)

CONFIG_ENV = "BSNAP_CONFIG"
CONFIG_FILE = "config.yml"
SYSTEM_CONFIG = Path("/etc/bsnap") / CONFIG_FILE


class ConfigError(Exception):
    """Raised when the configuration is invalid or unreadable."""


def user_config_path() -> Path:
    """``$XDG_CONFIG_HOME/bsnap/config.yml`` (default ``~/.config``)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "bsnap" / CONFIG_FILE


def find_config_file() -> Path | None:
    """Locate the config file.

    Lookup order: ``$BSNAP_CONFIG``, the user config, the system config.

    Returns:
        Path to the first existing file, or None.
    """
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()

    for candidate in (user_config_path(), SYSTEM_CONFIG):
        if candidate.is_file():
            return candidate
    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit config path (``--config``). If None, searches
            the default locations and falls back to defaults.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If an explicitly named file is missing, or any
            file found is unreadable or invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No config file found, using defaults")
            return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded config %s (%d services)", path, len(settings.services))
    return settings
