"""Configuration loader and validator."""

from pathlib import Path
from typing import Any, Optional

import yaml

from btmm.i18n import SUPPORTED_LANGUAGES, get_language_from_env


class ConfigError(Exception):
    """Configuration validation error."""

    pass


def load_config(path: str) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file

    Returns:
        Dictionary with configuration values

    Raises:
        ConfigError: If file not found or invalid YAML
    """
    config_file = Path(path)

    if not config_file.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if config is None:
        raise ConfigError("Config file is empty")

    if not isinstance(config, dict):
        raise ConfigError("Config file must contain a mapping")

    return config


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Validate configuration values.

    Args:
        config: Configuration dictionary

    Returns:
        Validated and normalized configuration

    Raises:
        ConfigError: If validation fails
    """
    validated = {}

    # Random seed (optional, None = a different draw every time)
    validated["random_seed"] = config.get("random_seed")
    seed = validated["random_seed"]
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise ConfigError("random_seed must be an integer or null")

    # Advance per group (optional, default 2)
    validated["advance_per_group"] = config.get("advance_per_group", 2)
    advance = validated["advance_per_group"]
    if not isinstance(advance, int) or isinstance(advance, bool) or advance < 1:
        raise ConfigError("advance_per_group must be a positive integer")

    # Language (optional, BTMM_LANG or Portuguese)
    lang = config.get("lang", get_language_from_env())
    if lang not in SUPPORTED_LANGUAGES:
        raise ConfigError(f"lang must be one of {SUPPORTED_LANGUAGES}, got '{lang}'")
    validated["lang"] = lang

    # Database path (optional, default is the data directory)
    db_path = config.get("db_path")
    if db_path is not None and not isinstance(db_path, str):
        raise ConfigError("db_path must be a string")
    validated["db_path"] = db_path

    return validated


def default_config() -> dict[str, Any]:
    """Configuration used when no file is given."""
    return validate_config({})


def load_and_validate_config(path: Optional[str] = None) -> dict[str, Any]:
    """Load and validate configuration in one step.

    Args:
        path: Path to YAML config file, or None for the defaults

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigError: If loading or validation fails
    """
    if path is None:
        return default_config()
    config = load_config(path)
    return validate_config(config)
