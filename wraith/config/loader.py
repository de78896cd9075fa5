"""Configuration loading and saving."""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from wraith.config.schema import Config
from wraith.errors import WraithError


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".wraith" / "config.json"


def load_config(path: Path | str | None = None) -> Config:
    """
    Load configuration from a JSON file.

    Environment variables (WRAITH_DISPATCHER__PREFIX, ...) take priority
    over the file's values.

    Args:
        path: Config file path. Defaults to ~/.wraith/config.json.

    Returns:
        The loaded configuration, or defaults if the file does not exist.

    Raises:
        WraithError: If the file is not valid JSON or fails validation.
    """
    config_path = Path(path) if path else get_config_path()

    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return Config()

    try:
        data: dict[str, Any] = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise WraithError(f"Invalid JSON in config file '{config_path}': {e}") from e

    if not isinstance(data, dict):
        raise WraithError(f"Invalid config file '{config_path}': expected a JSON object.")

    try:
        # values set through the environment win over the file
        overrides = Config().model_dump(exclude_unset=True)
        config = Config(**_merge(data, overrides))
    except ValidationError as e:
        raise WraithError(f"Invalid config file '{config_path}': {e}") from e

    logger.debug(f"Loaded config from {config_path}")
    return config


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def save_config(config: Config, path: Path | str | None = None) -> Path:
    """
    Save configuration to a JSON file, creating parent directories.

    Returns:
        The path written.
    """
    config_path = Path(path) if path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        json.dumps(config.model_dump(), indent=2) + "\n",
        encoding="utf-8",
    )
    logger.debug(f"Saved config to {config_path}")
    return config_path
