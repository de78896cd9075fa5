"""Configuration module for wraith."""

from wraith.config.loader import get_config_path, load_config, save_config
from wraith.config.schema import Config, ConsoleConfig, DispatcherConfig, LoggingConfig

__all__ = [
    "Config",
    "ConsoleConfig",
    "DispatcherConfig",
    "LoggingConfig",
    "get_config_path",
    "load_config",
    "save_config",
]
