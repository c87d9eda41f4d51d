"""Wiper configuration loading and validation."""

from wipe_control.configs.loader import (
    ConfigError,
    LoggingConfig,
    WipeSettings,
    WiperConfig,
    load_config,
)

__all__ = [
    "ConfigError",
    "LoggingConfig",
    "WipeSettings",
    "WiperConfig",
    "load_config",
]
