"""Configuration loader for the wiper.

Loads and validates ``wiper.yaml`` into frozen pydantic models.  All wipe
tuning values (retraction split, feed rates, wipe mode) and the logging
setup come from the config -- nothing is hardcoded in the engine.

Feed rates are stored in **mm/min**, the unit of the ``F`` word the
surrounding motion-command translator reads and writes.

Usage::

    from wipe_control.configs.loader import load_config
    cfg = load_config()                     # default path
    cfg = load_config("/custom/wiper.yaml") # explicit path
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wipe_control.utils.fs import load_yaml

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "wiper.v1"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class WipeSettings(BaseModel):
    """User-facing wipe and retraction settings.

    The retract-before/after percentages are fractions of
    ``retraction_length``.  They are deliberately unbounded here: the
    engine clamps negatives and rescales sums above 1 when it derives its
    geometry, so a slicer profile with sloppy values still loads.
    """

    model_config = ConfigDict(frozen=True)

    retraction_length: float = Field(..., ge=0.0, description="Total retraction (mm)")
    retract_before_wipe_percent: float = Field(
        0.0, description="Fraction retracted before the wipe"
    )
    retract_after_wipe_percent: float = Field(
        0.0, description="Fraction retracted after the wipe"
    )
    retraction_feedrate: float = Field(..., gt=0.0, description="Retraction feed (mm/min)")
    wipe_feedrate: float = Field(..., ge=0.0, description="Wipe feed (mm/min)")
    x_y_travel_speed: float = Field(..., gt=0.0, description="XY travel feed (mm/min)")


class LoggingConfig(BaseModel):
    """Arguments for :func:`wipe_control.utils.logging_config.setup_logging`."""

    model_config = ConfigDict(frozen=True)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None
    json_format: bool = False
    color: bool = True

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def setup_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``setup_logging``."""
        return {
            "log_level": self.log_level,
            "log_file": self.log_file,
            "json": self.json_format,
            "color": self.color,
        }


class WiperConfig(BaseModel):
    """Top-level ``wiper.yaml`` schema."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: str = Field(SCHEMA_VERSION, alias="schema")
    settings: WipeSettings = Field(..., alias="wipe")
    use_full_wipe: bool = True
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SCHEMA_VERSION:
            raise ValueError(f"Expected schema '{SCHEMA_VERSION}', got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> WiperConfig:
    """Load and validate wiper configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``wiper.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    WiperConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If a section is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "wiper.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(data).__name__}: {path}"
        )
    if "wipe" not in data:
        raise ConfigError(f"Missing 'wipe' section in {path}")

    # use_full_wipe lives next to the settings in YAML, but is an engine
    # mode rather than a slicer setting.
    data = dict(data)
    wipe_data = dict(data["wipe"] or {})
    if "use_full_wipe" in wipe_data:
        data["use_full_wipe"] = wipe_data.pop("use_full_wipe")
    data["wipe"] = wipe_data

    try:
        cfg = WiperConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Wiper config validation failed at {path}: {e}") from e

    logger.debug(
        "Loaded wiper config: retraction_length=%.3f full_wipe=%s",
        cfg.settings.retraction_length,
        cfg.use_full_wipe,
    )
    return cfg
