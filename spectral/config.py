"""Settings for the spectral catalog tools.

Values come from built-in defaults, then an optional YAML file, then
``SPECTRAL_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from spectral.log import LOG_LEVELS
from spectral.registry.reality_model import DEFAULT_STABILITY_THRESHOLD

ENV_PREFIX = "SPECTRAL_"
EXPORT_FORMATS = ("ndjson", "json")


@dataclass
class Settings:
    high_stability_threshold: float = DEFAULT_STABILITY_THRESHOLD
    log_level: str = "WARNING"
    export_format: str = "ndjson"

    def validate(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level '{self.log_level}'. Must be one of: {sorted(LOG_LEVELS)}")
        if self.export_format not in EXPORT_FORMATS:
            raise ValueError(
                f"Invalid export_format '{self.export_format}'. Must be one of: {EXPORT_FORMATS}"
            )


def load_settings(path: str | Path | None = None) -> Settings:
    """Build settings from defaults, an optional YAML file, and the environment."""
    values: dict[str, str | float] = {}

    if path:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a mapping: {path}")
        values.update(data.get("spectral", data))

    for f in fields(Settings):
        env_value = os.environ.get(ENV_PREFIX + f.name.upper())
        if env_value is not None:
            values[f.name] = env_value

    known = {f.name for f in fields(Settings)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

    settings = Settings()
    if "high_stability_threshold" in values:
        try:
            settings.high_stability_threshold = float(values["high_stability_threshold"])
        except (TypeError, ValueError):
            raise ValueError(
                f"high_stability_threshold must be a number, got {values['high_stability_threshold']!r}"
            )
    if "log_level" in values:
        settings.log_level = str(values["log_level"]).upper()
    if "export_format" in values:
        settings.export_format = str(values["export_format"]).lower()

    settings.validate()
    return settings
