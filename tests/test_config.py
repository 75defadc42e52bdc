"""Tests for settings loading and logging setup."""

import logging
import tempfile
from pathlib import Path

import pytest
import yaml

from spectral.config import Settings, load_settings
from spectral.log import get_logger, init_logging


def _write_settings(tmpdir: str, data) -> Path:
    path = Path(tmpdir) / "spectral.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


def test_defaults():
    settings = load_settings()
    assert settings == Settings()
    assert settings.high_stability_threshold == 0.8
    assert settings.export_format == "ndjson"


def test_yaml_file_overrides_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_settings(
            tmpdir, {"spectral": {"high_stability_threshold": 0.9, "log_level": "debug"}}
        )
        settings = load_settings(path)

    assert settings.high_stability_threshold == 0.9
    assert settings.log_level == "DEBUG"


def test_environment_overrides_file(monkeypatch):
    monkeypatch.setenv("SPECTRAL_EXPORT_FORMAT", "JSON")
    monkeypatch.setenv("SPECTRAL_HIGH_STABILITY_THRESHOLD", "0.75")
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_settings(tmpdir, {"export_format": "ndjson"})
        settings = load_settings(path)

    assert settings.export_format == "json"
    assert settings.high_stability_threshold == 0.75


def test_invalid_values_raise(monkeypatch):
    monkeypatch.setenv("SPECTRAL_HIGH_STABILITY_THRESHOLD", "very")
    with pytest.raises(ValueError):
        load_settings()

    monkeypatch.delenv("SPECTRAL_HIGH_STABILITY_THRESHOLD")
    monkeypatch.setenv("SPECTRAL_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        load_settings()


def test_unknown_and_malformed_files_raise():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError, match="Unknown settings"):
            load_settings(_write_settings(tmpdir, {"colour": "blue"}))
        with pytest.raises(ValueError, match="mapping"):
            load_settings(_write_settings(tmpdir, ["not", "a", "mapping"]))


def test_init_logging_sets_spectral_level():
    init_logging("debug")
    assert get_logger().level == logging.DEBUG
    assert get_logger("spectral.registry").getEffectiveLevel() == logging.DEBUG

    init_logging()
    assert get_logger().level == logging.WARNING

    with pytest.raises(ValueError):
        init_logging("chatty")
