"""Configuration loading for the lifecycle monitor."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from lifecycle_monitor.domain.exceptions import ConfigurationError
from lifecycle_monitor.domain.models import MonitorConfig
from lifecycle_monitor.schemas import validate_config


def config_from_dict(data: dict[str, Any]) -> MonitorConfig:
    """
    Build a MonitorConfig from a dict; absent keys keep their defaults.

    Raises:
        ConfigurationError: If the data violates the config schema
    """
    try:
        validate_config(data)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigurationError(f"Invalid config at {location}: {e.message}") from e
    return MonitorConfig(**data)


def load_config(path: Path) -> MonitorConfig:
    """
    Load monitor configuration from a JSON file.

    Args:
        path: Path to the config file

    Returns:
        MonitorConfig with file values over defaults

    Raises:
        ConfigurationError: If file is missing or invalid
    """
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected dict in {path}, got {type(data).__name__}")

    return config_from_dict(data)
