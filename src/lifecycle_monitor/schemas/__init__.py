"""Lifecycle monitor JSON Schema definitions and validation utilities.

This module provides JSON Schema definitions for the documents that cross
the monitor boundary.

Schemas:
    - signal.schema.json: Host signal payloads (ingestion boundary)
    - snapshot.schema.json: Persisted event log record
    - export.schema.json: Exported monitor snapshot
    - config.schema.json: Monitor configuration file

Usage:
    from lifecycle_monitor.schemas import validate_signal

    validate_signal({"signal": "city_loaded", "code": "NYC"})
    # Raises jsonschema.ValidationError if invalid
"""

from __future__ import annotations

import json
from functools import cache
from importlib.resources import files
from typing import Any

import jsonschema


@cache
def _load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema from the schemas package.

    Args:
        name: Schema filename (e.g., 'signal.schema.json')

    Returns:
        Parsed JSON schema as a dictionary
    """
    schema_text = files("lifecycle_monitor.schemas").joinpath(name).read_text()
    result: dict[str, Any] = json.loads(schema_text)
    return result


def get_signal_schema() -> dict[str, Any]:
    return _load_schema("signal.schema.json")


def get_snapshot_schema() -> dict[str, Any]:
    return _load_schema("snapshot.schema.json")


def get_export_schema() -> dict[str, Any]:
    return _load_schema("export.schema.json")


def get_config_schema() -> dict[str, Any]:
    return _load_schema("config.schema.json")


def validate_signal(data: dict[str, Any]) -> None:
    """Validate a host signal payload against the schema.

    Args:
        data: Signal payload dictionary

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_signal_schema())


def validate_snapshot(data: dict[str, Any]) -> None:
    """Validate a persisted log record against the schema.

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_snapshot_schema())


def validate_export(data: dict[str, Any]) -> None:
    """Validate an exported snapshot against the schema.

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_export_schema())


def validate_config(data: dict[str, Any]) -> None:
    """Validate a configuration document against the schema.

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_config_schema())


__all__ = [
    "get_config_schema",
    "get_export_schema",
    "get_signal_schema",
    "get_snapshot_schema",
    "validate_config",
    "validate_export",
    "validate_signal",
    "validate_snapshot",
]
