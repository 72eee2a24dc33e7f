"""Tests for configuration loading."""

import json

import pytest

from lifecycle_monitor.domain.exceptions import ConfigurationError
from lifecycle_monitor.domain.models import MonitorConfig
from lifecycle_monitor.infrastructure.config import config_from_dict, load_config


class TestConfigFromDict:
    """Tests for config_from_dict()."""

    def test_empty_dict_is_defaults(self):
        """Absent keys keep their defaults."""
        assert config_from_dict({}) == MonitorConfig()

    def test_overrides(self):
        """Given keys override defaults."""
        config = config_from_dict({"event_capacity": 50, "pending_ttl_ms": 30000})

        assert config.event_capacity == 50
        assert config.pending_ttl_ms == 30000

    def test_unknown_key_rejected(self):
        """Unknown keys are configuration errors."""
        with pytest.raises(ConfigurationError, match="Invalid config"):
            config_from_dict({"capacity": 50})

    def test_bad_value_reports_location(self):
        """The offending key is named."""
        with pytest.raises(ConfigurationError, match="event_capacity"):
            config_from_dict({"event_capacity": 0})


class TestLoadConfig:
    """Tests for load_config()."""

    def test_loads_file(self, tmp_path):
        """A valid file loads."""
        path = tmp_path / "monitor.json"
        path.write_text(json.dumps({"recent_window": 5}))

        assert load_config(path).recent_window == 5

    def test_missing_file(self, tmp_path):
        """A missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        """Unparseable files are configuration errors."""
        path = tmp_path / "monitor.json"
        path.write_text("{")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_config(path)

    def test_non_object(self, tmp_path):
        """Top-level arrays are rejected."""
        path = tmp_path / "monitor.json"
        path.write_text("[]")

        with pytest.raises(ConfigurationError, match="Expected dict"):
            load_config(path)
