"""
Tests for YAML configuration loading.
"""

from pathlib import Path

import pytest

from garageslots.config import AppConfig, BusinessHoursSettings
from garageslots.domain.exceptions import ConfigurationError
from garageslots.domain.models import CapacityMatch


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig.load_from_yaml."""

    def test_load_valid_config(self, tmp_path):
        path = _write(
            tmp_path,
            """
business_hours:
  timezone: Europe/Berlin
  open_time: "08:00"
  close_time: "17:00"
  slot_minutes: 30
  buffer_minutes: 10
  slot_capacity: 2
  capacity_match: exact
default_duration_minutes: 90
snapshot_file: data/snapshot.yaml
""",
        )

        config = AppConfig.load_from_yaml(path)
        business_hours = config.require_business_hours()

        assert business_hours.timezone == "Europe/Berlin"
        assert business_hours.step_minutes == 40
        assert business_hours.slot_capacity == 2
        assert business_hours.capacity_match == CapacityMatch.EXACT
        assert config.default_duration_minutes == 90
        assert config.snapshot_file == tmp_path / "data" / "snapshot.yaml"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path, "business_hours: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            AppConfig.load_from_yaml(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = _write(tmp_path, "- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            AppConfig.load_from_yaml(path)

    @pytest.mark.parametrize(
        "business_hours",
        [
            'timezone: UTC\n  open_time: "18:00"\n  close_time: "09:00"',
            "timezone: Nowhere/Atlantis",
            'timezone: UTC\n  open_time: "9:00"',
            "timezone: UTC\n  slot_minutes: 0",
            "timezone: UTC\n  buffer_minutes: -1",
            "timezone: UTC\n  slot_capacity: 0",
        ],
    )
    def test_invalid_business_hours(self, tmp_path, business_hours):
        path = _write(tmp_path, f"business_hours:\n  {business_hours}\n")

        with pytest.raises(ConfigurationError):
            AppConfig.load_from_yaml(path)

    def test_empty_file_uses_defaults(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, ""))

        assert config.business_hours is None
        assert config.default_duration_minutes == 60

    def test_require_business_hours_without_settings(self):
        with pytest.raises(ConfigurationError, match="not configured"):
            AppConfig().require_business_hours()


class TestBusinessHoursSettings:
    """Tests for BusinessHoursSettings defaults and conversion."""

    def test_defaults(self):
        settings = BusinessHoursSettings(timezone="UTC")
        business_hours = settings.to_business_hours()

        assert business_hours.open_time == "09:00"
        assert business_hours.close_time == "18:00"
        assert business_hours.slot_minutes == 60
        assert business_hours.allow_customer_booking is True
        business_hours.validate()
