"""
Tests for the Typer CLI.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from garageslots import __version__
from garageslots.cli.app import app

runner = CliRunner()

SNAPSHOT = """
business_settings:
  timezone: UTC
  open_time: "09:00"
  close_time: "12:00"
  slot_minutes: 60
  allow_customer_booking: true

employees:
  - id: emp-1
    full_name: Jonas Weber
  - id: emp-2
    full_name: Lena Fischer

bookings:
  - id: bk-1
    start_at: "2030-01-07T10:00:00Z"
    end_at: "2030-01-07T11:00:00Z"
    status: ACCEPTED
    customer_id: cust-7

work_orders:
  - id: wo-1
    employee_id: emp-1
    status: IN_PROGRESS
    start_at: "2030-01-07T10:00:00Z"
    end_at: "2030-01-07T11:30:00Z"
"""


@pytest.fixture
def snapshot_path(tmp_path) -> Path:
    path = tmp_path / "snapshot.yaml"
    path.write_text(SNAPSHOT, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_slots_lists_day(snapshot_path):
    result = runner.invoke(app, ["slots", "2030-01-07", "--data", str(snapshot_path)])

    assert result.exit_code == 0, result.output
    assert "09:00" in result.output
    assert "11:00" in result.output
    assert "full" in result.output


def test_slots_invalid_date(snapshot_path):
    result = runner.invoke(app, ["slots", "07.01.2030", "--data", str(snapshot_path)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_slots_with_config_override(snapshot_path, tmp_path):
    config_path = tmp_path / "custom.yaml"
    config_path.write_text(
        'business_hours:\n  timezone: UTC\n  open_time: "18:00"\n  close_time: "09:00"\n',
        encoding="utf-8",
    )

    result = runner.invoke(app, ["slots", "2030-01-07", "--config", str(config_path), "--data", str(snapshot_path)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_slots_without_snapshot():
    result = runner.invoke(app, ["slots", "2030-01-07"])

    assert result.exit_code == 1
    assert "snapshot" in result.output


def test_availability(snapshot_path):
    result = runner.invoke(
        app,
        ["availability", "--start", "2030-01-07T10:30:00Z", "--duration", "30", "--data", str(snapshot_path)],
    )

    assert result.exit_code == 0, result.output
    assert "1 available" in result.output
    assert "1 busy" in result.output
    assert "Jonas Weber" in result.output
    assert "Lena Fischer" in result.output


def test_check_booking_conflict(snapshot_path):
    result = runner.invoke(
        app,
        ["check-booking", "--customer", "cust-7", "--start", "2030-01-07T10:00:00Z", "--data", str(snapshot_path)],
    )

    assert result.exit_code == 1
    assert "already have a booking" in result.output


def test_check_booking_accepted(snapshot_path):
    result = runner.invoke(
        app,
        ["check-booking", "--customer", "cust-8", "--start", "2030-01-07T09:00:00Z", "--data", str(snapshot_path)],
    )

    assert result.exit_code == 0, result.output
    assert "accepted" in result.output


def test_check_booking_uses_configured_default_duration(snapshot_path, tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"default_duration_minutes: 240\nsnapshot_file: {snapshot_path.name}\n",
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        ["check-booking", "--customer", "cust-8", "--start", "2030-01-07T09:00:00Z", "--config", str(config_path)],
    )

    assert result.exit_code == 1
    assert "exceeds working hours" in result.output


def test_walkin_without_employee(snapshot_path):
    result = runner.invoke(app, ["walkin", "--data", str(snapshot_path)])

    assert result.exit_code == 0, result.output
    assert "open queue" in result.output


def test_show_config(snapshot_path):
    result = runner.invoke(app, ["show-config", "--data", str(snapshot_path)])

    assert result.exit_code == 0, result.output
    assert "UTC" in result.output
    assert "09:00 - 12:00" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
