"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from .domain.calendar import CLOCK_TIME_PATTERN, ensure_timezone
from .domain.exceptions import ConfigurationError
from .domain.models import BusinessHoursConfig, CapacityMatch


class BusinessHoursSettings(BaseModel):
    """Business-hours settings as stored by the garage."""
    timezone: str
    open_time: str = "09:00"
    close_time: str = "18:00"
    slot_minutes: int = 60
    buffer_minutes: int = 0
    allow_customer_booking: bool = True
    slot_capacity: int = 1
    capacity_match: CapacityMatch = CapacityMatch.OVERLAP

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone exists in the tz database."""
        try:
            return ensure_timezone(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("open_time", "close_time")
    @classmethod
    def validate_clock_time(cls, value: str) -> str:
        """Validate HH:mm format."""
        if not CLOCK_TIME_PATTERN.match(value):
            raise ValueError(f"Time must be in HH:mm format, got '{value}'")
        return value

    @field_validator("slot_minutes")
    @classmethod
    def validate_slot_minutes(cls, value: int) -> int:
        """Ensure slot length is positive."""
        if value <= 0:
            raise ValueError("slot_minutes must be greater than zero")
        return value

    @field_validator("buffer_minutes")
    @classmethod
    def validate_buffer_minutes(cls, value: int) -> int:
        if value < 0:
            raise ValueError("buffer_minutes must not be negative")
        return value

    @field_validator("slot_capacity")
    @classmethod
    def validate_slot_capacity(cls, value: int) -> int:
        if value < 1:
            raise ValueError("slot_capacity must be at least 1")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessHoursSettings":
        """Ensure the business opens before it closes on the same day."""
        if self.close_time <= self.open_time:
            raise ValueError(
                "close_time must be later than open_time; overnight business hours are not supported"
            )
        return self

    def to_business_hours(self) -> BusinessHoursConfig:
        """Convert to the domain configuration passed to the resolvers."""
        return BusinessHoursConfig(
            timezone=self.timezone,
            open_time=self.open_time,
            close_time=self.close_time,
            slot_minutes=self.slot_minutes,
            buffer_minutes=self.buffer_minutes,
            allow_customer_booking=self.allow_customer_booking,
            slot_capacity=self.slot_capacity,
            capacity_match=self.capacity_match,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    business_hours: Optional[BusinessHoursSettings] = None
    default_duration_minutes: int = 60
    snapshot_file: Optional[Path] = None

    @field_validator("default_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure the default request duration is positive."""
        if value <= 0:
            raise ValueError("default_duration_minutes must be greater than zero")
        return value

    def require_business_hours(self) -> BusinessHoursConfig:
        """
        Return the domain business-hours configuration.

        Raises:
            ConfigurationError: If no business hours are configured
        """
        if self.business_hours is None:
            raise ConfigurationError("Business settings not configured")
        return self.business_hours.to_business_hours()

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        try:
            config = cls(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {config_path}:\n{exc}") from exc

        # Relative snapshot paths are resolved against the config file
        if config.snapshot_file is not None and not config.snapshot_file.is_absolute():
            config.snapshot_file = config_path.parent / config.snapshot_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
