"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class ApiConfig(BaseModel):
    """Connection settings for the agency REST API."""
    base_url: str = "http://localhost:5000"
    token: str | None = None  # Bearer token, passed through as-is
    timeout_seconds: float = 30

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalise the base URL so paths can be appended directly."""
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {value!r}")
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class PlannerConfig(BaseModel):
    """Slot and tour sizing."""
    slot_minutes: int = 60
    stop_minutes: int = 30

    @field_validator("slot_minutes", "stop_minutes")
    @classmethod
    def validate_minutes(cls, value: int) -> int:
        """Ensure durations are positive."""
        if value <= 0:
            raise ValueError("slot_minutes and stop_minutes must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_stop_fits_slot(self) -> "PlannerConfig":
        """A single tour stop has to fit into one slot."""
        if self.stop_minutes > self.slot_minutes:
            raise ValueError("stop_minutes must not exceed slot_minutes")
        return self


class MockConfig(BaseModel):
    """Settings for the offline mock API."""
    business_hours_file: Path | None = None  # Packaged table when unset


class AppConfig(BaseModel):
    """Application configuration."""
    api: ApiConfig = Field(default_factory=ApiConfig)
    timezone: str = "America/Mexico_City"
    planner: PlannerConfig = Field(default_factory=PlannerConfig)
    mock: MockConfig = Field(default_factory=MockConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

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
            ValueError: If config is invalid
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
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


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
