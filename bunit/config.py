"""Configuration loading for the bunit test engine.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings

Settings are static for a run. The entry point takes no arguments, so
everything that varies between runs is configured here.
"""

from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_LOG_FILE = "tests.txt"


class Settings(BaseSettings):
    """Engine configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. Variables are prefixed with
    ``BUNIT_`` (e.g. ``BUNIT_LOG_FILE``).
    """

    model_config = SettingsConfigDict(
        env_prefix="BUNIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Capture configuration
    capture_enabled: bool = Field(
        default=True,
        description="Write captured test output to the log file; discard it when false",
    )
    log_file: str = Field(
        default=DEFAULT_LOG_FILE,
        description="Path of the log file receiving captured test output",
    )

    # Test collection
    test_modules: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Dotted names of modules that declare tests",
    )

    # Failure classification
    contain_errors: bool = Field(
        default=True,
        description="Record unexpected exceptions as per-test errors instead of aborting the run",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for engine diagnostics",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("test_modules", mode="before")
    @classmethod
    def split_test_modules(cls, v: object) -> object:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @field_validator("test_modules")
    @classmethod
    def validate_test_modules(cls, v: list[str]) -> list[str]:
        """Ensure every entry looks like a dotted module name."""
        for name in v:
            if not all(part.isidentifier() for part in name.split(".")):
                raise ValueError(f"invalid module name in test_modules: {name!r}")
        return v

    @field_validator("log_file")
    @classmethod
    def validate_log_file(cls, v: str) -> str:
        """Ensure the log file path is not empty."""
        if not v or not v.strip():
            raise ValueError("log_file must be a non-empty path")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.upper()
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load engine settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["DEFAULT_LOG_FILE", "Settings", "load_settings"]
