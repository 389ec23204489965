"""Environment-aware configuration with validation.

This module provides centralized configuration management using Pydantic Settings.
All environment variables are validated at startup to fail fast on misconfigurations.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every setting has a working default for the Walrus testnet, except the
    Sui package ID which is only needed when publishing a record.

    Example:
        >>> settings = get_settings()
        >>> print(settings.aggregator_url)
        'https://aggregator.walrus-testnet.walrus.space'
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Walrus storage
    aggregator_url: str = Field(
        default="https://aggregator.walrus-testnet.walrus.space",
        alias="WALRUS_AGGREGATOR_URL",
        description="Aggregator endpoint used to build blob retrieval URLs",
    )
    walrus_binary: str = Field(
        default="walrus",
        alias="WALRUS_BINARY",
        description="Walrus CLI executable",
    )
    walrus_context: str = Field(
        default="",
        alias="WALRUS_CONTEXT",
        description="Optional Walrus client context (e.g. 'testnet')",
    )
    storage_epochs: int = Field(
        default=2,
        ge=1,
        le=200,
        alias="WALRUS_EPOCHS",
        description="Number of storage epochs each blob is retained for",
    )

    # Transcoding
    ffmpeg_binary: str = Field(
        default="ffmpeg",
        alias="FFMPEG_BINARY",
        description="FFmpeg executable",
    )
    segment_seconds: int = Field(
        default=10,
        ge=1,
        le=60,
        alias="HLS_SEGMENT_SECONDS",
        description="Target HLS segment duration",
    )

    # Timeouts (None means wait indefinitely)
    transcode_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        alias="TRANSCODE_TIMEOUT_SECONDS",
        description="Maximum FFmpeg run time",
    )
    upload_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        alias="UPLOAD_TIMEOUT_SECONDS",
        description="Maximum run time of one Walrus batch store",
    )
    publish_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        alias="PUBLISH_TIMEOUT_SECONDS",
        description="Maximum run time of one Sui client call",
    )

    # Sui ledger
    sui_binary: str = Field(
        default="sui",
        alias="SUI_BINARY",
        description="Sui CLI executable",
    )
    sui_package_id: str = Field(
        default="",
        alias="SUI_PACKAGE_ID",
        description="Published Move package holding the video record module",
    )
    sui_module: str = Field(
        default="video",
        alias="SUI_MODULE",
        description="Move module name",
    )
    sui_function: str = Field(
        default="create_video",
        alias="SUI_FUNCTION",
        description="Move entry function that creates and shares the record",
    )
    sui_clock_object_id: str = Field(
        default="0x6",
        alias="SUI_CLOCK_OBJECT_ID",
        description="Shared clock object used to timestamp records",
    )
    sui_gas_budget: int = Field(
        default=10_000_000,
        gt=0,
        alias="SUI_GAS_BUDGET",
        description="Gas budget in MIST for the create call",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )

    @field_validator("aggregator_url", mode="before")
    @classmethod
    def validate_aggregator_url(cls, v: str) -> str:
        """Ensure the aggregator endpoint is an HTTP(S) URL."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Aggregator URL must start with https:// or http://")
        return v.rstrip("/")

    @field_validator("sui_package_id", "sui_clock_object_id", mode="before")
    @classmethod
    def validate_object_id(cls, v: str) -> str:
        """Validate Sui object ID format."""
        if v and not v.startswith("0x"):
            raise ValueError("Invalid Sui object ID - must start with '0x'")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached for the lifetime of the process.

    Returns:
        Validated Settings instance

    Raises:
        ValidationError: If environment variables are invalid
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when environment variables change.
    """
    get_settings.cache_clear()


def load_settings() -> Settings:
    """Get cached settings, reporting invalid environment values as a pipeline error.

    Raises:
        ConfigurationError: If any environment variable fails validation
    """
    try:
        return get_settings()
    except ValidationError as e:
        invalid = [".".join(str(loc) for loc in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(invalid)}",
            {"errors": e.errors(include_url=False, include_input=False, include_context=False)},
        )
