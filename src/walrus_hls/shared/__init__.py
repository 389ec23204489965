"""Shared utilities for the Walrus HLS publishing pipeline."""

from .config import Settings, clear_settings_cache, get_settings, load_settings
from .exceptions import (
    PipelineError,
    ConfigurationError,
    InputValidationError,
    InputNotFoundError,
    UnsupportedFormatError,
    TranscodeFailedError,
    MissingAssetError,
    UploadFailedError,
    PartialMappingError,
    PublishFailedError,
)
from .models import (
    Rendition,
    AssetRole,
    AssetFile,
    AssetTree,
    BlobMapping,
    StoreRecord,
    BlobStoreResult,
    UploadResult,
    PublishedRecord,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "load_settings",
    "clear_settings_cache",
    # Exceptions
    "PipelineError",
    "ConfigurationError",
    "InputValidationError",
    "InputNotFoundError",
    "UnsupportedFormatError",
    "TranscodeFailedError",
    "MissingAssetError",
    "UploadFailedError",
    "PartialMappingError",
    "PublishFailedError",
    # Models
    "Rendition",
    "AssetRole",
    "AssetFile",
    "AssetTree",
    "BlobMapping",
    "StoreRecord",
    "BlobStoreResult",
    "UploadResult",
    "PublishedRecord",
]
