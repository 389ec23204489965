"""Custom exception hierarchy for the publishing pipeline.

All pipeline-specific exceptions inherit from PipelineError, which carries
a machine-readable error code so the CLI can log a structured record and
print a readable message.

Exception hierarchy:
    PipelineError (base)
    ├── ConfigurationError
    ├── InputValidationError
    │   ├── InputNotFoundError
    │   └── UnsupportedFormatError
    ├── TranscodeFailedError
    ├── MissingAssetError
    ├── UploadFailedError
    │   └── PartialMappingError
    └── PublishFailedError
"""

from typing import Any


class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code for log filtering
        details: Additional context as key-value pairs
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize pipeline error.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (e.g., 'UPLOAD_FAILED')
            details: Additional context for debugging
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON serialization.

        Returns:
            Dictionary with error_code, error_message, and details.
            Note: Uses 'error_message' instead of 'message' to avoid conflicts
            with Python's logging module which reserves 'message' internally.
        """
        return {
            "error_code": self.error_code,
            "error_message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.error_code!r}, {self.message!r})"


class ConfigurationError(PipelineError):
    """Raised when environment settings fail validation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "INVALID_CONFIG", details)


class InputValidationError(PipelineError):
    """Raised when the source video is rejected before transcoding."""


class InputNotFoundError(InputValidationError):
    """Raised when the source path does not exist (or is not a file)."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"Input file does not exist: {file_path}",
            "NOT_FOUND",
            {"file_path": file_path},
        )


class UnsupportedFormatError(InputValidationError):
    """Raised when the source container extension is not supported."""

    def __init__(self, file_path: str, extension: str, expected: str) -> None:
        super().__init__(
            f"Input file must be an {expected.lstrip('.').upper()} file. Got: {extension or '(none)'}",
            "UNSUPPORTED_FORMAT",
            {"file_path": file_path, "extension": extension, "expected": expected},
        )


class TranscodeFailedError(PipelineError):
    """Raised when FFmpeg exits non-zero, times out or cannot be started.

    There is no retry and no partial-result salvage.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "TRANSCODE_FAILED", details)


class MissingAssetError(PipelineError):
    """Raised when the HLS output tree lacks an expected file or directory.

    This covers:
    - No rendition directories in the output root
    - A rendition directory without its sub-manifest
    - Missing master manifest
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "MISSING_ASSET", details)


class UploadFailedError(PipelineError):
    """Raised when a Walrus batch store fails.

    This covers:
    - Non-zero exit from the Walrus CLI
    - CLI binary not found
    - Output that is not the expected JSON result list
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "UPLOAD_FAILED", details)


class PartialMappingError(UploadFailedError):
    """Raised when an uploaded or referenced file has no blob ID.

    A missing mapping would otherwise leave a dangling local filename inside
    a published manifest.
    """

    def __init__(self, message: str, missing: list[str]) -> None:
        super().__init__(message, {"missing_paths": missing})
        # Override error code for more specific log filtering
        self.error_code = "PARTIAL_MAPPING"
        self.missing = missing


class PublishFailedError(PipelineError):
    """Raised when the ledger record cannot be created or read back."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "PUBLISH_FAILED", details)
