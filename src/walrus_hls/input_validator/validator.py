"""Source file validation.

Pre-flight checks run before FFmpeg is started.
"""

from pathlib import Path

from ..shared.exceptions import InputNotFoundError, UnsupportedFormatError
from ..shared.log import get_logger
from ..shared.models import SOURCE_EXTENSION

logger = get_logger("walrus-hls-input-validator")


def validate_input_file(file_path: str | Path) -> Path:
    """Check that the source exists and is an MP4 container.

    The extension comparison is case-insensitive (``clip.MP4`` is accepted).
    Nothing is read or written.

    Args:
        file_path: Path to the source video

    Returns:
        The path as a ``Path``

    Raises:
        InputNotFoundError: If the path does not exist or is a directory
        UnsupportedFormatError: If the extension is not ``.mp4``
    """
    path = Path(file_path)

    if not path.is_file():
        raise InputNotFoundError(str(path))

    extension = path.suffix.lower()
    if extension != SOURCE_EXTENSION:
        raise UnsupportedFormatError(str(path), extension, SOURCE_EXTENSION)

    logger.debug(
        "Input file accepted",
        extra={"file_path": str(path), "size_bytes": path.stat().st_size},
    )
    return path
