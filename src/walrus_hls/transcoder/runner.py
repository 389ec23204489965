"""FFmpeg execution.

Runs the fixed HLS conversion once. FFmpeg's own progress output is
passed through to the terminal; only the exit code decides success.
"""

import subprocess
from pathlib import Path

from ..shared.config import Settings, get_settings
from ..shared.exceptions import TranscodeFailedError
from ..shared.log import get_logger
from .command import build_ffmpeg_command
from .renditions import RENDITIONS

logger = get_logger("walrus-hls-transcoder")


def ensure_output_dir(output_dir: str | Path) -> Path:
    """Create the output directory (and parents) if it doesn't exist."""
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def run_transcode(
    input_file: str | Path,
    output_dir: str | Path,
    settings: Settings | None = None,
) -> Path:
    """Convert an MP4 file to a three-rendition HLS tree.

    FFmpeg is started with the output directory as its working directory so
    every path it writes is relative to it. The calling process's own
    working directory is left untouched.

    Args:
        input_file: Validated source video
        output_dir: Destination directory (created if absent)
        settings: Application settings (defaults to cached settings)

    Returns:
        Resolved output directory

    Raises:
        TranscodeFailedError: If FFmpeg is missing, times out or exits non-zero
    """
    settings = settings or get_settings()

    source = Path(input_file).resolve()
    output_path = ensure_output_dir(output_dir).resolve()
    command = build_ffmpeg_command(source, RENDITIONS, settings)

    logger.info(
        "Converting to HLS",
        extra={
            "input_file": str(source),
            "output_dir": str(output_path),
            "renditions": [r.name for r in RENDITIONS],
        },
    )
    logger.debug("FFmpeg command", extra={"command": command})

    try:
        result = subprocess.run(
            command,
            cwd=output_path,
            stdin=subprocess.DEVNULL,
            timeout=settings.transcode_timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        raise TranscodeFailedError(
            "FFmpeg timed out",
            {"input_file": str(source), "timeout_seconds": settings.transcode_timeout_seconds},
        )
    except FileNotFoundError:
        raise TranscodeFailedError(
            "FFmpeg not found - ensure FFmpeg is installed",
            {"ffmpeg_binary": settings.ffmpeg_binary},
        )

    if result.returncode != 0:
        raise TranscodeFailedError(
            f"FFmpeg conversion failed with exit code {result.returncode}",
            {"input_file": str(source), "returncode": result.returncode},
        )

    logger.info("FFmpeg conversion completed", extra={"output_dir": str(output_path)})
    return output_path
