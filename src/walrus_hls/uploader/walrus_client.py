"""Walrus CLI batch store wrapper.

Uploads a batch of files with a single ``walrus store ... --json`` call and
turns the JSON result list into a path -> blob ID mapping.

A blob that already exists on the network is reported as
``alreadyCertified``; a fresh upload as ``newlyCreated``. Because blob IDs
are derived from content, uploading identical bytes twice yields the same ID.
"""

import subprocess
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..shared.config import Settings, get_settings
from ..shared.exceptions import PartialMappingError, UploadFailedError
from ..shared.log import get_logger
from ..shared.models import BlobMapping, StoreRecord

logger = get_logger("walrus-hls-uploader")

_STORE_RESULTS = TypeAdapter(list[StoreRecord])


def build_store_command(file_paths: list[str], settings: Settings) -> list[str]:
    """Build the ``walrus store`` argv for one batch.

    Args:
        file_paths: Paths relative to the directory the command runs in
        settings: Application settings (binary, epochs, context)

    Returns:
        Argument list suitable for ``subprocess.run``
    """
    command = [settings.walrus_binary, "store", *file_paths, "--epochs", str(settings.storage_epochs), "--json"]
    if settings.walrus_context:
        command.extend(["--context", settings.walrus_context])
    return command


def parse_store_output(output: str) -> list[StoreRecord]:
    """Parse the JSON written by ``walrus store --json``.

    Raises:
        UploadFailedError: If the output is not a list of store results
    """
    try:
        return _STORE_RESULTS.validate_json(output)
    except ValidationError as e:
        raise UploadFailedError(
            f"Invalid Walrus CLI output: {e.error_count()} validation error(s)",
            {"errors": e.errors(include_url=False, include_input=False), "output": output[:500]},
        )


def store_files(
    file_paths: list[str],
    root: str | Path,
    settings: Settings | None = None,
) -> BlobMapping:
    """Upload files to Walrus in one batch.

    Args:
        file_paths: POSIX paths relative to ``root``
        root: Directory the CLI runs in
        settings: Application settings (defaults to cached settings)

    Returns:
        Mapping from each requested path to its blob ID

    Raises:
        UploadFailedError: If the CLI is missing, times out, exits non-zero
            or prints unparseable output
        PartialMappingError: If any requested path did not resolve to a blob ID

    Example:
        >>> store_files(["stream_0/data000.ts"], "./output")
        {'stream_0/data000.ts': 'N4FAI95sl_aWcBz_JMDUBNR9XWjWkqKT_J0STyZWtK8'}
    """
    settings = settings or get_settings()
    if not file_paths:
        return {}

    root_path = Path(root).resolve()
    command = build_store_command(file_paths, settings)

    logger.info(f"Uploading {len(file_paths)} files via CLI", extra={"epochs": settings.storage_epochs})

    try:
        result = subprocess.run(
            command,
            cwd=root_path,
            capture_output=True,
            text=True,
            timeout=settings.upload_timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        raise UploadFailedError(
            "Walrus CLI timed out",
            {"file_count": len(file_paths), "timeout_seconds": settings.upload_timeout_seconds},
        )
    except FileNotFoundError:
        raise UploadFailedError(
            "Walrus CLI not found - ensure the walrus client is installed",
            {"walrus_binary": settings.walrus_binary},
        )

    if result.returncode != 0:
        raise UploadFailedError(
            f"Walrus CLI failed: {result.stderr.strip()}",
            {"returncode": result.returncode, "stderr": result.stderr, "file_count": len(file_paths)},
        )

    records = parse_store_output(result.stdout)

    mappings: BlobMapping = {}
    unresolved = []

    for record in records:
        path = _normalize_path(record.path, root_path)
        blob_id = record.blob_store_result.blob_id

        if blob_id is None:
            unresolved.append(path)
            continue

        mappings[path] = blob_id
        logger.info(f"Uploaded {path} -> {blob_id}")

    unresolved.extend(p for p in file_paths if p not in mappings and p not in unresolved)
    if unresolved:
        raise PartialMappingError(
            f"No blob ID returned for {len(unresolved)} file(s)",
            unresolved,
        )

    # Only the requested paths; extra records never widen the mapping
    return {path: mappings[path] for path in file_paths}


def _normalize_path(reported: str, root: Path) -> str:
    """Express a path reported by the CLI relative to ``root`` in POSIX form."""
    path = Path(reported)
    if path.is_absolute():
        try:
            path = path.resolve().relative_to(root)
        except ValueError:
            return path.as_posix()
    return path.as_posix()
