"""Result formatters for the command line.

Formats pipeline outcomes for two audiences:
- Humans (plain-text summary)
- Scripts (JSON, via ``--json``)
"""

import json
from datetime import datetime, timezone
from typing import Any

from ..shared.exceptions import PipelineError
from ..shared.models import PublishedRecord, UploadResult


def format_upload_summary(
    result: UploadResult,
    variants: list[dict[str, Any]] | None = None,
    record: PublishedRecord | None = None,
) -> str:
    """Format a human-readable summary of a completed run.

    Args:
        result: Upload result
        variants: Parsed variant streams of the original master manifest
        record: Ledger record, if one was published

    Returns:
        Formatted message string
    """
    lines = [
        "=" * 60,
        "UPLOAD COMPLETE",
        "=" * 60,
        "",
        f"Master playlist URL: {result.master_url}",
        f"Master playlist blob ID: {result.master_blob_id}",
        f"Total files uploaded: {len(result.blob_mappings)}",
    ]

    if variants:
        lines.append("")
        lines.append("Variants:")
        for v in variants:
            lines.append(
                f"  - {v.get('resolution') or '?'}: "
                f"{_format_bandwidth(v.get('bandwidth', 0))}"
            )

    if record is not None:
        lines.extend([
            "",
            "Ledger Record:",
            f"  Object ID: {record.object_id}",
            f"  Digest: {record.digest or 'N/A'}",
            f"  Title: {record.title}",
        ])

    lines.extend(["", "All blob mappings:"])
    for path, url in result.blob_urls().items():
        lines.append(f"  {path} -> {url}")

    lines.extend(["", "-" * 60])
    return "\n".join(lines)


def format_json_summary(
    result: UploadResult,
    variants: list[dict[str, Any]] | None = None,
    record: PublishedRecord | None = None,
) -> str:
    """Format a run summary as JSON.

    Returns:
        JSON string
    """
    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "master_blob_id": result.master_blob_id,
        "master_url": result.master_url,
        "blob_mappings": result.blob_mappings,
        "variants": variants or [],
        "record": record.model_dump() if record is not None else None,
    }

    return json.dumps(payload, indent=2, default=str)


def format_record(record: PublishedRecord, as_json: bool = False) -> str:
    """Format a single ledger record."""
    if as_json:
        return json.dumps(record.model_dump(), indent=2, default=str)

    lines = [
        f"Object ID: {record.object_id}",
        f"Digest: {record.digest or 'N/A'}",
        f"Title: {record.title}",
        f"Description: {record.description}",
        f"Manifest URL: {record.manifest_url}",
    ]
    if record.created_at_ms is not None:
        created = datetime.fromtimestamp(record.created_at_ms / 1000, tz=timezone.utc)
        lines.append(f"Created: {created.isoformat()}")
    return "\n".join(lines)


def format_error_message(error: PipelineError) -> str:
    """Format a pipeline error for stderr.

    Args:
        error: The error that ended the run

    Returns:
        Formatted message string
    """
    hints = {
        "INVALID_CONFIG": "Fix the environment variables named above.",
        "NOT_FOUND": "Check the input path.",
        "UNSUPPORTED_FORMAT": "Only .mp4 sources are supported.",
        "TRANSCODE_FAILED": "Review the FFmpeg output above; the source needs a video and an audio stream.",
        "MISSING_ASSET": "The output directory is incomplete; re-run the conversion.",
        "UPLOAD_FAILED": "Check that the walrus client is installed, configured and funded.",
        "PARTIAL_MAPPING": "Some files were not stored; nothing referencing them was published.",
        "PUBLISH_FAILED": "Check SUI_PACKAGE_ID and the active sui client address.",
    }

    lines = [f"Error: {error.message}"]
    hint = hints.get(error.error_code)
    if hint:
        lines.append(f"Hint: {hint}")
    return "\n".join(lines)


def _format_bandwidth(bits_per_second: int) -> str:
    """Format a bandwidth in bits/s as Kbps."""
    return f"{bits_per_second // 1000} Kbps"
