"""Sui CLI wrapper for video records.

A video record is a Move object holding a title, a description, the master
manifest URL and a creation timestamp taken from the network clock. The
Move entry function creates it and immediately shares it, so the publisher
does not own it afterwards and nobody can mutate it.
"""

import json
import subprocess
from typing import Any

from ..shared.config import Settings, get_settings
from ..shared.exceptions import PublishFailedError
from ..shared.log import get_logger
from ..shared.models import PublishedRecord

logger = get_logger("walrus-hls-publisher")


def build_publish_command(
    title: str,
    description: str,
    manifest_url: str,
    settings: Settings,
) -> list[str]:
    """Build the ``sui client call`` argv that creates one record.

    Raises:
        PublishFailedError: If no package ID is configured
    """
    if not settings.sui_package_id:
        raise PublishFailedError(
            "SUI_PACKAGE_ID is not configured",
            {"setting": "SUI_PACKAGE_ID"},
        )

    return [
        settings.sui_binary, "client", "call",
        "--package", settings.sui_package_id,
        "--module", settings.sui_module,
        "--function", settings.sui_function,
        "--args", title, description, manifest_url, settings.sui_clock_object_id,
        "--gas-budget", str(settings.sui_gas_budget),
        "--json",
    ]


def publish_record(
    title: str,
    description: str,
    manifest_url: str,
    settings: Settings | None = None,
) -> PublishedRecord:
    """Create and share a video record on the ledger.

    The manifest URL is passed through unchecked; the Move module is
    responsible for validating it.

    Args:
        title: Video title
        description: Video description
        manifest_url: Master manifest retrieval URL
        settings: Application settings (defaults to cached settings)

    Returns:
        PublishedRecord with the new object ID and transaction digest

    Raises:
        PublishFailedError: If the call fails or creates no record
    """
    settings = settings or get_settings()
    command = build_publish_command(title, description, manifest_url, settings)

    logger.info(
        "Creating video record",
        extra={"package_id": settings.sui_package_id, "title": title, "manifest_url": manifest_url},
    )

    payload = _run_sui(command, settings)

    status = payload.get("effects", {}).get("status", {})
    if status.get("status") != "success":
        raise PublishFailedError(
            f"Transaction failed: {status.get('error', 'unknown error')}",
            {"digest": payload.get("digest"), "status": status},
        )

    object_id = _find_created_object(payload.get("objectChanges", []), settings.sui_module)
    if object_id is None:
        raise PublishFailedError(
            "Transaction created no video record",
            {"digest": payload.get("digest")},
        )

    record = PublishedRecord(
        object_id=object_id,
        digest=payload.get("digest"),
        title=title,
        description=description,
        manifest_url=manifest_url,
    )
    logger.info("Video record created", extra={"object_id": object_id, "digest": record.digest})
    return record


def fetch_record(object_id: str, settings: Settings | None = None) -> PublishedRecord:
    """Read a video record back from the ledger.

    Args:
        object_id: Record object ID
        settings: Application settings (defaults to cached settings)

    Returns:
        PublishedRecord including the network creation timestamp

    Raises:
        PublishFailedError: If the object cannot be read or is not a record
    """
    settings = settings or get_settings()
    payload = _run_sui(
        [settings.sui_binary, "client", "object", object_id, "--json"],
        settings,
    )

    # Newer CLI versions wrap the object in a "data" envelope
    data = payload.get("data") or payload
    if not isinstance(data, dict) or "error" in payload:
        raise PublishFailedError(
            f"Object {object_id} not found",
            {"object_id": object_id, "error": payload.get("error")},
        )

    fields = (data.get("content") or {}).get("fields")
    if not isinstance(fields, dict):
        raise PublishFailedError(
            f"Object {object_id} has no Move content",
            {"object_id": object_id},
        )

    try:
        return PublishedRecord(
            object_id=data.get("objectId", object_id),
            digest=data.get("previousTransaction"),
            title=fields["title"],
            description=fields["description"],
            manifest_url=fields["manifest_url"],
            created_at_ms=int(fields["created_at"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise PublishFailedError(
            f"Object {object_id} is not a video record: {e}",
            {"object_id": object_id, "fields": sorted(fields)},
        )


def _run_sui(command: list[str], settings: Settings) -> dict[str, Any]:
    """Run a Sui CLI command and decode its JSON output."""
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=settings.publish_timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        raise PublishFailedError(
            "Sui CLI timed out",
            {"timeout_seconds": settings.publish_timeout_seconds},
        )
    except FileNotFoundError:
        raise PublishFailedError(
            "Sui CLI not found - ensure the sui client is installed",
            {"sui_binary": settings.sui_binary},
        )

    if result.returncode != 0:
        raise PublishFailedError(
            f"Sui CLI failed: {result.stderr.strip()}",
            {"returncode": result.returncode, "stderr": result.stderr},
        )

    try:
        payload = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise PublishFailedError(
            f"Invalid Sui CLI output: {e}",
            {"output": result.stdout[:500]},
        )

    if not isinstance(payload, dict):
        raise PublishFailedError("Unexpected Sui CLI output", {"output": result.stdout[:500]})
    return payload


def _find_created_object(object_changes: list[dict[str, Any]], module: str) -> str | None:
    """Pick the object created from ``module`` out of the transaction changes."""
    for change in object_changes:
        if change.get("type") == "created" and f"::{module}::" in change.get("objectType", ""):
            return change.get("objectId")
    return None
