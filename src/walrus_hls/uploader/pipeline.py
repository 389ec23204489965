"""HLS tree upload orchestration.

Uploads a transcoder output directory to Walrus in three batches:

1. All segment files
2. All sub-manifests, rewritten to reference segment blob URLs
3. The master manifest, rewritten to reference sub-manifest blob URLs

Each batch depends on the blob IDs of the previous one. Rewritten
manifests are staged as temporary files next to the originals (the
originals are never modified) and removed again whether or not the upload
succeeds.
"""

from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path

from ..manifest_rewriter import find_local_references, rewrite_master_playlist, rewrite_media_playlist
from ..shared.config import Settings, get_settings
from ..shared.exceptions import PartialMappingError
from ..shared.log import get_logger
from ..shared.models import (
    TEMP_MASTER_FILENAME,
    TEMP_PLAYLIST_FILENAME,
    AssetTree,
    BlobMapping,
    UploadResult,
)
from .assets import enumerate_assets
from .walrus_client import store_files

logger = get_logger("walrus-hls-uploader")


@contextmanager
def staged_manifest(root: Path, relative_path: str, content: str) -> Iterator[str]:
    """Write a rewritten manifest to a temporary file for the upload.

    Args:
        root: Output root the path is relative to
        relative_path: Where to stage the file, e.g. 'stream_0/temp_playlist.m3u8'
        content: Rewritten manifest text

    Yields:
        ``relative_path``, once the file exists on disk
    """
    full_path = root / relative_path
    full_path.write_text(content, encoding="utf-8")
    try:
        yield relative_path
    finally:
        full_path.unlink(missing_ok=True)


def upload_hls_assets(
    output_dir: str | Path,
    settings: Settings | None = None,
) -> UploadResult:
    """Upload an HLS output tree and rewrite its manifests to blob URLs.

    Args:
        output_dir: Transcoder output directory
        settings: Application settings (defaults to cached settings)

    Returns:
        UploadResult with the master blob ID and a mapping holding exactly
        one entry per segment, sub-manifest and master manifest, keyed by
        original relative path

    Raises:
        MissingAssetError: If the tree is incomplete
        UploadFailedError: If any batch upload fails
        PartialMappingError: If a file got no blob ID or a rewritten
            manifest still references a local file
    """
    settings = settings or get_settings()
    tree = enumerate_assets(output_dir)

    logger.info("Starting HLS assets upload to Walrus", extra={"output_dir": str(tree.root)})

    blob_mappings: BlobMapping = {}

    logger.info(f"Uploading {len(tree.segments)} segment files")
    blob_mappings.update(store_files(tree.segment_paths, tree.root, settings))

    blob_mappings.update(_upload_sub_manifests(tree, blob_mappings, settings))

    master_blob_id = _upload_master(tree, blob_mappings, settings)
    blob_mappings[tree.master.path] = master_blob_id

    logger.info(
        "All HLS assets uploaded to Walrus",
        extra={"master_blob_id": master_blob_id, "total_files": len(blob_mappings)},
    )

    return UploadResult(
        master_blob_id=master_blob_id,
        blob_mappings=blob_mappings,
        aggregator_url=settings.aggregator_url,
    )


def _upload_sub_manifests(
    tree: AssetTree,
    blob_mappings: BlobMapping,
    settings: Settings,
) -> BlobMapping:
    """Rewrite and upload every rendition's playlist in one batch.

    Returns:
        Original sub-manifest path -> blob ID of its rewritten copy
    """
    staged: dict[str, str] = {}  # temp path -> original path

    with ExitStack() as stack:
        for sub_manifest in tree.sub_manifests:
            logger.info(
                f"Processing playlist: {sub_manifest.path}",
                extra={"segment_count": len(tree.segments_in(sub_manifest.rendition_dir))},
            )

            original = (tree.root / sub_manifest.path).read_text(encoding="utf-8")
            rewritten = rewrite_media_playlist(
                original,
                sub_manifest.rendition_dir,
                blob_mappings,
                settings.aggregator_url,
            )
            _ensure_fully_rewritten(sub_manifest.path, rewritten)

            temp_path = stack.enter_context(staged_manifest(
                tree.root,
                f"{sub_manifest.rendition_dir}/{TEMP_PLAYLIST_FILENAME}",
                rewritten,
            ))
            staged[temp_path] = sub_manifest.path

        logger.info(f"Uploading {len(staged)} playlist files in batch")
        uploaded = store_files(list(staged), tree.root, settings)

    remapped = {}
    for temp_path, original_path in staged.items():
        remapped[original_path] = uploaded[temp_path]
        logger.info(f"Uploaded updated {original_path} -> {uploaded[temp_path]}")

    return remapped


def _upload_master(
    tree: AssetTree,
    blob_mappings: BlobMapping,
    settings: Settings,
) -> str:
    """Rewrite and upload the master manifest; returns its blob ID."""
    logger.info("Processing master playlist")

    original = (tree.root / tree.master.path).read_text(encoding="utf-8")
    rewritten = rewrite_master_playlist(original, blob_mappings, settings.aggregator_url)
    _ensure_fully_rewritten(tree.master.path, rewritten)

    with staged_manifest(tree.root, TEMP_MASTER_FILENAME, rewritten) as temp_path:
        uploaded = store_files([temp_path], tree.root, settings)

    logger.info(f"Uploaded updated {tree.master.path} -> {uploaded[temp_path]}")
    return uploaded[temp_path]


def _ensure_fully_rewritten(manifest_path: str, content: str) -> None:
    """Refuse to publish a manifest that still points at local files."""
    dangling = find_local_references(content)
    if dangling:
        raise PartialMappingError(
            f"{manifest_path} still references {len(dangling)} local file(s) after rewriting",
            dangling,
        )
