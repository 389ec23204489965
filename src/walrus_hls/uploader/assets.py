"""HLS output tree enumeration.

Walks the transcoder output and classifies files into segments,
sub-manifests and the master manifest. Directory listings are sorted
(rendition ordinal, then segment sequence number) so upload batches are
deterministic across runs and filesystems.
"""

import re
from pathlib import Path

from ..shared.exceptions import MissingAssetError
from ..shared.log import get_logger
from ..shared.models import (
    MASTER_PLAYLIST_FILENAME,
    PLAYLIST_FILENAME,
    RENDITION_DIR_PREFIX,
    SEGMENT_EXTENSION,
    AssetFile,
    AssetRole,
    AssetTree,
)

logger = get_logger("walrus-hls-uploader")

RENDITION_DIR_PATTERN = re.compile(rf"^{re.escape(RENDITION_DIR_PREFIX)}(\d+)$")
SEQUENCE_PATTERN = re.compile(r"(\d+)(?=\.[^.]+$)")


def list_rendition_dirs(root: Path) -> list[str]:
    """List rendition directories (``stream_<n>``) sorted by ordinal.

    Args:
        root: Transcoder output directory

    Returns:
        Directory names, e.g. ['stream_0', 'stream_1', 'stream_2']
    """
    matches = []
    for entry in root.iterdir():
        match = RENDITION_DIR_PATTERN.match(entry.name)
        if match and entry.is_dir():
            matches.append((int(match.group(1)), entry.name))

    return [name for _, name in sorted(matches)]


def collect_segment_files(root: Path, rendition_dirs: list[str]) -> list[AssetFile]:
    """Collect segment files of every rendition as relative paths.

    Within a rendition, segments are ordered by their sequence number
    (``data2.ts`` before ``data10.ts`` even without zero padding).
    """
    segments = []

    for rendition_dir in rendition_dirs:
        files = [
            f for f in (root / rendition_dir).iterdir()
            if f.is_file() and f.suffix == SEGMENT_EXTENSION
        ]
        for file in sorted(files, key=_segment_sort_key):
            segments.append(AssetFile(
                path=f"{rendition_dir}/{file.name}",
                role=AssetRole.SEGMENT,
            ))

    return segments


def enumerate_assets(output_dir: str | Path) -> AssetTree:
    """Enumerate the complete HLS tree written by the transcoder.

    Args:
        output_dir: Transcoder output directory

    Returns:
        AssetTree with sorted rendition dirs, segments and manifests

    Raises:
        MissingAssetError: If the root is missing, has no rendition
            directories, or lacks a sub-manifest or the master manifest
    """
    root = Path(output_dir).resolve()
    if not root.is_dir():
        raise MissingAssetError(
            f"Output directory does not exist: {root}",
            {"output_dir": str(root)},
        )

    rendition_dirs = list_rendition_dirs(root)
    if not rendition_dirs:
        raise MissingAssetError(
            f"No {RENDITION_DIR_PREFIX}<n> directories found in {root}",
            {"output_dir": str(root)},
        )

    logger.info(
        f"Found {len(rendition_dirs)} stream directories",
        extra={"rendition_dirs": rendition_dirs},
    )

    sub_manifests = []
    for rendition_dir in rendition_dirs:
        playlist = root / rendition_dir / PLAYLIST_FILENAME
        if not playlist.is_file():
            raise MissingAssetError(
                f"Missing sub-manifest: {rendition_dir}/{PLAYLIST_FILENAME}",
                {"rendition_dir": rendition_dir},
            )
        sub_manifests.append(AssetFile(
            path=f"{rendition_dir}/{PLAYLIST_FILENAME}",
            role=AssetRole.SUB_MANIFEST,
        ))

    if not (root / MASTER_PLAYLIST_FILENAME).is_file():
        raise MissingAssetError(
            f"Missing master manifest: {MASTER_PLAYLIST_FILENAME}",
            {"output_dir": str(root)},
        )

    return AssetTree(
        root=root,
        rendition_dirs=rendition_dirs,
        segments=collect_segment_files(root, rendition_dirs),
        sub_manifests=sub_manifests,
        master=AssetFile(path=MASTER_PLAYLIST_FILENAME, role=AssetRole.MASTER_MANIFEST),
    )


def _segment_sort_key(file: Path) -> tuple[int, str]:
    """Sort by trailing sequence number, falling back to the name."""
    match = SEQUENCE_PATTERN.search(file.name)
    return (int(match.group(1)) if match else -1, file.name)
