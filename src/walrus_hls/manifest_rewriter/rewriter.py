"""Manifest reference rewriting.

Both passes are textual and line-anchored: a reference is replaced only
when it occupies a whole line, so tags such as ``#EXTINF`` and any line that
merely contains a filename are left alone. Line endings are preserved.
"""

from pathlib import PurePosixPath

from ..shared.models import PLAYLIST_FILENAME, SEGMENT_EXTENSION, BlobMapping


def blob_url(blob_id: str, aggregator_url: str) -> str:
    """Build the retrieval URL for a blob (``<aggregator>/v1/blobs/<id>``)."""
    return f"{aggregator_url.rstrip('/')}/v1/blobs/{blob_id}"


def replace_full_lines(content: str, replacements: dict[str, str]) -> str:
    """Replace every line that exactly equals a key with its value.

    Args:
        content: Playlist text
        replacements: Line text (without line ending) -> replacement

    Returns:
        Rewritten text; unmatched lines are returned byte-for-byte
    """
    if not replacements:
        return content

    rewritten = []
    for line in content.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        ending = line[len(body):]
        rewritten.append(replacements.get(body, body) + ending)

    return "".join(rewritten)


def rewrite_media_playlist(
    content: str,
    rendition_dir: str,
    blob_mappings: BlobMapping,
    aggregator_url: str,
) -> str:
    """Point a rendition's segment lines at their blob URLs.

    Only mapping entries that live directly under ``rendition_dir`` and carry
    the segment extension are considered; their bare filenames are what
    FFmpeg writes into the sub-manifest.

    Args:
        content: Original sub-manifest text
        rendition_dir: Rendition directory, e.g. 'stream_0'
        blob_mappings: Relative path -> blob ID (segments already uploaded)
        aggregator_url: Aggregator endpoint

    Returns:
        Rewritten sub-manifest text
    """
    replacements = {}

    for file_path, blob_id in blob_mappings.items():
        path = PurePosixPath(file_path)
        if path.parent.as_posix() == rendition_dir and path.suffix == SEGMENT_EXTENSION:
            replacements[path.name] = blob_url(blob_id, aggregator_url)

    return replace_full_lines(content, replacements)


def rewrite_master_playlist(
    content: str,
    blob_mappings: BlobMapping,
    aggregator_url: str,
) -> str:
    """Point the master's variant lines at the uploaded sub-manifests.

    Must run after every rewritten sub-manifest has been uploaded and merged
    into ``blob_mappings``.

    Args:
        content: Original master manifest text
        blob_mappings: Relative path -> blob ID, including sub-manifests
        aggregator_url: Aggregator endpoint

    Returns:
        Rewritten master manifest text
    """
    replacements = {}

    for file_path, blob_id in blob_mappings.items():
        path = PurePosixPath(file_path)
        if path.name == PLAYLIST_FILENAME and path.parent.as_posix() != ".":
            reference = f"{path.parent.as_posix()}/{PLAYLIST_FILENAME}"
            replacements[reference] = blob_url(blob_id, aggregator_url)

    return replace_full_lines(content, replacements)
