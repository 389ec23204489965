"""Manifest rewriting module for the publishing pipeline.

This module handles:
- Segment filename -> blob URL substitution in sub-manifests
- Sub-manifest path -> blob URL substitution in the master manifest
- Playlist parsing and dangling-reference detection
"""

from .playlist import find_local_references, parse_segments, parse_variant_streams
from .rewriter import blob_url, replace_full_lines, rewrite_master_playlist, rewrite_media_playlist

__all__ = [
    "blob_url",
    "replace_full_lines",
    "rewrite_media_playlist",
    "rewrite_master_playlist",
    "find_local_references",
    "parse_segments",
    "parse_variant_streams",
]
