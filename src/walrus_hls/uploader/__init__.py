"""Upload module for the publishing pipeline.

This module handles:
- HLS output tree enumeration
- Walrus batch store calls
- Three-stage upload with manifest rewriting
"""

from .assets import collect_segment_files, enumerate_assets, list_rendition_dirs
from .pipeline import staged_manifest, upload_hls_assets
from .walrus_client import build_store_command, parse_store_output, store_files

__all__ = [
    "list_rendition_dirs",
    "collect_segment_files",
    "enumerate_assets",
    "build_store_command",
    "parse_store_output",
    "store_files",
    "staged_manifest",
    "upload_hls_assets",
]
