"""Transcoding module for the publishing pipeline.

This module handles:
- Rendition ladder definition
- FFmpeg command construction (filter graph, encoders, HLS muxer)
- FFmpeg execution
"""

from .command import build_ffmpeg_command
from .renditions import RENDITIONS, build_filter_graph
from .runner import ensure_output_dir, run_transcode

__all__ = [
    "RENDITIONS",
    "build_filter_graph",
    "build_ffmpeg_command",
    "ensure_output_dir",
    "run_transcode",
]
