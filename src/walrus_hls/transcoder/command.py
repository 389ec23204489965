"""FFmpeg command builder.

Constructs the single FFmpeg invocation that turns an MP4 source into the
segmented HLS tree:

    master.m3u8
    stream_0/playlist.m3u8, stream_0/data000.ts, ...
    stream_1/...
    stream_2/...

All output paths are relative; the command must run with the output
directory as its working directory.
"""

from pathlib import Path

from ..shared.config import Settings
from ..shared.models import (
    MASTER_PLAYLIST_FILENAME,
    PLAYLIST_FILENAME,
    RENDITION_DIR_PREFIX,
    SEGMENT_FILENAME_PATTERN,
    Rendition,
)
from .renditions import build_filter_graph, build_var_stream_map

VIDEO_CODEC = "libx264"
AUDIO_CODEC = "aac"
AUDIO_CHANNELS = 2


def build_ffmpeg_command(
    input_file: str | Path,
    renditions: list[Rendition],
    settings: Settings,
) -> list[str]:
    """Build the complete FFmpeg argv.

    Args:
        input_file: Source video; should be absolute since FFmpeg runs in
            the output directory
        renditions: Ladder entries (one video branch + one audio copy each)
        settings: Application settings (binary, segment duration)

    Returns:
        Argument list suitable for ``subprocess.run``

    Example:
        >>> cmd = build_ffmpeg_command("/videos/in.mp4", RENDITIONS, get_settings())
        >>> cmd[:3]
        ['ffmpeg', '-y', '-i']
    """
    command = [
        settings.ffmpeg_binary,
        "-y",  # Overwrite outputs of a previous run instead of prompting
        "-i", str(input_file),
        "-filter_complex", build_filter_graph(renditions),
    ]

    for index, rendition in enumerate(renditions):
        command.extend(_video_output_args(index, rendition))

    for index, rendition in enumerate(renditions):
        command.extend(_audio_output_args(index, rendition))

    command.extend(_hls_muxer_args(renditions, settings.segment_seconds))
    return command


def _video_output_args(index: int, rendition: Rendition) -> list[str]:
    """Map one scaled branch and constrain its bitrate."""
    return [
        "-map", f"[v{index + 1}out]",
        f"-c:v:{index}", VIDEO_CODEC,
        f"-b:v:{index}", f"{rendition.video_bitrate_kbps}k",
        f"-maxrate:v:{index}", f"{rendition.maxrate_kbps}k",
        f"-bufsize:v:{index}", f"{rendition.bufsize_kbps}k",
    ]


def _audio_output_args(index: int, rendition: Rendition) -> list[str]:
    """Map a stereo AAC copy of the first audio stream."""
    return [
        "-map", "a:0",
        "-c:a", AUDIO_CODEC,
        f"-b:a:{index}", f"{rendition.audio_bitrate_kbps}k",
        "-ac", str(AUDIO_CHANNELS),
    ]


def _hls_muxer_args(renditions: list[Rendition], segment_seconds: int) -> list[str]:
    """HLS muxer options for a complete VOD playlist per rendition."""
    return [
        "-f", "hls",
        "-hls_time", str(segment_seconds),
        "-hls_list_size", "0",  # Keep every segment in the playlist
        "-hls_playlist_type", "vod",
        "-hls_flags", "independent_segments",
        "-hls_segment_type", "mpegts",
        "-hls_segment_filename", f"{RENDITION_DIR_PREFIX}%v/{SEGMENT_FILENAME_PATTERN}",
        "-var_stream_map", build_var_stream_map(renditions),
        "-master_pl_name", MASTER_PLAYLIST_FILENAME,
        f"{RENDITION_DIR_PREFIX}%v/{PLAYLIST_FILENAME}",
    ]
