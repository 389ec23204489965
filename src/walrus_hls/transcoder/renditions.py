"""Rendition ladder for HLS output.

Three H.264 tiers covering desktop/TV, tablet and mobile. Each tier caps
the encoder at ~1.07x the target bitrate with a buffer of 1.5x the target.
"""

from ..shared.models import Rendition


RENDITIONS: list[Rendition] = [
    # 1080p Full HD - Desktop/TV
    Rendition(
        width=1920,
        height=1080,
        video_bitrate_kbps=5000,
        maxrate_kbps=5350,
        bufsize_kbps=7500,
        audio_bitrate_kbps=192,
    ),
    # 720p HD - Tablet/Good Mobile
    Rendition(
        width=1280,
        height=720,
        video_bitrate_kbps=2800,
        maxrate_kbps=2996,
        bufsize_kbps=4200,
        audio_bitrate_kbps=128,
    ),
    # 480p SD - Mobile/Poor Connection
    Rendition(
        width=854,
        height=480,
        video_bitrate_kbps=1400,
        maxrate_kbps=1498,
        bufsize_kbps=2100,
        audio_bitrate_kbps=96,
    ),
]


def build_filter_graph(renditions: list[Rendition]) -> str:
    """Build the ``-filter_complex`` graph that fans the video out.

    The decoded video is split into one branch per rendition and each branch
    is scaled to its fixed resolution.

    Args:
        renditions: Ladder entries, highest first

    Returns:
        Filter graph string, e.g.
        ``[0:v]split=3[v1][v2][v3]; [v1]scale=w=1920:h=1080[v1out]; ...``

    Raises:
        ValueError: If the ladder is empty
    """
    if not renditions:
        raise ValueError("At least one rendition is required")

    labels = "".join(f"[v{i}]" for i in range(1, len(renditions) + 1))
    parts = [f"[0:v]split={len(renditions)}{labels}"]

    for i, rendition in enumerate(renditions, start=1):
        parts.append(f"[v{i}]scale=w={rendition.width}:h={rendition.height}[v{i}out]")

    return "; ".join(parts)


def build_var_stream_map(renditions: list[Rendition]) -> str:
    """Pair video stream N with audio stream N (``v:0,a:0 v:1,a:1 ...``)."""
    return " ".join(f"v:{i},a:{i}" for i in range(len(renditions)))
