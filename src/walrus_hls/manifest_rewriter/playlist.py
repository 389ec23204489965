"""HLS playlist parsing utilities.

Reads the few parts of a playlist the pipeline cares about:
- Variant streams of a master playlist (for the summary report)
- Segment entries of a media playlist
- URI lines that still point at local files
"""

import re
from typing import Any

REMOTE_URI_PREFIXES = ("https://", "http://")


def parse_variant_streams(content: str) -> list[dict[str, Any]]:
    """Parse EXT-X-STREAM-INF entries from a master playlist.

    Args:
        content: Master playlist content (.m3u8)

    Returns:
        One dict per variant with bandwidth, resolution, codecs and uri

    Example:
        >>> parse_variant_streams(master)[0]["resolution"]
        '1920x1080'
    """
    variants = []
    lines = content.strip().splitlines()

    for i, line in enumerate(lines):
        if line.startswith("#EXT-X-STREAM-INF:"):
            attrs = _parse_attributes(line.split(":", 1)[1])

            # The URI is the next line
            uri = lines[i + 1].strip() if i + 1 < len(lines) else ""

            variants.append({
                "bandwidth": int(attrs.get("BANDWIDTH", 0)),
                "resolution": attrs.get("RESOLUTION", ""),
                "codecs": attrs.get("CODECS", ""),
                "uri": uri,
            })

    return variants


def parse_segments(content: str) -> list[dict[str, Any]]:
    """Parse EXTINF entries from a media playlist."""
    segments = []
    lines = content.strip().splitlines()

    for i, line in enumerate(lines):
        if line.startswith("#EXTINF:"):
            # Format: #EXTINF:10.000000,
            duration_str = line.split(":", 1)[1].split(",", 1)[0]
            try:
                duration = float(duration_str)
            except ValueError:
                duration = 0.0

            uri = lines[i + 1].strip() if i + 1 < len(lines) else ""

            segments.append({
                "duration": duration,
                "uri": uri,
            })

    return segments


def find_local_references(content: str) -> list[str]:
    """Return URI lines that are not remote HTTP(S) URLs.

    In HLS every non-blank line that does not start with ``#`` is a URI.
    After rewriting, any such line that is still a relative path would be
    unplayable once the manifest is served from blob storage.
    """
    return [
        stripped
        for stripped in (line.strip() for line in content.splitlines())
        if stripped and not stripped.startswith("#") and not stripped.startswith(REMOTE_URI_PREFIXES)
    ]


def _parse_attributes(attr_string: str) -> dict[str, str]:
    """Parse HLS attribute string into dictionary.

    Handles quoted values and comma-separated attributes.
    """
    attrs = {}

    # Regex to match KEY=VALUE or KEY="VALUE"
    pattern = r'([A-Z-]+)=("[^"]*"|[^,]*)'

    for match in re.finditer(pattern, attr_string):
        attrs[match.group(1)] = match.group(2).strip('"')

    return attrs
