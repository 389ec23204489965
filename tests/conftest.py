"""Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup
- Sample test data (playlists, CLI outputs)
- A content-addressed fake of the Walrus CLI
- A complete HLS output tree on disk
"""

import base64
import hashlib
import json
import os
import subprocess
from pathlib import Path
from typing import Any

import pytest

# Set application environment variables BEFORE importing any application code
os.environ["WALRUS_AGGREGATOR_URL"] = "https://aggregator.test"
os.environ["WALRUS_BINARY"] = "walrus"
os.environ["WALRUS_EPOCHS"] = "2"
os.environ["FFMPEG_BINARY"] = "ffmpeg"
os.environ["SUI_PACKAGE_ID"] = "0xc0ffee"
os.environ["LOG_LEVEL"] = "DEBUG"

AGGREGATOR = "https://aggregator.test"


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_master_playlist() -> str:
    """Master playlist as written by FFmpeg for three renditions."""
    return """#EXTM3U
#EXT-X-VERSION:6
#EXT-X-STREAM-INF:BANDWIDTH=5605600,RESOLUTION=1920x1080,CODECS="avc1.640028,mp4a.40.2"
stream_0/playlist.m3u8

#EXT-X-STREAM-INF:BANDWIDTH=3220800,RESOLUTION=1280x720,CODECS="avc1.64001f,mp4a.40.2"
stream_1/playlist.m3u8

#EXT-X-STREAM-INF:BANDWIDTH=1645600,RESOLUTION=854x480,CODECS="avc1.64001e,mp4a.40.2"
stream_2/playlist.m3u8
"""


@pytest.fixture
def sample_media_playlist() -> str:
    """Media playlist (one rendition) as written by FFmpeg."""
    return """#EXTM3U
#EXT-X-VERSION:6
#EXT-X-TARGETDURATION:10
#EXT-X-MEDIA-SEQUENCE:0
#EXT-X-PLAYLIST-TYPE:VOD
#EXT-X-INDEPENDENT-SEGMENTS
#EXTINF:10.000000,
data000.ts
#EXTINF:10.000000,
data001.ts
#EXTINF:4.500000,
data002.ts
#EXT-X-ENDLIST
"""


@pytest.fixture
def walrus_store_output() -> str:
    """``walrus store --json`` output covering both success variants."""
    return json.dumps([
        {
            "blobStoreResult": {
                "newlyCreated": {
                    "blobObject": {
                        "id": "0x5e1f",
                        "blobId": "newBlobId000",
                        "size": 1024,
                        "storage": {"startEpoch": 10, "endEpoch": 12},
                    },
                    "cost": 11000,
                },
            },
            "path": "stream_0/data000.ts",
        },
        {
            "blobStoreResult": {
                "alreadyCertified": {
                    "blobId": "certifiedBlobId001",
                    "endEpoch": 14,
                },
            },
            "path": "stream_0/data001.ts",
        },
    ])


@pytest.fixture
def sui_call_output() -> dict[str, Any]:
    """``sui client call --json`` output for a successful record creation."""
    return {
        "digest": "8fKqUwz3Hc2Y1sV1JpW6",
        "effects": {"status": {"status": "success"}},
        "objectChanges": [
            {
                "type": "mutated",
                "objectType": "0x2::coin::Coin<0x2::sui::SUI>",
                "objectId": "0x9a",
            },
            {
                "type": "created",
                "owner": {"Shared": {"initial_shared_version": 7}},
                "objectType": "0xc0ffee::video::Video",
                "objectId": "0xabc123",
            },
        ],
    }


@pytest.fixture
def sui_object_output() -> dict[str, Any]:
    """``sui client object --json`` output for a video record."""
    return {
        "objectId": "0xabc123",
        "version": "8",
        "previousTransaction": "8fKqUwz3Hc2Y1sV1JpW6",
        "content": {
            "dataType": "moveObject",
            "type": "0xc0ffee::video::Video",
            "fields": {
                "id": {"id": "0xabc123"},
                "title": "Launch trailer",
                "description": "Ten seconds of test pattern",
                "manifest_url": f"{AGGREGATOR}/v1/blobs/masterBlob",
                "created_at": "1718000000000",
            },
        },
    }


# =============================================================================
# Walrus CLI Fake
# =============================================================================


def content_blob_id(data: bytes) -> str:
    """Deterministic, content-derived blob ID (like Walrus)."""
    return base64.urlsafe_b64encode(hashlib.sha256(data).digest()).decode().rstrip("=")


class FakeWalrus:
    """Stands in for ``subprocess.run`` when the Walrus CLI is invoked.

    Reads each file from the working directory, derives its blob ID from the
    content and reports ``alreadyCertified`` when the same bytes were stored
    before.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.uploads: dict[str, bytes] = {}
        self.certified: set[str] = set()

    def __call__(self, command: list[str], cwd: Any = None, **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append(list(command))
        paths = command[2:command.index("--epochs")]

        records = []
        for path in paths:
            data = (Path(cwd) / path).read_bytes()
            self.uploads[path] = data
            blob_id = content_blob_id(data)

            if blob_id in self.certified:
                result = {"alreadyCertified": {"blobId": blob_id, "endEpoch": 12}}
            else:
                self.certified.add(blob_id)
                result = {"newlyCreated": {"blobObject": {"blobId": blob_id, "size": len(data)}}}

            records.append({"blobStoreResult": result, "path": path})

        return subprocess.CompletedProcess(command, 0, stdout=json.dumps(records), stderr="")

    @property
    def batches(self) -> list[list[str]]:
        """Paths uploaded by each call."""
        return [c[2:c.index("--epochs")] for c in self.calls]


@pytest.fixture
def fake_walrus(monkeypatch: pytest.MonkeyPatch) -> FakeWalrus:
    """Patch the Walrus CLI invocation with a content-addressed fake."""
    fake = FakeWalrus()
    monkeypatch.setattr("walrus_hls.uploader.walrus_client.subprocess.run", fake)
    return fake


# =============================================================================
# HLS Output Tree Fixtures
# =============================================================================


@pytest.fixture
def hls_output_dir(
    tmp_path: Path,
    sample_master_playlist: str,
    sample_media_playlist: str,
) -> Path:
    """Complete transcoder output: master + 3 renditions x 3 segments."""
    root = tmp_path / "output"
    root.mkdir()
    (root / "master.m3u8").write_text(sample_master_playlist)

    for stream in range(3):
        stream_dir = root / f"stream_{stream}"
        stream_dir.mkdir()
        (stream_dir / "playlist.m3u8").write_text(sample_media_playlist)
        for segment in range(3):
            (stream_dir / f"data{segment:03d}.ts").write_bytes(
                f"segment {stream}/{segment}".encode() * 64
            )

    return root


@pytest.fixture
def settings():
    """Fresh settings built from the test environment."""
    from walrus_hls.shared.config import Settings

    return Settings()
