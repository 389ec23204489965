"""Pydantic models for data validation and serialization.

This module defines the core data structures used throughout the pipeline:
- Rendition ladder entries
- HLS asset files and the enumerated output tree
- Walrus store results (as emitted by ``walrus store --json``)
- Upload results and published ledger records

All models use Pydantic v2 for validation and serialization.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

# HLS output layout produced by the transcoder
RENDITION_DIR_PREFIX = "stream_"
SEGMENT_EXTENSION = ".ts"
SEGMENT_FILENAME_PATTERN = "data%03d.ts"
PLAYLIST_FILENAME = "playlist.m3u8"
MASTER_PLAYLIST_FILENAME = "master.m3u8"
TEMP_PLAYLIST_FILENAME = "temp_playlist.m3u8"
TEMP_MASTER_FILENAME = "temp_master.m3u8"
SOURCE_EXTENSION = ".mp4"

BlobMapping = dict[str, str]
"""Relative asset path (POSIX) -> Walrus blob ID."""


class Rendition(BaseModel):
    """A single quality tier of the output ladder.

    Each rendition maps to one video branch of the FFmpeg filter graph and
    one AAC audio copy.
    """

    model_config = ConfigDict(frozen=True)

    width: Annotated[int, Field(gt=0, le=7680)] = Field(
        description="Output width in pixels",
    )
    height: Annotated[int, Field(gt=0, le=4320)] = Field(
        description="Output height in pixels",
    )
    video_bitrate_kbps: Annotated[int, Field(gt=0)] = Field(
        description="Target video bitrate in kbps",
    )
    maxrate_kbps: Annotated[int, Field(gt=0)] = Field(
        description="Video bitrate ceiling in kbps",
    )
    bufsize_kbps: Annotated[int, Field(gt=0)] = Field(
        description="Rate-control buffer size in kbps",
    )
    audio_bitrate_kbps: Annotated[int, Field(gt=0)] = Field(
        description="AAC audio bitrate in kbps",
    )

    @property
    def resolution(self) -> str:
        """Return resolution string (e.g., '1920x1080')."""
        return f"{self.width}x{self.height}"

    @property
    def name(self) -> str:
        """Generate rendition name (e.g., '1080p')."""
        return f"{self.height}p"


class AssetRole(str, Enum):
    """Role of a file inside the HLS output tree."""

    SEGMENT = "segment"
    SUB_MANIFEST = "sub-manifest"
    MASTER_MANIFEST = "master-manifest"


class AssetFile(BaseModel):
    """A file in the output tree, addressed relative to the output root."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(
        min_length=1,
        description="POSIX path relative to the output root",
    )
    role: AssetRole = Field(
        description="Segment, sub-manifest or master manifest",
    )

    @property
    def rendition_dir(self) -> str | None:
        """Rendition directory for segments and sub-manifests."""
        parent = Path(self.path).parent.as_posix()
        return None if parent == "." else parent


class AssetTree(BaseModel):
    """Everything the uploader needs from one transcoder output directory."""

    model_config = ConfigDict(frozen=True)

    root: Path
    rendition_dirs: list[str]
    segments: list[AssetFile]
    sub_manifests: list[AssetFile]
    master: AssetFile

    @property
    def segment_paths(self) -> list[str]:
        return [s.path for s in self.segments]

    def segments_in(self, rendition_dir: str) -> list[AssetFile]:
        """Segments belonging to one rendition, in upload order."""
        return [s for s in self.segments if s.rendition_dir == rendition_dir]


# =============================================================================
# Walrus CLI output
# =============================================================================


class _WalrusModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class BlobObject(_WalrusModel):
    blob_id: str = Field(alias="blobId", min_length=1)


class AlreadyCertified(_WalrusModel):
    blob_id: str = Field(alias="blobId", min_length=1)


class NewlyCreated(_WalrusModel):
    blob_object: BlobObject = Field(alias="blobObject")


class BlobStoreResult(_WalrusModel):
    """Success variants of a single store result.

    Other variants reported by the CLI (e.g. ``markedInvalid``) are ignored
    and leave ``blob_id`` unresolved.
    """

    already_certified: AlreadyCertified | None = Field(default=None, alias="alreadyCertified")
    newly_created: NewlyCreated | None = Field(default=None, alias="newlyCreated")

    @property
    def blob_id(self) -> str | None:
        """Resolve the blob ID, preferring a blob that was already certified."""
        if self.already_certified is not None:
            return self.already_certified.blob_id
        if self.newly_created is not None:
            return self.newly_created.blob_object.blob_id
        return None


class StoreRecord(_WalrusModel):
    """One entry of the ``walrus store --json`` result list."""

    path: str
    blob_store_result: BlobStoreResult = Field(alias="blobStoreResult")


# =============================================================================
# Pipeline results
# =============================================================================


class UploadResult(BaseModel):
    """Outcome of uploading one HLS output tree."""

    model_config = ConfigDict(frozen=True)

    master_blob_id: str = Field(
        min_length=1,
        description="Blob ID of the rewritten master manifest",
    )
    blob_mappings: BlobMapping = Field(
        description="Every uploaded asset keyed by its original relative path",
    )
    aggregator_url: str = Field(
        description="Aggregator the retrieval URLs point at",
    )

    @property
    def master_url(self) -> str:
        """Retrieval URL of the master manifest (what a player loads)."""
        return f"{self.aggregator_url}/v1/blobs/{self.master_blob_id}"

    def blob_urls(self) -> dict[str, str]:
        """Relative path -> retrieval URL for every uploaded asset."""
        return {
            path: f"{self.aggregator_url}/v1/blobs/{blob_id}"
            for path, blob_id in self.blob_mappings.items()
        }


class PublishedRecord(BaseModel):
    """A video record created on the Sui ledger.

    The record is a shared object: once created it is not owned by the
    publisher and is never mutated.
    """

    model_config = ConfigDict(frozen=True)

    object_id: str = Field(
        pattern=r"^0x[0-9a-fA-F]+$",
        description="Sui object ID of the record",
    )
    digest: str | None = Field(
        default=None,
        description="Transaction digest that created the record",
    )
    title: str = Field(description="Video title")
    description: str = Field(description="Video description")
    manifest_url: str = Field(description="Master manifest retrieval URL")
    created_at_ms: int | None = Field(
        default=None,
        ge=0,
        description="Network clock time at creation (epoch milliseconds)",
    )
