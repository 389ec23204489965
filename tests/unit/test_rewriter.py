"""Unit tests for manifest rewriter module."""

import pytest

from walrus_hls.manifest_rewriter import (
    blob_url,
    find_local_references,
    parse_segments,
    parse_variant_streams,
    replace_full_lines,
    rewrite_master_playlist,
    rewrite_media_playlist,
)

AGGREGATOR = "https://aggregator.test"


class TestBlobUrl:
    """Tests for retrieval URL construction."""

    def test_blob_url(self):
        assert blob_url("abc", AGGREGATOR) == "https://aggregator.test/v1/blobs/abc"

    def test_blob_url_trailing_slash(self):
        """Test a trailing slash on the aggregator is not doubled."""
        assert blob_url("abc", AGGREGATOR + "/") == "https://aggregator.test/v1/blobs/abc"


class TestReplaceFullLines:
    """Tests for line-anchored replacement."""

    def test_replaces_exact_line(self):
        assert replace_full_lines("a\nb\nc\n", {"b": "B"}) == "a\nB\nc\n"

    def test_partial_match_is_not_replaced(self):
        """Test a key appearing inside a longer line is left alone."""
        content = "#EXT-X-MAP:URI=\"data000.ts\"\nold_data000.ts\ndata000.ts\n"

        result = replace_full_lines(content, {"data000.ts": "URL"})

        assert result == "#EXT-X-MAP:URI=\"data000.ts\"\nold_data000.ts\nURL\n"

    def test_crlf_line_endings_preserved(self):
        content = "#EXTM3U\r\ndata000.ts\r\n#EXT-X-ENDLIST\r\n"

        result = replace_full_lines(content, {"data000.ts": "URL"})

        assert result == "#EXTM3U\r\nURL\r\n#EXT-X-ENDLIST\r\n"

    def test_last_line_without_newline(self):
        assert replace_full_lines("a\nb", {"b": "B"}) == "a\nB"

    def test_empty_replacements_return_input(self):
        content = "a\nb\n"
        assert replace_full_lines(content, {}) is content

    def test_every_occurrence_replaced(self):
        assert replace_full_lines("x\nx\n", {"x": "y"}) == "y\ny\n"


class TestRewriteMediaPlaylist:
    """Tests for sub-manifest rewriting."""

    @pytest.fixture
    def mappings(self) -> dict[str, str]:
        return {
            "stream_0/data000.ts": "id0",
            "stream_0/data001.ts": "id1",
            "stream_0/data002.ts": "id2",
            "stream_1/data000.ts": "other0",
            "stream_1/data001.ts": "other1",
            "stream_1/data002.ts": "other2",
        }

    def test_segments_point_at_blob_urls(self, sample_media_playlist: str, mappings: dict[str, str]):
        result = rewrite_media_playlist(sample_media_playlist, "stream_0", mappings, AGGREGATOR)

        segments = parse_segments(result)
        assert [s["uri"] for s in segments] == [
            f"{AGGREGATOR}/v1/blobs/id0",
            f"{AGGREGATOR}/v1/blobs/id1",
            f"{AGGREGATOR}/v1/blobs/id2",
        ]

    def test_uses_only_own_rendition(self, sample_media_playlist: str, mappings: dict[str, str]):
        """Test same-named segments of another rendition are never used."""
        result = rewrite_media_playlist(sample_media_playlist, "stream_1", mappings, AGGREGATOR)

        assert "other0" in result
        assert "/id0" not in result

    def test_tags_unchanged(self, sample_media_playlist: str, mappings: dict[str, str]):
        """Test every non-URI line is preserved exactly."""
        result = rewrite_media_playlist(sample_media_playlist, "stream_0", mappings, AGGREGATOR)

        original_tags = [l for l in sample_media_playlist.splitlines() if l.startswith("#")]
        rewritten_tags = [l for l in result.splitlines() if l.startswith("#")]
        assert rewritten_tags == original_tags

    def test_only_segments_considered(self, mappings: dict[str, str]):
        """Test a mapping for the playlist itself is not used as a segment."""
        content = "#EXTM3U\nplaylist.m3u8\n"
        mappings["stream_0/playlist.m3u8"] = "pl"

        assert rewrite_media_playlist(content, "stream_0", mappings, AGGREGATOR) == content

    def test_unmapped_segment_left_local(self, sample_media_playlist: str):
        result = rewrite_media_playlist(
            sample_media_playlist, "stream_0", {"stream_0/data000.ts": "id0"}, AGGREGATOR,
        )

        assert find_local_references(result) == ["data001.ts", "data002.ts"]


class TestRewriteMasterPlaylist:
    """Tests for master manifest rewriting."""

    def test_variants_point_at_sub_manifest_urls(self, sample_master_playlist: str):
        mappings = {
            "stream_0/data000.ts": "seg",
            "stream_0/playlist.m3u8": "pl0",
            "stream_1/playlist.m3u8": "pl1",
            "stream_2/playlist.m3u8": "pl2",
        }

        result = rewrite_master_playlist(sample_master_playlist, mappings, AGGREGATOR)

        assert [v["uri"] for v in parse_variant_streams(result)] == [
            f"{AGGREGATOR}/v1/blobs/pl0",
            f"{AGGREGATOR}/v1/blobs/pl1",
            f"{AGGREGATOR}/v1/blobs/pl2",
        ]
        assert find_local_references(result) == []

    def test_stream_attributes_unchanged(self, sample_master_playlist: str):
        mappings = {f"stream_{i}/playlist.m3u8": f"pl{i}" for i in range(3)}

        result = rewrite_master_playlist(sample_master_playlist, mappings, AGGREGATOR)

        before = parse_variant_streams(sample_master_playlist)
        after = parse_variant_streams(result)
        assert [(v["bandwidth"], v["resolution"], v["codecs"]) for v in after] == [
            (v["bandwidth"], v["resolution"], v["codecs"]) for v in before
        ]

    def test_root_playlist_entry_ignored(self):
        """Test only playlists inside rendition directories are considered."""
        content = "#EXTM3U\nplaylist.m3u8\n"

        assert rewrite_master_playlist(content, {"playlist.m3u8": "x"}, AGGREGATOR) == content


class TestPlaylistParsing:
    """Tests for playlist parsing helpers."""

    def test_parse_variant_streams(self, sample_master_playlist: str):
        variants = parse_variant_streams(sample_master_playlist)

        assert len(variants) == 3
        assert variants[0] == {
            "bandwidth": 5605600,
            "resolution": "1920x1080",
            "codecs": "avc1.640028,mp4a.40.2",
            "uri": "stream_0/playlist.m3u8",
        }

    def test_parse_segments(self, sample_media_playlist: str):
        segments = parse_segments(sample_media_playlist)

        assert [s["duration"] for s in segments] == [10.0, 10.0, 4.5]
        assert [s["uri"] for s in segments] == ["data000.ts", "data001.ts", "data002.ts"]

    def test_find_local_references(self):
        content = "#EXTM3U\n\nhttps://a/v1/blobs/x\nhttp://b/y\n  data000.ts  \n"

        assert find_local_references(content) == ["data000.ts"]
