"""Tests for URL normalization, metadata extraction and batch processing."""

import pytest
from unittest.mock import Mock

from youtube_validator.core.errors import ErrorKind, URLValidationError
from youtube_validator.core.normalizer import (
    BatchNormalizer,
    BatchStats,
    NormalizedURL,
    URLMetadata,
    add_protocol_if_missing,
    build_canonical_url,
    extract_metadata,
    is_youtube_url,
    normalize,
    normalize_multiple,
    parse_time_parameter,
)

CANONICAL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


class TestNormalizeRecognizedShapes:
    """Test normalization of every supported URL shape."""

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "http://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com/watch?v=dQw4w9WgXcQ",
        "www.youtube.com/watch?v=dQw4w9WgXcQ",
        "youtube.com/watch?v=dQw4w9WgXcQ",
        "https://m.youtube.com/watch?v=dQw4w9WgXcQ",
        "m.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "youtu.be/dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ?si=abc123def456",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ?start=30",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "HTTPS://WWW.YOUTUBE.COM/watch?v=dQw4w9WgXcQ",
        "dQw4w9WgXcQ",
    ])
    def test_canonical_form(self, url):
        """Every shape normalizes to the same canonical URL."""
        result = normalize(url)

        assert result.is_valid is True
        assert result.video_id == "dQw4w9WgXcQ"
        assert result.canonical == CANONICAL
        assert result.original == url

    def test_surrounding_whitespace_trimmed(self):
        """Whitespace around the input is ignored but the original is kept."""
        result = normalize("  https://youtu.be/dQw4w9WgXcQ \n")
        assert result.video_id == "dQw4w9WgXcQ"
        assert result.original == "  https://youtu.be/dQw4w9WgXcQ \n"

    def test_direct_video_id_with_whitespace(self):
        """A padded bare ID is accepted."""
        result = normalize("  jNQXAC9IVRw  ")
        assert result.video_id == "jNQXAC9IVRw"
        assert result.metadata is None

    def test_trailing_null_character(self):
        """A trailing NUL after the ID does not break extraction."""
        result = normalize("https://www.youtube.com/watch?v=dQw4w9WgXcQ\0")
        assert result.video_id == "dQw4w9WgXcQ"

    def test_trailing_control_characters(self):
        """Trailing control whitespace is trimmed."""
        result = normalize("https://www.youtube.com/watch?v=dQw4w9WgXcQ\n\r\t")
        assert result.video_id == "dQw4w9WgXcQ"

    def test_result_is_immutable(self):
        """NormalizedURL cannot be modified."""
        result = normalize(CANONICAL)
        with pytest.raises(AttributeError):
            result.video_id = "other"

    def test_idempotent(self):
        """Normalizing a canonical URL gives the same ID."""
        first = normalize("https://youtu.be/dQw4w9WgXcQ?t=30")
        second = normalize(first.canonical)
        assert second.video_id == first.video_id
        assert second.canonical == first.canonical


class TestNormalizeErrors:
    """Test classification of rejected inputs."""

    @pytest.mark.parametrize("value", ["", None, "   ", 123, ["https://youtu.be/dQw4w9WgXcQ"]])
    def test_invalid_format(self, value):
        """Missing, blank or non-string input is INVALID_FORMAT."""
        with pytest.raises(URLValidationError) as exc_info:
            normalize(value)
        assert exc_info.value.kind is ErrorKind.INVALID_FORMAT

    @pytest.mark.parametrize("url", [
        "https://vimeo.com/123456",
        "https://vimeo.com/123456789",
        "https://example.com/invalid",
        "invalid-url-not-youtube",
        "not a url at all",
        "abc",
    ])
    def test_not_youtube(self, url):
        """Inputs without a YouTube domain are NOT_YOUTUBE."""
        with pytest.raises(URLValidationError) as exc_info:
            normalize(url)
        assert exc_info.value.kind is ErrorKind.NOT_YOUTUBE

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch",
        "https://www.youtube.com/watch?v=invalid",
        "https://www.youtube.com/channel/UCabc",
        "https://www.youtube.com/channel/UCtest123",
        "https://www.youtube.com/results?search_query=test",
        "https://www.youtube.com/watch?v='; DROP TABLE videos; --",
        'https://www.youtube.com/watch?v=<script>alert("xss")</script>',
        "https://www.youtube.com/watch?v=" + "a" * 10000,
        "https://youtu.be/",
        "https://YOUTUBE.com/@somechannel",
    ])
    def test_missing_video_id(self, url):
        """YouTube URLs without an extractable ID are MISSING_VIDEO_ID."""
        with pytest.raises(URLValidationError) as exc_info:
            normalize(url)
        assert exc_info.value.kind is ErrorKind.MISSING_VIDEO_ID

    def test_error_message_language(self):
        """Error text follows the requested language."""
        with pytest.raises(URLValidationError) as ja_error:
            normalize("https://vimeo.com/123456")
        with pytest.raises(URLValidationError) as en_error:
            normalize("https://vimeo.com/123456", language="en")

        assert ja_error.value.message == "YouTube以外のURLは登録できません"
        assert en_error.value.message == "Only YouTube URLs are supported"
        assert en_error.value.suggestion == "Please enter a YouTube (youtube.com or youtu.be) URL"

    def test_missing_video_id_carries_example(self):
        """MISSING_VIDEO_ID errors include an example URL."""
        with pytest.raises(URLValidationError) as exc_info:
            normalize("https://www.youtube.com/watch", language="en")
        assert exc_info.value.example == CANONICAL


class TestMetadata:
    """Test timestamp, playlist and index extraction."""

    def test_full_metadata(self):
        """Playlist, index and timestamp are extracted together."""
        result = normalize("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLabc&index=5&t=90s")

        assert result.video_id == "dQw4w9WgXcQ"
        assert result.canonical == CANONICAL
        assert result.metadata == URLMetadata(timestamp=90, playlist="PLabc", index=5)

    def test_all_parameters_with_extra(self):
        """Unrelated parameters are ignored."""
        result = normalize(
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLtest&index=3&t=2m30s&feature=share"
        )
        assert result.metadata.playlist == "PLtest"
        assert result.metadata.index == 3
        assert result.metadata.timestamp == 150

    def test_long_playlist_id_kept_verbatim(self):
        """Playlist IDs are not truncated."""
        playlist = "PLrAXtmRdnEQy8VJqQzNlkVjYoungUdmzP" * 3
        result = normalize(f"https://www.youtube.com/watch?v=dQw4w9WgXcQ&list={playlist}")
        assert result.metadata.playlist == playlist

    def test_short_url_timestamp(self):
        """Short URLs carry their t parameter."""
        result = normalize("youtu.be/dQw4w9WgXcQ?t=42")
        assert result.metadata.timestamp == 42

    def test_no_metadata(self):
        """URLs without extras have no metadata."""
        assert normalize(CANONICAL).metadata is None
        assert normalize("youtu.be/dQw4w9WgXcQ?si=abc123").metadata is None

    def test_empty_timestamp_is_absent(self):
        """&t= with no value is ignored."""
        result = normalize("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=")
        assert result.metadata is None

    def test_malformed_timestamp_is_zero(self):
        """Unparseable timestamps become 0 rather than an error."""
        result = normalize("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=abc")
        assert result.metadata.timestamp == 0

    def test_malformed_index_omitted(self):
        """Unparseable playlist indexes are left out."""
        result = normalize("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLx&index=abc")
        assert result.metadata.index is None
        assert result.metadata.playlist == "PLx"

    def test_extract_metadata_unparseable_url(self):
        """URLs urllib cannot split yield no metadata."""
        assert extract_metadata("https://[invalid/watch?t=30") is None

    def test_metadata_to_dict_skips_absent(self):
        """to_dict only includes present values."""
        assert URLMetadata(timestamp=0).to_dict() == {"timestamp": 0}


class TestParseTimeParameter:
    """Test t= parameter parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("1h30m45s", 5445),
        ("30m", 1800),
        ("45", 45),
        ("45s", 45),
        ("90s", 90),
        ("2m30s", 150),
        ("1h", 3600),
        ("1h5s", 3605),
        ("abc", 0),
        ("30s1h", 0),
        ("-5", 0),
    ])
    def test_values(self, value, expected):
        """Compound durations convert to total seconds."""
        assert parse_time_parameter(value) == expected


class TestHelpers:
    """Test small normalization helpers."""

    def test_add_protocol(self):
        """https:// is added only when missing."""
        assert add_protocol_if_missing("youtu.be/x") == "https://youtu.be/x"
        assert add_protocol_if_missing("http://youtu.be/x") == "http://youtu.be/x"
        assert add_protocol_if_missing("HTTPS://youtu.be/x") == "HTTPS://youtu.be/x"

    def test_is_youtube_url(self):
        """Domain markers are found anywhere, case-insensitively."""
        assert is_youtube_url("https://www.YouTube.com/feed")
        assert is_youtube_url("https://youtu.be/")
        assert not is_youtube_url("https://vimeo.com/1")

    def test_build_canonical_url(self):
        """Canonical URLs use the fixed watch template."""
        assert build_canonical_url("jNQXAC9IVRw") == "https://www.youtube.com/watch?v=jNQXAC9IVRw"

    def test_to_dict(self):
        """to_dict includes metadata only when present."""
        assert "metadata" not in normalize(CANONICAL).to_dict()
        data = normalize(CANONICAL + "&t=10").to_dict()
        assert data["metadata"] == {"timestamp": 10}
        assert data["video_id"] == "dQw4w9WgXcQ"


class TestNormalizeMultiple:
    """Test sequential batch normalization."""

    def test_mixed_validity(self):
        """Invalid inputs become invalid rows in place."""
        urls = [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/jNQXAC9IVRw",
            "https://vimeo.com/123456",
            "https://example.com/invalid",
            "https://www.youtube.com/watch?v=xyz789uvw12&t=30s",
        ]

        results = normalize_multiple(urls)

        assert [r.is_valid for r in results] == [True, True, False, False, True]
        assert results[1].video_id == "jNQXAC9IVRw"
        assert results[2] == NormalizedURL(
            original="https://vimeo.com/123456", canonical="", video_id="", is_valid=False
        )

    def test_large_batch(self):
        """A hundred generated IDs all normalize."""
        urls = [f"https://www.youtube.com/watch?v=test{i:07d}" for i in range(100)]
        results = normalize_multiple(urls)

        assert len(results) == 100
        for index, result in enumerate(results):
            assert result.is_valid
            assert result.video_id == f"test{index:07d}"

    def test_non_string_input(self):
        """Non-string inputs produce an invalid row with empty original."""
        results = normalize_multiple([None])
        assert results[0].is_valid is False
        assert results[0].original == ""


class TestBatchNormalizer:
    """Test threaded batch normalization."""

    def test_invalid_workers(self):
        """max_workers must be positive."""
        with pytest.raises(ValueError, match="max_workers"):
            BatchNormalizer(max_workers=0)

    def test_order_preserved(self):
        """Results come back in input order."""
        urls = [f"youtu.be/test{i:07d}" for i in range(50)] + ["https://vimeo.com/1"]
        normalizer = BatchNormalizer(max_workers=8)

        results = normalizer.normalize_all(urls)

        assert [r.original for r in results] == urls
        assert results[10].video_id == "test0000010"
        assert results[-1].is_valid is False

    def test_stats_recorded(self):
        """Failures are counted per error kind."""
        urls = [
            "https://youtu.be/dQw4w9WgXcQ",
            "https://vimeo.com/1",
            "https://www.youtube.com/watch",
            "",
        ]
        normalizer = BatchNormalizer(max_workers=2)

        normalizer.normalize_all(urls)
        summary = normalizer.last_stats.get_summary()

        assert summary["valid"] == 1
        assert summary["invalid"] == 3
        assert summary["error_counts"] == {
            "NOT_YOUTUBE": 1,
            "MISSING_VIDEO_ID": 1,
            "INVALID_FORMAT": 1,
        }

    def test_one_row_per_input(self):
        """Every input yields a row, including non-string inputs."""
        urls = ["dQw4w9WgXcQ", None, "", 42, "https://youtu.be/jNQXAC9IVRw"]

        results = BatchNormalizer(max_workers=3).normalize_all(urls)

        assert len(results) == len(urls)
        assert [r.is_valid for r in results] == [True, False, False, False, True]
        assert results[1].original == ""

    def test_progress_callback(self):
        """The callback is called once per URL."""
        callback = Mock()
        urls = ["youtu.be/dQw4w9WgXcQ", "youtu.be/jNQXAC9IVRw"]

        BatchNormalizer(max_workers=2).normalize_all(urls, progress_callback=callback)

        assert callback.call_count == 2
        processed_counts = sorted(call.args[0] for call in callback.call_args_list)
        assert processed_counts == [1, 2]
        assert all(call.args[1] == 2 for call in callback.call_args_list)

    def test_empty_input(self):
        """No URLs gives no results."""
        normalizer = BatchNormalizer()
        assert normalizer.normalize_all([]) == []
        assert normalizer.last_stats.total_urls == 0


class TestBatchStats:
    """Test BatchStats bookkeeping."""

    def test_counts(self):
        """Successes and failures are tallied."""
        stats = BatchStats(total_urls=3)
        stats.record_success("a")
        stats.record_failure("b", ErrorKind.NOT_YOUTUBE)
        stats.record_failure("c", ErrorKind.NOT_YOUTUBE)

        assert stats.processed == 3
        assert stats.get_error_counts() == {"NOT_YOUTUBE": 2}
        assert stats.errors == [("b", ErrorKind.NOT_YOUTUBE), ("c", ErrorKind.NOT_YOUTUBE)]
