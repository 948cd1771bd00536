"""Unit tests for YouTube URL and identifier helpers."""

import pytest

from youtube_tldr.exceptions import InvalidIdentifier
from youtube_tldr.utils.youtube_utils import (
    extract_video_id,
    is_valid_youtube_url,
    validate_video_id
)


class TestExtractVideoId:
    """Tests for extract_video_id."""

    @pytest.mark.parametrize("url,expected", [
        ("https://youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ?t=42", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://m.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://music.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?feature=share&v=a_b-C1d2E3f", "a_b-C1d2E3f"),
        ("http://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    ])
    def test_valid_shapes(self, url, expected):
        """Test identifiers are extracted from short and canonical URLs."""
        # Act
        result = extract_video_id(url)

        # Assert
        assert result == expected

    @pytest.mark.parametrize("url", [
        "https://example.com/x",
        "https://vimeo.com/12345",
        "https://notyoutube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com.evil.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch",
        "https://www.youtube.com/watch?v=short",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQX",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://youtu.be/",
        "https://youtu.be/bad!id!here",
        "invalid-url",
        "",
        None,
        42,
    ])
    def test_invalid_shapes(self, url):
        """Test unsupported hosts and malformed URLs are rejected."""
        # Act & Assert
        with pytest.raises(InvalidIdentifier):
            extract_video_id(url)

    def test_invalid_identifier_is_client_error(self):
        # Act
        with pytest.raises(InvalidIdentifier) as exc_info:
            extract_video_id("https://example.com/x")

        # Assert
        assert exc_info.value.client_error is True
        assert exc_info.value.kind == "InvalidIdentifier"


class TestValidateVideoId:
    """Tests for validate_video_id and is_valid_youtube_url."""

    def test_accepts_canonical_identifier(self):
        assert validate_video_id("dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    @pytest.mark.parametrize("value", ["", "dQw4w9WgXc", "dQw4w9WgXcQQ", "dQw4w9WgXc!", " dQw4w9WgXc", None])
    def test_rejects_other_values(self, value):
        with pytest.raises(InvalidIdentifier):
            validate_video_id(value)

    @pytest.mark.parametrize("url,expected", [
        ("https://youtu.be/dQw4w9WgXcQ", True),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", True),
        ("https://example.com/x", False),
        (None, False),
    ])
    def test_is_valid_youtube_url(self, url, expected):
        assert is_valid_youtube_url(url) == expected
