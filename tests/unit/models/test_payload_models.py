"""Unit tests for boundary models and the error taxonomy."""

import pytest
from pydantic import ValidationError

from youtube_tldr.core.config import config
from youtube_tldr.exceptions import (
    AllProvidersFailed,
    EmptyTranscript,
    InvalidIdentifier,
    ProviderTransientFailure,
    StrategyExhausted,
    status_code_for
)
from youtube_tldr.models import (
    AcquisitionAttempt,
    AttemptOutcome,
    BuildRequest,
    BuildResponse,
    Chapter,
    ChapterModel,
    ErrorPayload,
    TranscriptResult,
    TranscriptSegment
)


class TestBuildRequest:
    """Test BuildRequest model validation."""

    def test_defaults(self):
        """Test BuildRequest default values."""
        # Arrange & Act
        request = BuildRequest(url="https://youtu.be/dQw4w9WgXcQ")

        # Assert
        assert request.language == config.transcript.default_language
        assert request.model == config.llm.default_model
        assert request.bypass_cache is False

    def test_language_and_model_are_stripped_url_is_not(self):
        request = BuildRequest(url=" https://youtu.be/dQw4w9WgXcQ", language=" es ", model=" gpt-4o ")

        assert request.url == " https://youtu.be/dQw4w9WgXcQ"
        assert request.language == "es"
        assert request.model == "gpt-4o"

    @pytest.mark.parametrize("data", [
        {"url": ""},
        {"url": "   "},
        {"url": "https://youtu.be/dQw4w9WgXcQ", "language": ""},
        {"url": "https://youtu.be/dQw4w9WgXcQ", "model": " "},
        {},
    ])
    def test_invalid_requests(self, data):
        with pytest.raises(ValidationError):
            BuildRequest(**data)


class TestResponses:
    """Test response payload models."""

    def test_build_response_serializes_chapters(self):
        # Arrange & Act
        response = BuildResponse(
            identifier="dQw4w9WgXcQ",
            tldr="Summary",
            chapters=[ChapterModel.from_chapter(Chapter("00:00", "Intro"))],
            model="gpt-4o-mini",
            transcript_length=120
        )
        data = response.model_dump()

        # Assert
        assert data["success"] is True
        assert data["chapters"] == [{"time": "00:00", "title": "Intro"}]
        assert data["cached"] is False

    def test_error_payload(self):
        payload = ErrorPayload(error_kind="InvalidIdentifier", error_message="Invalid YouTube URL format")

        assert payload.success is False
        assert payload.identifier is None


class TestTranscriptModels:
    """Test transcript dataclasses."""

    def test_segment_duration_and_timestamp(self):
        segment = TranscriptSegment(start=125.4, end=130.0, text="hi")

        assert segment.duration == pytest.approx(4.6)
        assert segment.timestamp_str == "02:05"

    def test_with_source_keeps_content(self):
        result = TranscriptResult(text="abc", segments=(TranscriptSegment(0, 1, "abc"),))

        tagged = result.with_source("watch_page")

        assert tagged.source == "watch_page"
        assert tagged.text == "abc"
        assert tagged.segments == result.segments
        assert result.source is None

    def test_attempt_constructors(self):
        ok = AcquisitionAttempt.success(1, "s", TranscriptResult(text="t"))
        bad = AcquisitionAttempt.failure(0, "f", "boom")

        assert ok.succeeded and ok.outcome is AttemptOutcome.SUCCESS
        assert not bad.succeeded and bad.error_detail == "boom" and bad.result is None


class TestErrors:
    """Test the error taxonomy."""

    @pytest.mark.parametrize("error,status", [
        (InvalidIdentifier(), 400),
        (EmptyTranscript(), 400),
        (StrategyExhausted(), 400),
        (ProviderTransientFailure("timeout", provider="groq"), 500),
        (AllProvidersFailed(), 500),
        (ValueError("x"), 500),
    ])
    def test_status_code_for(self, error, status):
        assert status_code_for(error) == status

    def test_strategy_exhausted_reason(self):
        error = StrategyExhausted(reason="no_captions")

        assert error.detail == "No transcript available. Reason: no_captions"
        assert error.reason == "no_captions"

    def test_provider_failure_names_provider(self):
        error = ProviderTransientFailure("HTTP 503", provider="openai")

        assert error.detail == "openai: HTTP 503"
        assert error.kind == "ProviderTransientFailure"
