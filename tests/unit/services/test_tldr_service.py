"""Unit tests for the TLDR pipeline entry point."""

from unittest.mock import AsyncMock, Mock

import pytest

from youtube_tldr.core.cache_manager import ResponseCache
from youtube_tldr.core.transcript_fetcher import ALL_METHODS_FAILED
from youtube_tldr.exceptions import AllProvidersFailed, InvalidIdentifier
from youtube_tldr.models import (
    AcquisitionAttempt,
    BuildRequest,
    BuildResponse,
    Chapter,
    ErrorPayload,
    SummaryResult,
    TranscriptResult,
    VideoMetadata
)
from youtube_tldr.services.tldr_service import TLDRService

VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"


@pytest.fixture
def fetcher(transcript_result):
    fetcher = Mock()
    fetcher.acquire = AsyncMock(return_value=transcript_result)
    fetcher.run_strategies = AsyncMock()
    return fetcher


@pytest.fixture
def summary_service():
    service = Mock()
    service.summarize = AsyncMock(return_value=SummaryResult(
        tldr="Short summary",
        chapters=(Chapter("00:00", "Intro"), Chapter("02:30", "Main topic")),
        provider="openai"
    ))
    return service


@pytest.fixture
def youtube_client():
    client = Mock()
    client.get_video_metadata = AsyncMock(return_value=VideoMetadata(video_id=VIDEO_ID, title="Test Video"))
    return client


@pytest.fixture
def analytics():
    return Mock()


@pytest.fixture
def cache(fake_clock):
    return ResponseCache(default_ttl=3600, clock=fake_clock)


@pytest.fixture
def service(fetcher, summary_service, cache, youtube_client, analytics, fast_retry, recording_sleep):
    return TLDRService(
        transcript_fetcher=fetcher,
        summary_service=summary_service,
        cache=cache,
        youtube_client=youtube_client,
        analytics_service=analytics,
        retry_options=fast_retry,
        min_transcript_length=50,
        fallback_language="en",
        sleep=recording_sleep
    )


def _logged_statuses(analytics):
    return [c.args[0].status_code for c in analytics.log_request.call_args_list]


class TestBuild:
    """Tests for TLDRService.build."""

    @pytest.mark.asyncio
    async def test_successful_build(self, service, fetcher, summary_service, analytics, transcript_result):
        # Arrange
        request = BuildRequest(url=VIDEO_URL, language="ru", model="gpt-4o-mini")

        # Act
        response = await service.build(request)

        # Assert
        assert isinstance(response, BuildResponse)
        assert response.identifier == VIDEO_ID
        assert response.title == "Test Video"
        assert response.tldr == "Short summary"
        assert [c.time for c in response.chapters] == ["00:00", "02:30"]
        assert response.transcript_length == len(transcript_result.text)
        assert response.cached is False
        fetcher.acquire.assert_awaited_once_with(VIDEO_ID, ["ru", "en"])
        summary_service.summarize.assert_awaited_once_with(transcript_result.text, "ru", "gpt-4o-mini")
        assert _logged_statuses(analytics) == [200]

    @pytest.mark.asyncio
    async def test_second_request_is_served_from_cache(self, service, fetcher, analytics):
        # Arrange
        request = BuildRequest(url=VIDEO_URL, language="en", model="gpt-4o-mini")
        await service.build(request)

        # Act
        response = await service.build(request)

        # Assert
        assert response.cached is True
        assert response.tldr == "Short summary"
        assert fetcher.acquire.await_count == 1
        assert _logged_statuses(analytics) == [200, 200]

    @pytest.mark.asyncio
    async def test_bypass_skips_cache_lookup(self, service, fetcher):
        request = BuildRequest(url=VIDEO_URL, language="en", model="gpt-4o-mini")
        await service.build(request)

        response = await service.build(request.model_copy(update={"bypass_cache": True}))

        assert response.cached is False
        assert fetcher.acquire.await_count == 2

    @pytest.mark.asyncio
    async def test_cache_entries_are_per_model(self, service, fetcher):
        await service.build(BuildRequest(url=VIDEO_URL, language="en", model="gpt-4o-mini"))

        await service.build(BuildRequest(url=VIDEO_URL, language="en", model="gpt-4o"))

        assert fetcher.acquire.await_count == 2

    @pytest.mark.asyncio
    async def test_invalid_url(self, service, fetcher, analytics):
        # Act
        response = await service.build(BuildRequest(url="https://example.com/x"))

        # Assert
        assert isinstance(response, ErrorPayload)
        assert response.error_kind == "InvalidIdentifier"
        assert response.identifier is None
        fetcher.acquire.assert_not_called()
        assert _logged_statuses(analytics) == [400]

    @pytest.mark.asyncio
    async def test_no_transcript(self, service, fetcher, summary_service, cache, analytics):
        # Arrange
        fetcher.acquire.return_value = TranscriptResult(failure_reason=ALL_METHODS_FAILED)

        # Act
        response = await service.build(BuildRequest(url=VIDEO_URL, language="en", model="m"))

        # Assert
        assert isinstance(response, ErrorPayload)
        assert response.error_kind == "StrategyExhausted"
        assert ALL_METHODS_FAILED in response.error_message
        summary_service.summarize.assert_not_called()
        assert len(cache) == 0
        assert _logged_statuses(analytics) == [400]

    @pytest.mark.asyncio
    async def test_short_transcript_is_rejected(self, service, fetcher, summary_service):
        fetcher.acquire.return_value = TranscriptResult(text="too short")

        response = await service.build(BuildRequest(url=VIDEO_URL, language="en", model="m"))

        assert response.error_kind == "StrategyExhausted"
        summary_service.summarize.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_acquisition_error_is_retried(self, service, fetcher, transcript_result, recording_sleep):
        # Arrange
        fetcher.acquire.side_effect = [ConnectionError("flaky"), transcript_result]

        # Act
        response = await service.build(BuildRequest(url=VIDEO_URL, language="en", model="m"))

        # Assert
        assert isinstance(response, BuildResponse)
        assert fetcher.acquire.await_count == 2
        assert len(recording_sleep.delays) == 1

    @pytest.mark.asyncio
    async def test_invalid_identifier_from_fetcher_is_not_retried(self, service, fetcher):
        fetcher.acquire.side_effect = InvalidIdentifier()

        response = await service.build(BuildRequest(url=VIDEO_URL, language="en", model="m"))

        assert response.error_kind == "InvalidIdentifier"
        assert fetcher.acquire.await_count == 1

    @pytest.mark.asyncio
    async def test_all_providers_failed(self, service, summary_service, cache, analytics):
        # Arrange
        summary_service.summarize.side_effect = AllProvidersFailed()

        # Act
        response = await service.build(BuildRequest(url=VIDEO_URL, language="en", model="m"))

        # Assert
        assert response.error_kind == "AllProvidersFailed"
        assert response.identifier == VIDEO_ID
        assert len(cache) == 0
        assert _logged_statuses(analytics) == [500]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_masked(self, service, summary_service, analytics):
        # Arrange
        summary_service.summarize.side_effect = KeyError("secret internals")

        # Act
        response = await service.build(BuildRequest(url=VIDEO_URL, language="en", model="m"))

        # Assert
        assert response.error_kind == "InternalError"
        assert response.error_message == "Internal server error"
        assert "secret" not in response.error_message
        assert _logged_statuses(analytics) == [500]

    @pytest.mark.asyncio
    async def test_missing_metadata_leaves_title_empty(self, service, youtube_client):
        youtube_client.get_video_metadata.return_value = None

        response = await service.build(BuildRequest(url=VIDEO_URL, language="en", model="m"))

        assert response.title is None

    @pytest.mark.asyncio
    async def test_works_without_cache(self, fetcher, summary_service, analytics, fast_retry):
        service = TLDRService(
            transcript_fetcher=fetcher,
            summary_service=summary_service,
            analytics_service=analytics,
            retry_options=fast_retry
        )
        request = BuildRequest(url=VIDEO_URL, language="en", model="m")

        await service.build(request)
        response = await service.build(request)

        assert response.cached is False
        assert fetcher.acquire.await_count == 2


class TestTranscriptTester:
    """Tests for TLDRService.test_transcript."""

    @pytest.mark.asyncio
    async def test_reports_each_attempt(self, service, fetcher):
        # Arrange
        winning = TranscriptResult(text="x" * 120, source="unofficial_service")
        fetcher.run_strategies.return_value = (winning, [
            AcquisitionAttempt.failure(0, "captions_api", "YouTube Data API key not configured"),
            AcquisitionAttempt.success(1, "unofficial_service", winning, elapsed_ms=42),
        ])

        # Act
        report = await service.test_transcript(VIDEO_URL, ["es"])

        # Assert
        assert report.identifier == VIDEO_ID
        assert report.title == "Test Video"
        assert [a.status for a in report.attempts] == ["failure", "success"]
        assert report.attempts[1].transcript_length == 120
        assert report.final_source == "unofficial_service"
        assert report.error is None
        fetcher.run_strategies.assert_awaited_once_with(VIDEO_ID, ["es"])

    @pytest.mark.asyncio
    async def test_invalid_url(self, service, fetcher):
        report = await service.test_transcript("not a url")

        assert report.identifier is None
        assert report.error
        fetcher.run_strategies.assert_not_called()

    def test_languages_for(self, service):
        assert service.languages_for("ru") == ["ru", "en"]
        assert service.languages_for("en") == ["en"]
