"""Unit tests for analytics recording."""

from unittest.mock import Mock

from youtube_tldr.models import ApiLogRecord
from youtube_tldr.services.analytics_service import AnalyticsService


def _record(status_code=200, identifier="dQw4w9WgXcQ", response_time_ms=100):
    return ApiLogRecord(
        endpoint="/api/build",
        status_code=status_code,
        response_time_ms=response_time_ms,
        identifier=identifier
    )


class TestAnalyticsService:
    """Tests for AnalyticsService."""

    def test_record_is_handed_to_sink(self):
        # Arrange
        sink = Mock()
        service = AnalyticsService(sink=sink)
        record = _record()

        # Act
        service.log_request(record)

        # Assert
        sink.assert_called_once_with(record)

    def test_sink_failure_is_swallowed(self):
        # Arrange
        sink = Mock(side_effect=RuntimeError("database down"))
        service = AnalyticsService(sink=sink)

        # Act
        service.log_request(_record())

        # Assert
        sink.assert_called_once()
        assert service.get_stats()["total_requests"] == 1

    def test_default_sink_logs(self):
        service = AnalyticsService()

        service.log_request(_record(status_code=400))

        assert service.get_stats()["successful_requests"] == 0

    def test_stats(self):
        # Arrange
        service = AnalyticsService(sink=Mock())
        service.log_request(_record(200, "aaaaaaaaaaa", 100))
        service.log_request(_record(200, "aaaaaaaaaaa", 300))
        service.log_request(_record(500, "bbbbbbbbbbb", 200))
        service.log_request(_record(400, None, 0))

        # Act
        stats = service.get_stats()
        top = service.get_most_processed_videos(limit=1)

        # Assert
        assert stats["total_requests"] == 4
        assert stats["successful_requests"] == 2
        assert stats["error_rate"] == 0.5
        assert stats["average_response_time_ms"] == 150.0
        assert top == [{"video_id": "aaaaaaaaaaa", "count": 2}]

    def test_empty_stats(self):
        stats = AnalyticsService(sink=Mock()).get_stats()

        assert stats["total_requests"] == 0
        assert stats["error_rate"] == 0.0

    def test_tracked_videos_are_capped(self):
        # Arrange
        service = AnalyticsService(sink=Mock(), max_tracked_videos=2)

        # Act
        for video_id in ("aaaaaaaaaaa", "aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"):
            service.log_request(_record(identifier=video_id))

        # Assert
        assert service.get_most_processed_videos() == [
            {"video_id": "aaaaaaaaaaa", "count": 2},
            {"video_id": "ccccccccccc", "count": 1},
        ]
        assert service.get_stats()["total_requests"] == 4
