"""Request analytics with a pluggable sink."""

import threading
from collections import Counter
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import AnalyticsFailure
from ..models import ApiLogRecord
from ..utils.logging import get_logger

logger = get_logger("analytics_service")

Sink = Callable[[ApiLogRecord], Any]

# Per-video counters kept in memory
MAX_TRACKED_VIDEOS = 1000


def log_sink(record: ApiLogRecord) -> None:
    """Default sink: write the record to the analytics logger."""
    logger.info(
        f"{record.endpoint} video={record.identifier or '-'} status={record.status_code} "
        f"time={record.response_time_ms}ms"
        + (f" error={record.error_message}" if record.error_message else "")
    )


class AnalyticsService:
    """Records one entry per request. Sink failures are logged and dropped."""

    def __init__(self, sink: Optional[Sink] = None, max_tracked_videos: int = MAX_TRACKED_VIDEOS):
        self.sink = sink or log_sink
        self.max_tracked_videos = max_tracked_videos
        self._lock = threading.Lock()
        self._total = 0
        self._successful = 0
        self._total_time_ms = 0
        self._videos: Counter = Counter()

    def log_request(self, record: ApiLogRecord) -> None:
        self._record_stats(record)
        try:
            self.sink(record)
        except Exception as e:
            failure = AnalyticsFailure(f"Failed to log request: {e}")
            logger.error(f"{failure.kind}: {failure.detail}")

    def _record_stats(self, record: ApiLogRecord) -> None:
        with self._lock:
            self._total += 1
            if 200 <= record.status_code < 300:
                self._successful += 1
            self._total_time_ms += record.response_time_ms
            if record.identifier:
                self._track_video(record.identifier)

    def _track_video(self, video_id: str) -> None:
        # Full: drop the least processed video, oldest first on ties
        if video_id not in self._videos and len(self._videos) >= self.max_tracked_videos:
            least, _ = min(self._videos.items(), key=lambda item: item[1])
            del self._videos[least]
        self._videos[video_id] += 1

    def get_stats(self) -> Dict[str, Any]:
        """Aggregate counters for requests seen by this instance."""
        with self._lock:
            total = self._total
            return {
                "total_requests": total,
                "successful_requests": self._successful,
                "error_rate": (total - self._successful) / total if total else 0.0,
                "average_response_time_ms": self._total_time_ms / total if total else 0.0,
            }

    def get_most_processed_videos(self, limit: int = 10) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                {"video_id": video_id, "count": count}
                for video_id, count in self._videos.most_common(limit)
            ]
