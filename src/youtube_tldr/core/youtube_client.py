"""YouTube metadata client."""

from typing import Any, Dict, Optional

import requests

from ..models import VideoMetadata
from ..utils.logging import get_logger
from ..utils.retry import RetryOptions, SleepFn, retry_operation
from .config import config
from .strategies import http_get, new_session

logger = get_logger("youtube_client")

VIDEOS_API = "https://www.googleapis.com/youtube/v3/videos"
OEMBED_URL = "https://www.youtube.com/oembed"

# Descriptions are trimmed to this many characters
MAX_DESCRIPTION = 500


class YouTubeClient:
    """Looks up video titles and durations; best effort, never raises."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        retry_options: Optional[RetryOptions] = None,
        sleep: Optional[SleepFn] = None
    ):
        self.api_key = api_key if api_key is not None else config.api.youtube_api_key
        self.session = session or new_session()
        self.timeout = timeout or config.transcript.metadata_timeout
        self.retry_options = retry_options or RetryOptions(
            max_retries=config.retry.metadata_max_retries,
            initial_delay=config.retry.metadata_delay,
            backoff_multiplier=config.retry.backoff_multiplier,
            max_delay=config.retry.max_delay
        )
        self._sleep = sleep

    async def get_video_metadata(self, video_id: str) -> Optional[VideoMetadata]:
        """
        Fetch metadata for a video.

        Uses the Data API when a key is configured and falls back to oEmbed,
        which only yields the title. Returns None when both fail.
        """
        if self.api_key:
            try:
                metadata = await retry_operation(
                    lambda: self._fetch_from_data_api(video_id),
                    self.retry_options,
                    sleep=self._sleep
                )
                if metadata is not None:
                    return metadata
            except Exception as e:
                logger.warning(f"Data API metadata lookup failed for {video_id}: {e}")

        try:
            return await self._fetch_from_oembed(video_id)
        except Exception as e:
            logger.warning(f"oEmbed metadata lookup failed for {video_id}: {e}")
            return None

    async def _fetch_from_data_api(self, video_id: str) -> Optional[VideoMetadata]:
        r = await http_get(
            self.session, VIDEOS_API, self.timeout,
            params={"part": "snippet,contentDetails", "id": video_id, "key": self.api_key}
        )
        r.raise_for_status()
        items = r.json().get("items") or []
        if not items:
            logger.info(f"Data API has no video {video_id}")
            return None

        video: Dict[str, Any] = items[0]
        snippet = video.get("snippet") or {}
        description = snippet.get("description") or ""
        if len(description) > MAX_DESCRIPTION:
            description = description[:MAX_DESCRIPTION] + "..."

        return VideoMetadata(
            video_id=video_id,
            title=snippet.get("title") or f"YouTube Video {video_id}",
            description=description,
            duration=(video.get("contentDetails") or {}).get("duration")
        )

    async def _fetch_from_oembed(self, video_id: str) -> Optional[VideoMetadata]:
        r = await http_get(
            self.session, OEMBED_URL, self.timeout,
            params={"format": "json", "url": f"https://www.youtube.com/watch?v={video_id}"}
        )
        if not r.ok:
            logger.info(f"oEmbed returned {r.status_code} for {video_id}")
            return None
        title = r.json().get("title")
        if not title:
            return None
        return VideoMetadata(video_id=video_id, title=title)
