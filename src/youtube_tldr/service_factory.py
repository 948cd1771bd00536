"""Factory for creating and configuring services."""

import asyncio
from typing import Optional

from .core import LLMManager, ResponseCache, TranscriptFetcher, YouTubeClient, config
from .services import AnalyticsService, SummaryService, TLDRService
from .utils.logging import get_logger

logger = get_logger("service_factory")


class ServiceFactory:
    """Factory for creating and managing service dependencies."""

    def __init__(self):
        self._cache: Optional[ResponseCache] = None
        self._youtube_client = None
        self._llm_manager = None
        self._transcript_fetcher = None
        self._summary_service = None
        self._analytics_service = None
        self._tldr_service = None

        logger.info("Initialized ServiceFactory")

    def get_cache(self) -> Optional[ResponseCache]:
        """Get or create the response cache; None when caching is disabled."""
        if not config.cache.enable_cache:
            return None
        if self._cache is None:
            self._cache = ResponseCache()
        self._start_sweep()
        return self._cache

    def _start_sweep(self) -> None:
        # Needs a running loop; otherwise deferred to the next call from a coroutine
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        if not self._cache.is_sweeping:
            self._cache.start_periodic_sweep(config.cache.sweep_interval_seconds)
            logger.info("Started periodic cache sweep")

    async def start(self) -> None:
        """Start background tasks owned by the factory."""
        self.get_cache()

    def get_youtube_client(self) -> YouTubeClient:
        if self._youtube_client is None:
            self._youtube_client = YouTubeClient()
        return self._youtube_client

    def get_llm_manager(self) -> LLMManager:
        if self._llm_manager is None:
            self._llm_manager = LLMManager()
        return self._llm_manager

    def get_transcript_fetcher(self) -> TranscriptFetcher:
        if self._transcript_fetcher is None:
            self._transcript_fetcher = TranscriptFetcher()
        return self._transcript_fetcher

    def get_summary_service(self) -> SummaryService:
        if self._summary_service is None:
            self._summary_service = SummaryService(self.get_llm_manager())
        return self._summary_service

    def get_analytics_service(self) -> AnalyticsService:
        if self._analytics_service is None:
            self._analytics_service = AnalyticsService()
        return self._analytics_service

    def get_tldr_service(self) -> TLDRService:
        """Get or create the pipeline service with all of its collaborators."""
        if self._tldr_service is None:
            self._tldr_service = TLDRService(
                transcript_fetcher=self.get_transcript_fetcher(),
                summary_service=self.get_summary_service(),
                cache=self.get_cache(),
                youtube_client=self.get_youtube_client(),
                analytics_service=self.get_analytics_service()
            )
        return self._tldr_service

    async def cleanup(self):
        """Stop background tasks owned by the factory."""
        if self._cache is not None:
            await self._cache.stop_periodic_sweep()

        logger.info("ServiceFactory cleanup completed")


_service_factory: Optional[ServiceFactory] = None


def get_service_factory() -> ServiceFactory:
    """Get the process-wide service factory."""
    global _service_factory
    if _service_factory is None:
        _service_factory = ServiceFactory()
    return _service_factory


def get_tldr_service() -> TLDRService:
    """Get the TLDR pipeline service."""
    return get_service_factory().get_tldr_service()
