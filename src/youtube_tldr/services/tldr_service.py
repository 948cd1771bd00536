"""Pipeline entry point: URL in, TLDR and chapters out."""

import time
from typing import List, Optional, Sequence, Union

from ..core.cache_manager import ResponseCache
from ..core.config import config
from ..core.transcript_fetcher import TranscriptFetcher
from ..core.youtube_client import YouTubeClient
from ..exceptions import InvalidIdentifier, StrategyExhausted, TLDRError, status_code_for
from ..models import (
    ApiLogRecord,
    AttemptReport,
    BuildRequest,
    BuildResponse,
    ChapterModel,
    ErrorPayload,
    TranscriptResult,
    TranscriptTestReport
)
from ..utils.logging import get_logger
from ..utils.retry import RetryOptions, SleepFn, retry_with_condition
from ..utils.youtube_utils import extract_video_id
from .analytics_service import AnalyticsService
from .summary_service import SummaryService

logger = get_logger("tldr_service")

BUILD_ENDPOINT = "/api/build"
INTERNAL_ERROR_KIND = "InternalError"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


def _not_invalid_identifier(error: BaseException, attempt: int) -> bool:
    return not isinstance(error, InvalidIdentifier)


class TLDRService:
    """
    Orchestrates one TLDR request.

    Resolves the video, consults the cache, fetches metadata and transcript,
    summarizes, stores the result and records exactly one analytics entry.
    """

    def __init__(
        self,
        transcript_fetcher: TranscriptFetcher,
        summary_service: SummaryService,
        cache: Optional[ResponseCache] = None,
        youtube_client: Optional[YouTubeClient] = None,
        analytics_service: Optional[AnalyticsService] = None,
        retry_options: Optional[RetryOptions] = None,
        min_transcript_length: Optional[int] = None,
        fallback_language: Optional[str] = None,
        sleep: Optional[SleepFn] = None
    ):
        self.transcript_fetcher = transcript_fetcher
        self.summary_service = summary_service
        self.cache = cache
        self.youtube_client = youtube_client
        self.analytics = analytics_service or AnalyticsService()
        self.retry_options = retry_options or RetryOptions(
            max_retries=config.retry.transcript_max_retries,
            initial_delay=config.retry.transcript_delay,
            backoff_multiplier=config.retry.backoff_multiplier,
            max_delay=config.retry.max_delay
        )
        self.min_transcript_length = (
            min_transcript_length if min_transcript_length is not None
            else config.transcript.min_transcript_length
        )
        self.fallback_language = fallback_language or config.transcript.fallback_language
        self._sleep = sleep
        logger.info("Initialized TLDRService")

    def languages_for(self, language: str) -> List[str]:
        """Requested language followed by the fallback language."""
        languages = [language]
        if self.fallback_language and self.fallback_language != language:
            languages.append(self.fallback_language)
        return languages

    async def build(self, request: BuildRequest) -> Union[BuildResponse, ErrorPayload]:
        """
        Build a TLDR for ``request``.

        Returns:
            BuildResponse on success, ErrorPayload on any failure
        """
        start_time = time.time()
        video_id: Optional[str] = None

        try:
            video_id = extract_video_id(request.url)
            cache_key = ResponseCache.key(video_id, request.language, request.model)

            if self.cache is not None and not request.bypass_cache:
                cached = self.cache.get(cache_key)
                if cached is not None:
                    response = cached.model_copy(update={
                        "cached": True,
                        "response_time_ms": _elapsed_ms(start_time)
                    })
                    logger.info(f"Serving cached TLDR for {video_id}")
                    self._log(video_id, 200, response.response_time_ms)
                    return response

            title = await self._get_title(video_id)

            transcript = await self._acquire(video_id, request.language)
            if len(transcript.text) < self.min_transcript_length:
                raise StrategyExhausted(reason=transcript.failure_reason or "transcript_too_short")

            summary = await self.summary_service.summarize(transcript.text, request.language, request.model)

            response = BuildResponse(
                identifier=video_id,
                title=title,
                tldr=summary.tldr,
                chapters=[ChapterModel.from_chapter(chapter) for chapter in summary.chapters],
                model=request.model,
                transcript_length=len(transcript.text),
                response_time_ms=_elapsed_ms(start_time)
            )

            if self.cache is not None:
                self.cache.set(cache_key, response)

            self._log(video_id, 200, response.response_time_ms)
            return response

        except TLDRError as e:
            logger.warning(f"TLDR request failed ({e.kind}): {e.detail}")
            payload = ErrorPayload(
                identifier=video_id,
                error_kind=e.kind,
                error_message=e.detail,
                response_time_ms=_elapsed_ms(start_time)
            )
            self._log(video_id, status_code_for(e), payload.response_time_ms, e.detail)
            return payload

        except Exception as e:
            logger.error(f"Unexpected error building TLDR: {str(e)}", exc_info=True)
            payload = ErrorPayload(
                identifier=video_id,
                error_kind=INTERNAL_ERROR_KIND,
                error_message=INTERNAL_ERROR_MESSAGE,
                response_time_ms=_elapsed_ms(start_time)
            )
            self._log(video_id, status_code_for(e), payload.response_time_ms, str(e))
            return payload

    async def test_transcript(
        self,
        url: str,
        languages: Optional[Sequence[str]] = None
    ) -> TranscriptTestReport:
        """Run every strategy once and report each attempt, without summarizing."""
        try:
            video_id = extract_video_id(url)
        except InvalidIdentifier as e:
            return TranscriptTestReport(error=e.detail)

        languages = list(languages) if languages else self.languages_for(config.transcript.default_language)
        title = await self._get_title(video_id)
        result, attempts = await self.transcript_fetcher.run_strategies(video_id, languages)

        reports = []
        for attempt in attempts:
            if attempt.succeeded:
                length = len(attempt.result.text)
                reports.append(AttemptReport(
                    strategy=attempt.strategy,
                    status="success",
                    message=f"Got {length} characters in {attempt.elapsed_ms}ms",
                    transcript_length=length
                ))
            else:
                reports.append(AttemptReport(
                    strategy=attempt.strategy,
                    status="failure",
                    message=attempt.error_detail or "failed"
                ))

        return TranscriptTestReport(
            identifier=video_id,
            title=title,
            attempts=reports,
            final_source=result.source,
            transcript_length=len(result.text),
            error=result.failure_reason
        )

    async def _acquire(self, video_id: str, language: str) -> TranscriptResult:
        languages = self.languages_for(language)
        return await retry_with_condition(
            lambda: self.transcript_fetcher.acquire(video_id, languages),
            _not_invalid_identifier,
            self.retry_options,
            sleep=self._sleep
        )

    async def _get_title(self, video_id: str) -> Optional[str]:
        if self.youtube_client is None:
            return None
        metadata = await self.youtube_client.get_video_metadata(video_id)
        return metadata.title if metadata else None

    def _log(
        self,
        video_id: Optional[str],
        status_code: int,
        response_time_ms: int,
        error_message: Optional[str] = None
    ) -> None:
        self.analytics.log_request(ApiLogRecord(
            endpoint=BUILD_ENDPOINT,
            status_code=status_code,
            response_time_ms=response_time_ms,
            identifier=video_id,
            error_message=error_message
        ))
