"""
Transcript acquisition engine.

Runs the configured strategies strictly in order, each bounded by a timeout,
and returns the first usable transcript. Exhaustion is reported as an empty
result with a failure reason rather than an exception.
"""

import asyncio
import time
from typing import List, Optional, Sequence, Tuple

from ..exceptions import EmptyTranscript
from ..models import AcquisitionAttempt, TranscriptResult
from ..utils.logging import get_logger
from ..utils.youtube_utils import validate_video_id
from .config import config
from .strategies import TranscriptStrategy, default_strategies, select_track

logger = get_logger("transcript_fetcher")

ALL_METHODS_FAILED = "no_transcript_available_all_methods_failed"

__all__ = ["TranscriptFetcher", "select_track", "ALL_METHODS_FAILED"]


class TranscriptFetcher:
    """
    Ordered multi-strategy transcript fetcher.

    Strategies are tried one after another; the first one that produces
    non-empty text wins and later strategies are not invoked.
    """

    def __init__(
        self,
        strategies: Optional[List[TranscriptStrategy]] = None,
        strategy_timeout: Optional[float] = None
    ):
        self.strategies = strategies if strategies is not None else default_strategies()
        self.strategy_timeout = strategy_timeout or config.transcript.strategy_timeout

        logger.info(
            f"Initialized TranscriptFetcher with strategies: "
            f"{', '.join(s.name for s in self.strategies)}"
        )

    async def acquire(self, video_id: str, languages: Sequence[str]) -> TranscriptResult:
        """
        Fetch a transcript for ``video_id``.

        Args:
            video_id: 11-character video identifier
            languages: Ordered language preferences

        Returns:
            TranscriptResult; empty text with ``failure_reason`` set when every
            strategy failed

        Raises:
            InvalidIdentifier: If ``video_id`` is malformed
        """
        result, _ = await self.run_strategies(video_id, languages)
        return result

    async def run_strategies(
        self,
        video_id: str,
        languages: Sequence[str]
    ) -> Tuple[TranscriptResult, List[AcquisitionAttempt]]:
        """Run the strategies in order and return the result with every attempt made."""
        validate_video_id(video_id)
        attempts: List[AcquisitionAttempt] = []

        for index, strategy in enumerate(self.strategies):
            attempt = await self._attempt(index, strategy, video_id, languages)
            attempts.append(attempt)
            if attempt.succeeded:
                logger.info(
                    f"Transcript for {video_id} acquired via {strategy.name} "
                    f"({len(attempt.result.text)} chars, {attempt.elapsed_ms}ms)"
                )
                return attempt.result, attempts

        logger.error(f"All transcript strategies failed for {video_id}")
        return TranscriptResult(failure_reason=ALL_METHODS_FAILED), attempts

    async def _attempt(
        self,
        index: int,
        strategy: TranscriptStrategy,
        video_id: str,
        languages: Sequence[str]
    ) -> AcquisitionAttempt:
        start_time = time.time()
        try:
            result = await asyncio.wait_for(
                strategy.attempt(video_id, list(languages)),
                timeout=self.strategy_timeout
            )
            if result is None or not result.text:
                raise EmptyTranscript(f"{strategy.name} returned empty text")
        except asyncio.TimeoutError:
            elapsed = int((time.time() - start_time) * 1000)
            logger.warning(f"Strategy {strategy.name} timed out after {self.strategy_timeout}s for {video_id}")
            return AcquisitionAttempt.failure(index, strategy.name, "timeout", elapsed)
        except Exception as e:
            elapsed = int((time.time() - start_time) * 1000)
            logger.warning(f"Strategy {strategy.name} failed for {video_id}: {e}")
            return AcquisitionAttempt.failure(index, strategy.name, str(e) or type(e).__name__, elapsed)

        elapsed = int((time.time() - start_time) * 1000)
        return AcquisitionAttempt.success(index, strategy.name, result.with_source(strategy.name), elapsed)
