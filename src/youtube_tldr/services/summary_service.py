"""Service that turns transcript text into a TLDR and chapter list."""

import json
import re
from typing import List, Optional

from ..core.config import config
from ..core.llm_manager import LLMManager, LLMProvider
from ..core.prompts import build_user_prompt, get_system_prompt
from ..exceptions import AllProvidersFailed, ProviderNotConfigured, ProviderTransientFailure
from ..models import Chapter, SummaryResult
from ..utils.logging import get_logger
from ..utils.retry import RetryOptions, SleepFn, retry_with_condition

logger = get_logger("summary_service")

NO_SUMMARY = "No summary available"

SUMMARY_KEYWORDS = ("tldr", "summary", "resumen", "резюме")
CHAPTER_KEYWORDS = ("chapters", "capítulos", "главы")

TIMESTAMP_RE = re.compile(r"\d{1,2}:\d{2}(?::\d{2})?")
LEADING_DIGITS_RE = re.compile(r"\s*(\d+)")
JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.S | re.I)

# Lines longer than this can stand in for a missing TLDR marker
MIN_IMPLICIT_TLDR_LENGTH = 50


def normalize_timestamp(value: str) -> str:
    """
    Normalize ``M:S`` to ``MM:SS`` and ``H:M:S`` to ``HH:MM:SS``.

    Each part keeps only its leading digits. Anything that does not have two or
    three numeric parts is returned unchanged.
    """
    parts = value.split(":")
    if len(parts) not in (2, 3):
        return value

    numbers = []
    for part in parts:
        m = LEADING_DIGITS_RE.match(part)
        if not m:
            return value
        numbers.append(int(m.group(1)))

    return ":".join(f"{n:02d}" for n in numbers)


def _unwrap_fence(raw: str) -> str:
    m = JSON_FENCE_RE.search(raw)
    return m.group(1).strip() if m else raw.strip()


def _parse_strict(raw: str) -> SummaryResult:
    data = json.loads(_unwrap_fence(raw))
    if not isinstance(data, dict):
        raise ValueError("Response is not a JSON object")

    tldr = data.get("tldr")
    chapters_data = data.get("chapters")
    if not isinstance(tldr, str) or not tldr.strip() or not isinstance(chapters_data, list):
        raise ValueError("Invalid response structure")

    chapters: List[Chapter] = []
    for item in chapters_data:
        if not isinstance(item, dict) or not item.get("time") or not item.get("title"):
            continue
        title = str(item["title"]).strip()
        if title:
            chapters.append(Chapter(time=normalize_timestamp(str(item["time"]).strip()), title=title))

    return SummaryResult(tldr=tldr.strip(), chapters=tuple(chapters))


def _parse_heuristic(raw: str) -> SummaryResult:
    lines = [line.strip() for line in raw.splitlines() if line.strip()]

    tldr = ""
    chapters: List[Chapter] = []
    found_tldr = False
    found_chapters = False
    # Timestamped lines count as chapters once any explicit marker was seen
    scanning = False

    for line in lines:
        lowered = line.lower()

        # Chapter titles may contain marker keywords such as "Summary"
        m = TIMESTAMP_RE.search(line)
        if m and scanning:
            title = (line[:m.start()] + line[m.end():]).strip()
            title = re.sub(r"^[\s\-:]+", "", title).strip()
            if title:
                chapters.append(Chapter(time=normalize_timestamp(m.group(0)), title=title))
            continue

        if any(keyword in lowered for keyword in SUMMARY_KEYWORDS):
            found_tldr = True
            _, colon, rest = line.partition(":")
            if colon:
                tldr = rest.strip()
            scanning = True
            continue

        if any(keyword in lowered for keyword in CHAPTER_KEYWORDS):
            found_chapters = True
            scanning = True
            continue

        if not found_tldr and not found_chapters and len(line) > MIN_IMPLICIT_TLDR_LENGTH:
            tldr = line
            found_tldr = True

    return SummaryResult(tldr=tldr or NO_SUMMARY, chapters=tuple(chapters))


def parse_llm_response(raw: str) -> SummaryResult:
    """
    Parse a provider answer into a summary.

    Strict JSON first; on any failure a line-scanning heuristic is used.
    Never raises.
    """
    try:
        return _parse_strict(raw)
    except (ValueError, TypeError) as e:
        logger.warning(f"Failed to parse structured LLM response, using heuristic parser: {e}")
        return _parse_heuristic(raw or "")


def _is_transient(error: BaseException, attempt: int) -> bool:
    return isinstance(error, ProviderTransientFailure)


class SummaryService:
    """
    Summarization engine with retries and provider fallback.

    The primary provider runs the requested model; if it keeps failing the
    secondary provider runs its own fixed model.
    """

    def __init__(
        self,
        llm_manager: Optional[LLMManager] = None,
        retry_options: Optional[RetryOptions] = None,
        max_transcript_chars: Optional[int] = None,
        sleep: Optional[SleepFn] = None
    ):
        self.llm_manager = llm_manager or LLMManager()
        self.retry_options = retry_options or RetryOptions(
            max_retries=config.retry.summary_max_retries,
            initial_delay=config.retry.summary_delay,
            backoff_multiplier=config.retry.backoff_multiplier,
            max_delay=config.retry.max_delay
        )
        self.max_transcript_chars = max_transcript_chars or config.llm.max_transcript_chars
        self._sleep = sleep
        logger.info("Initialized SummaryService")

    def truncate(self, text: str) -> str:
        if len(text) > self.max_transcript_chars:
            return text[:self.max_transcript_chars] + "..."
        return text

    async def summarize(self, text: str, language: str, model: str) -> SummaryResult:
        """
        Generate a TLDR and chapters for ``text``.

        Args:
            text: Transcript text
            language: Output language code
            model: Model for the primary provider

        Returns:
            SummaryResult tagged with the provider that answered

        Raises:
            AllProvidersFailed: If no provider produced an answer
        """
        system_prompt = get_system_prompt(language)
        user_prompt = build_user_prompt(self.truncate(text))

        primary = self.llm_manager.get_primary()
        try:
            raw = await self._call(primary, system_prompt, user_prompt, model)
            return self._finish(raw, primary)
        except (ProviderTransientFailure, ProviderNotConfigured) as e:
            logger.warning(f"Primary provider {primary.name} failed, trying fallback: {e}")

        secondary = self.llm_manager.get_secondary()
        if secondary is None:
            logger.error("No fallback LLM provider configured")
            raise AllProvidersFailed()

        try:
            raw = await self._call(secondary, system_prompt, user_prompt, None)
        except (ProviderTransientFailure, ProviderNotConfigured) as e:
            logger.error(f"Fallback provider {secondary.name} also failed: {e}")
            raise AllProvidersFailed() from e
        return self._finish(raw, secondary)

    async def _call(self, provider: LLMProvider, system_prompt: str, user_prompt: str, model: Optional[str]) -> str:
        return await retry_with_condition(
            lambda: provider.complete(system_prompt, user_prompt, model),
            _is_transient,
            self.retry_options,
            sleep=self._sleep
        )

    def _finish(self, raw: str, provider: LLMProvider) -> SummaryResult:
        parsed = parse_llm_response(raw)
        logger.info(f"Summary generated by {provider.name} with {len(parsed.chapters)} chapters")
        return SummaryResult(tldr=parsed.tldr, chapters=parsed.chapters, provider=provider.name)
