"""Pytest configuration and fixtures for the TLDR pipeline tests."""

import os
import sys
from typing import List
from unittest.mock import AsyncMock, Mock

import pytest

# Add the src directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

# Set test environment variables before importing the package
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ["GROQ_API_KEY"] = "test-groq-key"
os.environ.pop("YOUTUBE_API_KEY", None)
os.environ.pop("YT_API_KEY", None)

from youtube_tldr.models import TranscriptResult, TranscriptSegment
from youtube_tldr.utils.retry import RetryOptions


VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"

LONG_TRANSCRIPT = (
    "Welcome to the channel. Today we talk about building reliable services "
    "and how retries and fallbacks keep them running when dependencies fail."
)


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def make_strategy():
    """Factory for strategy doubles whose attempt returns ``result`` or raises ``error``."""
    def _make(name: str, result=None, error: Exception = None) -> Mock:
        strategy = Mock()
        strategy.name = name
        strategy.attempt = AsyncMock(side_effect=error, return_value=result)
        return strategy
    return _make


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fast_retry():
    """Retry options with tiny delays."""
    return RetryOptions(max_retries=2, initial_delay=0.01, backoff_multiplier=2.0, max_delay=0.05)


@pytest.fixture
def transcript_result():
    return TranscriptResult(
        text=LONG_TRANSCRIPT,
        segments=(TranscriptSegment(start=0.0, end=5.0, text=LONG_TRANSCRIPT),),
        source="unofficial_service"
    )


@pytest.fixture
def mock_response():
    """Factory for fake ``requests`` responses."""
    def _make(status_code: int = 200, text: str = "", json_data=None, json_error: Exception = None):
        response = Mock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 300
        response.text = text
        if json_error is not None:
            response.json = Mock(side_effect=json_error)
        else:
            response.json = Mock(return_value=json_data)
        if response.ok:
            response.raise_for_status = Mock()
        else:
            response.raise_for_status = Mock(side_effect=Exception(f"HTTP {status_code}"))
        return response
    return _make
