"""Core modules for YouTube TLDR."""

from .config import config
from .cache_manager import ResponseCache, CacheEntry
from .caption_parser import CaptionParser, decode_xml_entities
from .llm_manager import LLMManager, LLMProvider, OpenAIProvider, GroqProvider
from .strategies import (
    TranscriptStrategy,
    CaptionsApiStrategy,
    UnofficialServiceStrategy,
    WatchPageStrategy,
    select_track
)
from .transcript_fetcher import TranscriptFetcher, ALL_METHODS_FAILED
from .youtube_client import YouTubeClient

__all__ = [
    'config',
    'ResponseCache',
    'CacheEntry',
    'CaptionParser',
    'decode_xml_entities',
    'LLMManager',
    'LLMProvider',
    'OpenAIProvider',
    'GroqProvider',
    'TranscriptStrategy',
    'CaptionsApiStrategy',
    'UnofficialServiceStrategy',
    'WatchPageStrategy',
    'select_track',
    'TranscriptFetcher',
    'ALL_METHODS_FAILED',
    'YouTubeClient'
]
