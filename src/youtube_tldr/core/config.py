"""
Configuration System for the YouTube TLDR service.
All tunable values are centralized here and can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List, Tuple, Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path('.env')
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

# =============================================================================
# CORE APPLICATION SETTINGS
# =============================================================================

@dataclass
class AppConfig:
    """Core application configuration."""
    version: str = field(default_factory=lambda: os.getenv('APP_VERSION', '0.1.0'))
    debug: bool = field(default_factory=lambda: os.getenv('DEBUG', 'false').lower() == 'true')
    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

# =============================================================================
# LLM CONFIGURATION
# =============================================================================

@dataclass
class LLMConfig:
    """LLM configuration settings."""
    default_model: str = field(default_factory=lambda: os.getenv('LLM_DEFAULT_MODEL', 'gpt-4o-mini'))
    # The secondary provider always runs this model, whatever was requested
    fallback_model: str = field(default_factory=lambda: os.getenv('LLM_FALLBACK_MODEL', 'llama-3.1-8b-instant'))
    temperature: float = field(default_factory=lambda: float(os.getenv('LLM_TEMPERATURE', '0.7')))
    max_tokens: int = field(default_factory=lambda: int(os.getenv('LLM_MAX_TOKENS', '1000')))
    timeout: float = field(default_factory=lambda: float(os.getenv('LLM_TIMEOUT', '30')))
    max_transcript_chars: int = field(default_factory=lambda: int(os.getenv('LLM_MAX_TRANSCRIPT_CHARS', '8000')))

# =============================================================================
# API CONFIGURATION
# =============================================================================

@dataclass
class APIConfig:
    """External API credentials."""
    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv('OPENAI_API_KEY'))
    groq_api_key: Optional[str] = field(default_factory=lambda: os.getenv('GROQ_API_KEY'))
    youtube_api_key: Optional[str] = field(default_factory=lambda: os.getenv('YOUTUBE_API_KEY') or os.getenv('YT_API_KEY'))

# =============================================================================
# TRANSCRIPT CONFIGURATION
# =============================================================================

DEFAULT_UNOFFICIAL_ENDPOINTS = [
    'https://youtube-transcript-api.vercel.app/api/transcript?videoId={video_id}',
    'https://yt-transcript-api.herokuapp.com/transcript?video_id={video_id}',
]

@dataclass
class TranscriptConfig:
    """Transcript acquisition settings."""
    default_language: str = field(default_factory=lambda: os.getenv('TRANSCRIPT_DEFAULT_LANGUAGE', 'ru'))
    fallback_language: str = field(default_factory=lambda: os.getenv('TRANSCRIPT_FALLBACK_LANGUAGE', 'en'))

    # Upper bound for a whole strategy attempt
    strategy_timeout: float = field(default_factory=lambda: float(os.getenv('TRANSCRIPT_STRATEGY_TIMEOUT', '20')))
    # Per HTTP call timeouts
    list_timeout: float = field(default_factory=lambda: float(os.getenv('TRANSCRIPT_LIST_TIMEOUT', '10')))
    download_timeout: float = field(default_factory=lambda: float(os.getenv('TRANSCRIPT_DOWNLOAD_TIMEOUT', '15')))
    page_timeout: float = field(default_factory=lambda: float(os.getenv('TRANSCRIPT_PAGE_TIMEOUT', '10')))
    metadata_timeout: float = field(default_factory=lambda: float(os.getenv('METADATA_TIMEOUT', '10')))

    unofficial_endpoints: List[str] = field(default_factory=lambda: _parse_list_env(
        'TRANSCRIPT_UNOFFICIAL_ENDPOINTS', DEFAULT_UNOFFICIAL_ENDPOINTS
    ))
    min_transcript_length: int = field(default_factory=lambda: int(os.getenv('TRANSCRIPT_MIN_LENGTH', '50')))

# =============================================================================
# RETRY CONFIGURATION
# =============================================================================

@dataclass
class RetryConfig:
    """Retry and backoff settings per pipeline step."""
    transcript_max_retries: int = field(default_factory=lambda: int(os.getenv('RETRY_TRANSCRIPT_MAX', '3')))
    transcript_delay: float = field(default_factory=lambda: float(os.getenv('RETRY_TRANSCRIPT_DELAY', '1.0')))
    summary_max_retries: int = field(default_factory=lambda: int(os.getenv('RETRY_SUMMARY_MAX', '2')))
    summary_delay: float = field(default_factory=lambda: float(os.getenv('RETRY_SUMMARY_DELAY', '2.0')))
    metadata_max_retries: int = field(default_factory=lambda: int(os.getenv('RETRY_METADATA_MAX', '3')))
    metadata_delay: float = field(default_factory=lambda: float(os.getenv('RETRY_METADATA_DELAY', '1.0')))
    backoff_multiplier: float = field(default_factory=lambda: float(os.getenv('RETRY_BACKOFF_MULTIPLIER', '2.0')))
    max_delay: float = field(default_factory=lambda: float(os.getenv('RETRY_MAX_DELAY', '30.0')))

# =============================================================================
# CACHE CONFIGURATION
# =============================================================================

@dataclass
class CacheConfig:
    """Response cache settings."""
    ttl_seconds: int = field(default_factory=lambda: int(os.getenv('CACHE_TTL_SECONDS', '3600')))
    sweep_interval_seconds: float = field(default_factory=lambda: float(os.getenv('CACHE_SWEEP_INTERVAL', '300')))
    enable_cache: bool = field(default_factory=lambda: os.getenv('ENABLE_CACHE', 'true').lower() == 'true')

# =============================================================================
# MAIN CONFIGURATION CLASS
# =============================================================================

@dataclass
class Config:
    """Main configuration class that aggregates all configuration sections."""
    app: AppConfig = field(default_factory=AppConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    api: APIConfig = field(default_factory=APIConfig)
    transcript: TranscriptConfig = field(default_factory=TranscriptConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def _parse_list_env(env_var: str, default: List[str]) -> List[str]:
    """Parse a comma-separated environment variable into a list."""
    value = os.getenv(env_var)
    if value:
        return [item.strip() for item in value.split(',') if item.strip()]
    return list(default)

# =============================================================================
# GLOBAL CONFIGURATION INSTANCE
# =============================================================================

config = Config()

APP_VERSION = config.app.version

# =============================================================================
# CONFIGURATION VALIDATION
# =============================================================================

def validate_config(cfg: Optional[Config] = None) -> Tuple[bool, List[str]]:
    """
    Validate that required configuration variables are set.

    Returns:
        Tuple of (is_valid, missing_vars)
    """
    cfg = cfg or config
    missing_vars = []

    if not cfg.api.openai_api_key and not cfg.api.groq_api_key:
        missing_vars.append('At least one LLM API key (OPENAI_API_KEY or GROQ_API_KEY)')

    return len(missing_vars) == 0, missing_vars

def print_config_summary(cfg: Optional[Config] = None):
    """Print a summary of the current configuration."""
    cfg = cfg or config
    print("=== YouTube TLDR Configuration ===")
    print(f"App Version: {cfg.app.version}")
    print(f"Environment: {cfg.app.environment}")
    print(f"Debug: {cfg.app.debug}")
    print(f"Default Model: {cfg.llm.default_model}")
    print(f"Fallback Model: {cfg.llm.fallback_model}")
    print(f"Default Language: {cfg.transcript.default_language}")
    print(f"Cache TTL: {cfg.cache.ttl_seconds}s")
    print(f"OpenAI configured: {bool(cfg.api.openai_api_key)}")
    print(f"Groq configured: {bool(cfg.api.groq_api_key)}")
    print(f"YouTube Data API configured: {bool(cfg.api.youtube_api_key)}")
    print("=" * 34)
