"""
YouTube TLDR Package

Fetches a transcript for a YouTube video through several fallback strategies
and turns it into a short summary with timestamped chapters.
"""

__version__ = "0.1.0"

from .utils.logging import get_logger
from .exceptions import (
    TLDRError,
    InvalidIdentifier,
    EmptyTranscript,
    StrategyExhausted,
    ProviderTransientFailure,
    ProviderNotConfigured,
    AllProvidersFailed,
    AnalyticsFailure
)

__all__ = [
    'get_logger',
    'TLDRError',
    'InvalidIdentifier',
    'EmptyTranscript',
    'StrategyExhausted',
    'ProviderTransientFailure',
    'ProviderNotConfigured',
    'AllProvidersFailed',
    'AnalyticsFailure'
]

# Set up package-level logger
logger = get_logger(__name__)
