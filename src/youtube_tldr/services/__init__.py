"""Service layer for the TLDR pipeline."""

from .analytics_service import AnalyticsService
from .summary_service import SummaryService, parse_llm_response, normalize_timestamp
from .tldr_service import TLDRService

__all__ = [
    "AnalyticsService",
    "SummaryService",
    "parse_llm_response",
    "normalize_timestamp",
    "TLDRService"
]
