"""Data models for YouTube TLDR."""

from .transcript import TranscriptSegment, TranscriptResult, AcquisitionAttempt, AttemptOutcome
from .summary import Chapter, SummaryResult
from .api_log import ApiLogRecord
from .video import VideoMetadata
from .payloads import (
    BuildRequest,
    BuildResponse,
    ErrorPayload,
    ChapterModel,
    AttemptReport,
    TranscriptTestReport
)

__all__ = [
    "TranscriptSegment",
    "TranscriptResult",
    "AcquisitionAttempt",
    "AttemptOutcome",
    "Chapter",
    "SummaryResult",
    "ApiLogRecord",
    "VideoMetadata",
    "BuildRequest",
    "BuildResponse",
    "ErrorPayload",
    "ChapterModel",
    "AttemptReport",
    "TranscriptTestReport"
]
