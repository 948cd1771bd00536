"""Data models for transcripts and acquisition attempts."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TranscriptSegment:
    """A time-bounded span of transcript text, offsets in seconds."""
    start: float
    end: float
    text: str

    @property
    def duration(self) -> float:
        """Segment length in seconds."""
        return self.end - self.start

    @property
    def timestamp_str(self) -> str:
        """Get formatted timestamp string."""
        minutes, seconds = divmod(int(self.start), 60)
        return f"{minutes:02d}:{seconds:02d}"

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "text": self.text}


@dataclass(frozen=True)
class TranscriptResult:
    """Joined transcript text plus the ordered segments it came from."""
    text: str = ""
    segments: Tuple[TranscriptSegment, ...] = field(default_factory=tuple)
    failure_reason: Optional[str] = None
    source: Optional[str] = None

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    def with_source(self, source: str) -> "TranscriptResult":
        """Copy of this result tagged with the strategy that produced it."""
        return TranscriptResult(
            text=self.text,
            segments=self.segments,
            failure_reason=self.failure_reason,
            source=source
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "segments": [seg.to_dict() for seg in self.segments],
            "failure_reason": self.failure_reason,
            "source": self.source,
        }


class AttemptOutcome(Enum):
    """Outcome of one strategy attempt."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class AcquisitionAttempt:
    """Tagged result of running one acquisition strategy."""
    strategy_index: int
    strategy: str
    outcome: AttemptOutcome
    error_detail: Optional[str] = None
    result: Optional[TranscriptResult] = None
    elapsed_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS

    @classmethod
    def success(cls, index: int, strategy: str, result: TranscriptResult, elapsed_ms: int = 0) -> "AcquisitionAttempt":
        return cls(index, strategy, AttemptOutcome.SUCCESS, result=result, elapsed_ms=elapsed_ms)

    @classmethod
    def failure(cls, index: int, strategy: str, error_detail: str, elapsed_ms: int = 0) -> "AcquisitionAttempt":
        return cls(index, strategy, AttemptOutcome.FAILURE, error_detail=error_detail, elapsed_ms=elapsed_ms)
