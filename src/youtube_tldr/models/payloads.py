"""Request and response models exchanged with collaborators."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.config import config
from .summary import Chapter


class BuildRequest(BaseModel):
    """Request to build a TLDR and chapter list for a video."""

    url: str = Field(..., description="YouTube video URL")
    language: str = Field(
        default_factory=lambda: config.transcript.default_language,
        description="Preferred transcript and summary language"
    )
    model: str = Field(
        default_factory=lambda: config.llm.default_model,
        description="LLM model for the primary provider"
    )
    bypass_cache: bool = Field(default=False, description="Skip the cache lookup")

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        """Reject blank URLs; the value reaches the resolver unchanged."""
        if not v or not v.strip():
            raise ValueError("URL is required")
        return v

    @field_validator("language", "model")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class ChapterModel(BaseModel):
    """Chapter model."""

    time: str
    title: str

    @classmethod
    def from_chapter(cls, chapter: Chapter) -> "ChapterModel":
        return cls(time=chapter.time, title=chapter.title)


class BuildResponse(BaseModel):
    """Successful build payload."""

    success: bool = True
    identifier: str
    title: Optional[str] = None
    tldr: str
    chapters: List[ChapterModel] = Field(default_factory=list)
    model: str
    transcript_length: int
    cached: bool = False
    processed_at: datetime = Field(default_factory=datetime.now)
    response_time_ms: int = 0


class ErrorPayload(BaseModel):
    """Structured failure payload. Carries no stack or internal detail."""

    success: bool = False
    identifier: Optional[str] = None
    error_kind: str
    error_message: str
    response_time_ms: int = 0


class AttemptReport(BaseModel):
    """One strategy attempt as reported by the transcript tester."""

    strategy: str
    status: str
    message: str
    transcript_length: int = 0


class TranscriptTestReport(BaseModel):
    """Per-strategy report for a transcript acquisition dry run."""

    identifier: Optional[str] = None
    title: Optional[str] = None
    attempts: List[AttemptReport] = Field(default_factory=list)
    final_source: Optional[str] = None
    transcript_length: int = 0
    error: Optional[str] = None
