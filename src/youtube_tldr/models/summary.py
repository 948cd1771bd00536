"""Data models for summaries and chapters."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Chapter:
    """A chapter marker: normalized ``MM:SS``/``HH:MM:SS`` time and a title."""
    time: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return {"time": self.time, "title": self.title}


@dataclass(frozen=True)
class SummaryResult:
    """TLDR text and the ordered chapter list derived from a transcript."""
    tldr: str
    chapters: Tuple[Chapter, ...] = field(default_factory=tuple)
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tldr": self.tldr,
            "chapters": [chapter.to_dict() for chapter in self.chapters],
        }
