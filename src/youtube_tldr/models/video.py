"""Video metadata model."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VideoMetadata:
    """Video information data class."""
    video_id: str
    title: str
    description: str = ""
    duration: Optional[str] = None  # ISO 8601, e.g. PT4M13S
