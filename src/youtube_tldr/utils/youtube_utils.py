"""Utility functions for working with YouTube URLs and video identifiers."""

import re
from typing import Any
from urllib.parse import urlparse, parse_qs

from ..exceptions import InvalidIdentifier
from .logging import get_logger

logger = get_logger("youtube_utils")

VIDEO_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{11}")

SHORT_HOSTS = {"youtu.be", "www.youtu.be"}
CANONICAL_HOST = "youtube.com"


def validate_video_id(video_id: Any) -> str:
    """
    Check a value against the canonical video identifier pattern.

    Args:
        video_id: Candidate identifier

    Returns:
        The identifier unchanged

    Raises:
        InvalidIdentifier: If the value is not an 11 character identifier
    """
    if not isinstance(video_id, str) or not VIDEO_ID_PATTERN.fullmatch(video_id):
        raise InvalidIdentifier(f"Invalid video identifier: {video_id!r}")
    return video_id


def _is_canonical_host(host: str) -> bool:
    return host == CANONICAL_HOST or host.endswith("." + CANONICAL_HOST)


def extract_video_id(url: Any) -> str:
    """
    Extract the video ID from a YouTube URL.

    Supports the short form ``https://youtu.be/<id>`` and the canonical form
    ``https://www.youtube.com/watch?v=<id>`` (any youtube.com subdomain).

    Args:
        url: YouTube URL

    Returns:
        Video ID

    Raises:
        InvalidIdentifier: For other hosts, malformed URLs or missing IDs
    """
    if not isinstance(url, str) or not url:
        raise InvalidIdentifier("Invalid YouTube URL format")

    try:
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
    except ValueError as e:
        raise InvalidIdentifier(f"Malformed URL: {e}") from e

    if host in SHORT_HOSTS:
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif _is_canonical_host(host):
        values = parse_qs(parsed.query).get("v")
        if not values:
            raise InvalidIdentifier("YouTube URL has no 'v' parameter")
        candidate = values[0]
    else:
        logger.debug(f"Rejected URL with unsupported host: {host or '<none>'}")
        raise InvalidIdentifier("Invalid YouTube URL format")

    return validate_video_id(candidate)


def is_valid_youtube_url(url: Any) -> bool:
    """Return True if a video ID can be extracted from ``url``."""
    try:
        extract_video_id(url)
        return True
    except InvalidIdentifier:
        return False
