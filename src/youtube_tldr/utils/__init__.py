"""
Utility modules for the YouTube TLDR service.
"""

from .logging import setup_logger, get_logger
from .retry import RetryOptions, retry_operation, retry_with_condition
from .youtube_utils import extract_video_id, validate_video_id, is_valid_youtube_url

__all__ = [
    'setup_logger',
    'get_logger',
    'RetryOptions',
    'retry_operation',
    'retry_with_condition',
    'extract_video_id',
    'validate_video_id',
    'is_valid_youtube_url'
]
