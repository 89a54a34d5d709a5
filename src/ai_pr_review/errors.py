"""
Errors

Exception hierarchy shared by the review pipeline.
"""

from typing import Dict, Optional


class ReviewError(Exception):
    """Base class for errors raised by the review action."""


class ConfigError(ReviewError):
    """Invalid or missing configuration input."""


class GitHubAPIError(ReviewError):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class ModelInvocationError(ReviewError):
    """The chat completion call failed or returned something unusable."""


class PostingError(ReviewError):
    """The review could not be dispatched to a posting target."""
