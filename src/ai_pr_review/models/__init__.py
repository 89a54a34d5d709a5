"""
Data Models

Core data models of the AI PR review action
"""

from .pr_diff import ChangedFile, PullRequestFilePayload
from .review import (
    MODEL_FAILURE_MESSAGE,
    NO_DIFF_MESSAGE,
    NO_ISSUES_MESSAGE,
    PromptBundle,
    ResultKind,
    ReviewResult,
)

__all__ = [
    "ChangedFile",
    "PullRequestFilePayload",
    "PromptBundle",
    "ResultKind",
    "ReviewResult",
    "NO_DIFF_MESSAGE",
    "NO_ISSUES_MESSAGE",
    "MODEL_FAILURE_MESSAGE",
]
