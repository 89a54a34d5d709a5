"""
AI PR Review

GitHub Action that reviews pull request diffs with an OpenAI chat model
"""

__version__ = "1.0.0"

from .api import ReviewOrchestrator, RunOutcome, RunState

__all__ = ["ReviewOrchestrator", "RunOutcome", "RunState"]
