"""
Review Data Models

Prompt and result objects produced during a single review run.
"""

from dataclasses import dataclass
from enum import Enum


NO_DIFF_MESSAGE = "No diff content to review."
NO_ISSUES_MESSAGE = "No issues found."
MODEL_FAILURE_MESSAGE = "The AI review failed to run. Please check action logs."


class ResultKind(Enum):
    """Where the final review text came from."""
    REVIEW = "review"
    NO_DIFF = "no_diff"
    PREVIEW = "preview"
    MODEL_FAILED = "model_failed"


@dataclass(frozen=True)
class PromptBundle:
    """System and user messages sent to the chat model."""
    system_text: str
    user_text: str


@dataclass
class ReviewResult:
    """Text delivered to the pull request, exactly once per run."""
    body: str
    kind: ResultKind = ResultKind.REVIEW

    def __post_init__(self):
        if not isinstance(self.kind, ResultKind):
            raise ValueError(f"Invalid result kind: {self.kind}")

    @property
    def is_postable(self) -> bool:
        """Previews are only logged, never posted."""
        return self.kind is not ResultKind.PREVIEW

    @classmethod
    def no_diff(cls) -> "ReviewResult":
        return cls(body=NO_DIFF_MESSAGE, kind=ResultKind.NO_DIFF)

    @classmethod
    def model_failed(cls) -> "ReviewResult":
        return cls(body=MODEL_FAILURE_MESSAGE, kind=ResultKind.MODEL_FAILED)
