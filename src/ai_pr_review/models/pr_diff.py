"""
PR Diff Data Models

Changed-file records fetched from the pull request file listing.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from pydantic import BaseModel, field_validator


@dataclass(frozen=True)
class ChangedFile:
    """One entry of a pull request's changed-file listing."""
    filename: str
    patch: Optional[str] = None
    status: str = "modified"
    additions: int = 0
    deletions: int = 0

    @property
    def has_patch(self) -> bool:
        """Binary and rename-only changes come without a textual diff."""
        return bool(self.patch)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ChangedFile":
        """Build from a raw ``/pulls/{n}/files`` record."""
        return PullRequestFilePayload(**data).to_changed_file()


# Pydantic model for validating GitHub API payloads
class PullRequestFilePayload(BaseModel):
    """API response model for a pull request file record"""
    filename: str = ""
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: Optional[str] = None

    model_config = {"extra": "ignore"}

    @field_validator('filename', mode='before')
    @classmethod
    def validate_filename(cls, v):
        return v or ""

    @field_validator('additions', 'deletions', 'changes')
    @classmethod
    def validate_counts(cls, v):
        if v < 0:
            raise ValueError('Counts must be non-negative')
        return v

    def to_changed_file(self) -> ChangedFile:
        return ChangedFile(
            filename=self.filename,
            patch=self.patch,
            status=self.status,
            additions=self.additions,
            deletions=self.deletions,
        )
