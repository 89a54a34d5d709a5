"""
GitHub Review Posters

Delivers the review text to a pull request as a comment, a review, or
a marked section of the PR description.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..config import PostingMode
from ..errors import PostingError
from ..github.client import GitHubClient
from ..github.context import PullRequestTarget


logger = logging.getLogger(__name__)

SECTION_START = "<!-- ai-pr-review: start -->"
SECTION_END = "<!-- ai-pr-review: end -->"
SECTION_HEADING = "## 🤖 AI Review"

_SECTION_PATTERN = re.compile(
    f"{re.escape(SECTION_START)}.*?{re.escape(SECTION_END)}",
    re.DOTALL,
)


def render_review_section(body: str) -> str:
    """Wrap the review text in the description markers."""
    return f"{SECTION_START}\n\n{SECTION_HEADING}\n\n{body}\n\n{SECTION_END}"


def upsert_review_section(description: Optional[str], body: str) -> str:
    """
    Insert or replace the review section of a PR description.

    If both markers are present, the first start...end span is replaced.
    Otherwise the section is appended after a blank line.

    Args:
        description: Current PR description (may be None)
        body: Review text

    Returns:
        New description text
    """
    old = description or ""
    section = render_review_section(body)

    if SECTION_START in old and SECTION_END in old:
        # lambda keeps backslashes in the body literal
        return _SECTION_PATTERN.sub(lambda _match: section, old, count=1)

    return f"{old}\n\n{section}".strip()


class Poster(ABC):
    """Delivers a review body to one pull request."""

    mode: PostingMode

    def __init__(self, client: GitHubClient, target: PullRequestTarget):
        self.client = client
        self.target = target

    @abstractmethod
    def deliver(self, body: str) -> Dict[str, Any]:
        """Post the body and return the API response."""


class CommentPoster(Poster):
    """Posts the review as an issue comment."""

    mode = PostingMode.COMMENT

    def deliver(self, body: str) -> Dict[str, Any]:
        result = self.client.create_issue_comment(
            self.target.owner, self.target.repo, self.target.number, body
        )
        logger.info(f"Posted review comment on {self.target}")
        return result


class ReviewPoster(Poster):
    """Submits the review as a non-blocking pull request review."""

    mode = PostingMode.REVIEW

    def deliver(self, body: str) -> Dict[str, Any]:
        result = self.client.create_review(
            self.target.owner, self.target.repo, self.target.number, body, event="COMMENT"
        )
        logger.info(f"Submitted review on {self.target}")
        return result


class DescriptionPoster(Poster):
    """Keeps the review in a marked section of the PR description."""

    mode = PostingMode.PR_DESCRIPTION

    def deliver(self, body: str) -> Dict[str, Any]:
        pull_request = self.client.get_pull_request(
            self.target.owner, self.target.repo, self.target.number
        )
        new_description = upsert_review_section(pull_request.get("body"), body)
        result = self.client.update_pull_request(
            self.target.owner, self.target.repo, self.target.number, body=new_description
        )
        logger.info(f"Updated PR description on {self.target}")
        return result


_POSTERS = {
    PostingMode.COMMENT: CommentPoster,
    PostingMode.REVIEW: ReviewPoster,
    PostingMode.PR_DESCRIPTION: DescriptionPoster,
}


def create_poster(mode: Any, client: GitHubClient, target: PullRequestTarget) -> Poster:
    """
    Pick the poster for a posting mode.

    Args:
        mode: PostingMode, or its string value
        client: GitHub client used for delivery
        target: Pull request to post to

    Raises:
        PostingError: For an unknown mode
    """
    if not isinstance(mode, PostingMode):
        mode = next((m for m in PostingMode if m.value == mode), mode)

    poster_cls = _POSTERS.get(mode)
    if poster_cls is None:
        raise PostingError(f"Unsupported posting_mode: {getattr(mode, 'value', mode)}")

    return poster_cls(client, target)
