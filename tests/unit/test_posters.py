"""
Unit tests for review posting strategies and the PR description upsert.
"""

import pytest
from unittest.mock import Mock

from ai_pr_review.config import PostingMode
from ai_pr_review.errors import PostingError
from ai_pr_review.formatting.github import (
    SECTION_END,
    SECTION_START,
    CommentPoster,
    DescriptionPoster,
    ReviewPoster,
    create_poster,
    render_review_section,
    upsert_review_section,
)
from ai_pr_review.github.context import PullRequestTarget


TARGET = PullRequestTarget("octo", "widgets", 5)


class TestUpsertReviewSection:
    """Unit tests for upsert_review_section."""

    def test_section_layout(self):
        """Test the marked section format."""
        assert render_review_section("Body") == (
            "<!-- ai-pr-review: start -->\n\n## 🤖 AI Review\n\nBody\n\n<!-- ai-pr-review: end -->"
        )

    @pytest.mark.parametrize("description", [None, "", "   "])
    def test_empty_description(self, description):
        """Test upsert into an empty description."""
        assert upsert_review_section(description, "Body") == render_review_section("Body")

    def test_appends_to_existing_description(self):
        """Test appending after the author's text."""
        result = upsert_review_section("Fixes #12", "Body")

        assert result == "Fixes #12\n\n" + render_review_section("Body")

    def test_replaces_existing_section(self):
        """Test that a previous review is replaced in place."""
        description = "Intro\n\n" + render_review_section("old review") + "\n\nFooter"

        result = upsert_review_section(description, "new review")

        assert result == "Intro\n\n" + render_review_section("new review") + "\n\nFooter"
        assert "old review" not in result

    def test_idempotent(self):
        """Test that repeating the upsert keeps exactly one section."""
        once = upsert_review_section("Intro", "Body")
        twice = upsert_review_section(once, "Body")

        assert twice == once
        assert twice.count(SECTION_START) == 1
        assert twice.count(SECTION_END) == 1

    def test_only_first_section_replaced(self):
        """Test a description that already holds two sections."""
        description = render_review_section("one") + "\n" + render_review_section("two")

        result = upsert_review_section(description, "new")

        assert result == render_review_section("new") + "\n" + render_review_section("two")

    def test_single_marker_appends(self):
        """Test that a lone start marker is not treated as a section."""
        description = f"Intro {SECTION_START} dangling"

        result = upsert_review_section(description, "Body")

        assert result == description + "\n\n" + render_review_section("Body")

    def test_body_backslashes_preserved(self):
        """Test that replacement text is inserted literally."""
        description = render_review_section("old")

        result = upsert_review_section(description, r"Use C:\temp\1 and \g<0>")

        assert r"Use C:\temp\1 and \g<0>" in result


class TestPosters:
    """Unit tests for poster selection and delivery."""

    @pytest.mark.parametrize("mode,poster_cls", [
        (PostingMode.COMMENT, CommentPoster),
        (PostingMode.REVIEW, ReviewPoster),
        (PostingMode.PR_DESCRIPTION, DescriptionPoster),
        ("review", ReviewPoster),
    ])
    def test_create_poster(self, mode, poster_cls):
        """Test strategy selection per posting mode."""
        poster = create_poster(mode, Mock(), TARGET)

        assert isinstance(poster, poster_cls)
        assert poster.target == TARGET

    def test_create_poster_unsupported(self):
        """Test rejection of unknown modes."""
        with pytest.raises(PostingError, match="Unsupported posting_mode: slack"):
            create_poster("slack", Mock(), TARGET)

    def test_comment_poster(self):
        """Test delivery as an issue comment."""
        client = Mock()
        client.create_issue_comment.return_value = {"id": 1}

        assert CommentPoster(client, TARGET).deliver("Body") == {"id": 1}
        client.create_issue_comment.assert_called_once_with("octo", "widgets", 5, "Body")

    def test_review_poster(self):
        """Test delivery as a neutral review."""
        client = Mock()

        ReviewPoster(client, TARGET).deliver("Body")

        client.create_review.assert_called_once_with("octo", "widgets", 5, "Body", event="COMMENT")

    def test_description_poster(self):
        """Test read-modify-write of the PR description."""
        client = Mock()
        client.get_pull_request.return_value = {"number": 5, "body": "Fixes #12"}

        DescriptionPoster(client, TARGET).deliver("Body")

        client.get_pull_request.assert_called_once_with("octo", "widgets", 5)
        client.update_pull_request.assert_called_once_with(
            "octo", "widgets", 5, body="Fixes #12\n\n" + render_review_section("Body")
        )

    def test_description_poster_null_body(self):
        """Test a pull request whose description was never set."""
        client = Mock()
        client.get_pull_request.return_value = {"number": 5, "body": None}

        DescriptionPoster(client, TARGET).deliver("Body")

        client.update_pull_request.assert_called_once_with(
            "octo", "widgets", 5, body=render_review_section("Body")
        )
