"""
Review Delivery

Posting strategies for getting review text onto a pull request.
"""

from .github import (
    Poster,
    CommentPoster,
    ReviewPoster,
    DescriptionPoster,
    create_poster,
    upsert_review_section,
)

__all__ = [
    'Poster',
    'CommentPoster',
    'ReviewPoster',
    'DescriptionPoster',
    'create_poster',
    'upsert_review_section',
]
