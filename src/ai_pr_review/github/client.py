"""
GitHub API Client

Handles GitHub API authentication, rate limit tracking, and communication.
Provides the pull request reads and writes a review run needs.
"""

import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
import requests

from ..errors import GitHubAPIError
from ..models.pr_diff import ChangedFile


logger = logging.getLogger(__name__)

RATE_LIMIT_WARNING_THRESHOLD = 10


class GitHubClient:
    """
    GitHub REST client for a single review run.

    Provides methods for:
    - Pull request and changed file retrieval
    - Issue comments, reviews and description updates
    - Rate limit bookkeeping from response headers

    Requests are not retried; a failed call raises GitHubAPIError.
    """

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: int = 30):
        """
        Initialize GitHub client.

        Args:
            token: GitHub token with pull request write access
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()
        self.rate_limit_remaining: Optional[int] = None
        self.rate_limit_reset: Optional[datetime] = None

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication headers."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f'Bearer {self.token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
            'User-Agent': 'ai-pr-review-action/1.0'
        })
        return session

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            self.rate_limit_reset = datetime.fromtimestamp(int(response.headers['X-RateLimit-Reset']))

        if self.rate_limit_remaining is not None and self.rate_limit_remaining <= RATE_LIMIT_WARNING_THRESHOLD:
            logger.warning(
                f"GitHub rate limit low ({self.rate_limit_remaining} left, resets at {self.rate_limit_reset})"
            )

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For transport failures and non-2xx responses
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {'message': response.text}
            if not isinstance(error_data, dict):
                error_data = {'message': str(error_data)}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict[str, Any]:
        """
        Get pull request information.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Pull request data
        """
        logger.info(f"Fetching PR {owner}/{repo}#{pr_number}")

        response = self._make_request('GET', f'/repos/{owner}/{repo}/pulls/{pr_number}')
        return response.json()

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[ChangedFile]:
        """
        Get every file changed in a pull request.

        Walks all pages of the listing before returning.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Changed files in listing order
        """
        logger.info(f"Fetching PR files for {owner}/{repo}#{pr_number}")

        files: List[ChangedFile] = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'/repos/{owner}/{repo}/pulls/{pr_number}/files',
                params={'page': page, 'per_page': per_page}
            )

            page_files = response.json()
            if not page_files:
                break

            files.extend(ChangedFile.from_api(item) for item in page_files)

            if len(page_files) < per_page:
                break

            page += 1

        logger.info(f"Found {len(files)} changed files")
        return files

    def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Dict[str, Any]:
        """Post a comment on the pull request's conversation tab."""
        logger.info(f"Posting comment on {owner}/{repo}#{issue_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{issue_number}/comments',
            json={'body': body}
        )
        return response.json()

    def create_review(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        body: str,
        event: str = "COMMENT",
    ) -> Dict[str, Any]:
        """Submit a pull request review."""
        logger.info(f"Submitting {event} review on {owner}/{repo}#{pr_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/pulls/{pr_number}/reviews',
            json={'body': body, 'event': event}
        )
        return response.json()

    def update_pull_request(self, owner: str, repo: str, pr_number: int, **fields) -> Dict[str, Any]:
        """
        Update pull request fields such as ``body`` or ``title``.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            **fields: Fields to patch

        Returns:
            Updated pull request data
        """
        logger.info(f"Updating PR {owner}/{repo}#{pr_number} ({', '.join(sorted(fields))})")

        response = self._make_request(
            'PATCH',
            f'/repos/{owner}/{repo}/pulls/{pr_number}',
            json=fields
        )
        return response.json()
