"""
Workflow Context

Works out which repository and pull request a run is about.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PullRequestTarget:
    """Repository coordinates plus pull request number"""
    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.number}"


def load_event_payload(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read the triggering event's JSON payload, or an empty dict."""
    env = os.environ if environ is None else environ
    event_path = env.get("GITHUB_EVENT_PATH")
    if not event_path or not Path(event_path).exists():
        return {}

    with open(event_path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Could not parse event payload at {event_path}: {e}")
            return {}

    return payload if isinstance(payload, dict) else {}


def _parse_number(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def resolve_target(
    pr_number_input: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> Optional[PullRequestTarget]:
    """
    Identify the pull request to review.

    The event payload's ``pull_request.number`` wins; the ``pr_number``
    input is the fallback for manually dispatched runs.

    Args:
        pr_number_input: Raw ``pr_number`` input
        environ: Environment to read (defaults to os.environ)
        payload: Event payload; loaded from GITHUB_EVENT_PATH when omitted

    Returns:
        The target, or None when there is no pull request to review

    Raises:
        ConfigError: If GITHUB_REPOSITORY is missing or malformed
    """
    env = os.environ if environ is None else environ
    repository = env.get("GITHUB_REPOSITORY", "")
    owner, _, repo = repository.partition("/")
    if not owner or not repo:
        raise ConfigError(f"GITHUB_REPOSITORY must look like 'owner/repo', got '{repository}'")

    if payload is None:
        payload = load_event_payload(env)

    pull_request = payload.get("pull_request") or {}
    number = _parse_number(pull_request.get("number")) if isinstance(pull_request, dict) else None

    if number is None and pr_number_input:
        number = _parse_number(pr_number_input)
        if number is None:
            logger.warning(f"Ignoring pr_number input that is not a positive integer: {pr_number_input}")

    if number is None:
        return None

    return PullRequestTarget(owner=owner, repo=repo, number=number)
