"""
GitHub Integration Layer

REST access to pull requests plus the Actions runtime glue
(inputs, outputs, event context).
"""

from .client import GitHubClient
from .context import PullRequestTarget, resolve_target
from .actions import get_input, set_output, set_failed

__all__ = [
    'GitHubClient',
    'PullRequestTarget',
    'resolve_target',
    'get_input',
    'set_output',
    'set_failed',
]
