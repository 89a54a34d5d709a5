#!/usr/bin/env python3
"""
Local Review Demo

Runs a dry-run review of a pull request from your machine and prints
the preview that the action would publish as ``review_body``.

Usage:
    python examples/local_review_demo.py <owner> <repo> <pr_number> [config.yml]

Example:
    GITHUB_TOKEN=ghp_... python examples/local_review_demo.py octo widgets 42
"""

import sys
import os
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from ai_pr_review.api import ReviewOrchestrator, RunState
from ai_pr_review.config import ActionConfig
from ai_pr_review.errors import ConfigError
from ai_pr_review.github.context import PullRequestTarget


def main():
    """Main demo function."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if len(sys.argv) not in (4, 5):
        print("Usage: python local_review_demo.py <owner> <repo> <pr_number> [config.yml]")
        sys.exit(1)

    owner, repo, pr_number = sys.argv[1], sys.argv[2], int(sys.argv[3])

    # Never post from a local run
    local_inputs = {"dry_run": "true"}

    try:
        if len(sys.argv) == 5:
            config = ActionConfig.from_yaml(sys.argv[4], overrides=local_inputs)
        else:
            config = ActionConfig.from_inputs(local_inputs)
    except ConfigError as e:
        print(f"❌ Configuration error: {e}")
        sys.exit(1)

    print(f"🔍 Dry-run review of {owner}/{repo}#{pr_number}")
    outcome = ReviewOrchestrator(config).run(PullRequestTarget(owner, repo, pr_number))

    if outcome.state is RunState.FAILED:
        print(f"❌ Review failed: {outcome.failure_reason}")
        sys.exit(1)

    print("=" * 60)
    print(outcome.result.body)


if __name__ == "__main__":
    main()
