"""
Action Entry Point

Loads the action inputs, resolves the pull request and runs the review.
"""

import logging
import sys
from typing import Mapping, Optional

from .api import ReviewOrchestrator, RunOutcome, RunState
from .config import ActionConfig, LoggingConfig, setup_logging
from .errors import ReviewError
from .github.actions import set_failed, set_output
from .github.context import resolve_target


logger = logging.getLogger(__name__)

OUTPUT_NAME = "review_body"


def run_action(environ: Optional[Mapping[str, str]] = None) -> RunOutcome:
    """
    Run one review as a GitHub Action step.

    Args:
        environ: Environment to read (defaults to os.environ)

    Returns:
        RunOutcome; FAILED outcomes carry the reason to report
    """
    try:
        config = ActionConfig.from_env(environ)
        target = resolve_target(config.review.pr_number, environ)
    except ReviewError as e:
        return RunOutcome(state=RunState.FAILED, failure_reason=str(e), transitions=[RunState.INIT, RunState.FAILED])

    logger.debug(f"Configuration: {config.to_dict()}")

    if target is None:
        logger.info("No pull_request in context and no pr_number input provided, skipping.")
        return RunOutcome(state=RunState.DONE, transitions=[RunState.INIT, RunState.CONFIGURED, RunState.DONE])

    outcome = ReviewOrchestrator(config).run(target)

    if outcome.succeeded and outcome.result is not None:
        set_output(OUTPUT_NAME, outcome.result.body, environ)

    return outcome


def main() -> int:
    """Console entry point; returns the process exit status."""
    try:
        setup_logging(LoggingConfig.from_env())
        outcome = run_action()
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        set_failed(str(e))
        return 1

    if outcome.state is RunState.FAILED:
        set_failed(outcome.failure_reason or "Review failed")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
