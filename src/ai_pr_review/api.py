"""
Review Orchestrator

Runs one review end to end: fetch the changed files, select and budget
the diff, ask the model, and post the result.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import ActionConfig, normalize_budget
from .errors import ModelInvocationError
from .formatting.github import Poster, create_poster
from .github.client import GitHubClient
from .github.context import PullRequestTarget
from .llm.generator import ReviewGenerator
from .llm.prompts import PromptBuilder
from .models.review import ResultKind, ReviewResult
from .review.chunker import chunk_diffs
from .review.filters import filter_files


logger = logging.getLogger(__name__)


class RunState(Enum):
    """Stages of a review run."""
    INIT = "init"
    CONFIGURED = "configured"
    FILES_FETCHED = "files_fetched"
    NO_DIFF = "no_diff"
    PREPARED = "prepared"
    DRY_RUN_PREVIEW = "dry_run_preview"
    MODEL_INVOKED = "model_invoked"
    POSTED = "posted"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunOutcome:
    """Final state of a run and the text it produced."""
    state: RunState
    result: Optional[ReviewResult] = None
    failure_reason: Optional[str] = None
    transitions: List[RunState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE


class ReviewOrchestrator:
    """
    Drives a single pull request review.

    Flow:
    1. Fetch every changed file of the pull request
    2. Apply include/exclude globs and the character budget
    3. Short-circuit when no diff text remains
    4. Build the prompts, then preview (dry run) or call the model
    5. Post through the poster chosen for the posting mode
    """

    def __init__(
        self,
        config: ActionConfig,
        client: Optional[GitHubClient] = None,
        generator: Optional[ReviewGenerator] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Validated action settings
            client: GitHub client (built from config when omitted)
            generator: Review generator (built on first model call when omitted)
            prompt_builder: Prompt builder (built from config when omitted)
        """
        self.config = config
        self.client = client or GitHubClient(
            token=config.github.token,
            base_url=config.github.api_base_url,
            timeout=config.github.timeout_seconds,
        )
        self.generator = generator
        self.prompt_builder = prompt_builder or PromptBuilder(
            style=config.review.category_style,
            enable_addons=config.review.enable_addons,
        )

        self.state = RunState.INIT
        self._transitions: List[RunState] = [RunState.INIT]

    def _advance(self, state: RunState) -> None:
        logger.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state
        self._transitions.append(state)

    def _outcome(self, result: Optional[ReviewResult] = None, failure_reason: Optional[str] = None) -> RunOutcome:
        return RunOutcome(
            state=self.state,
            result=result,
            failure_reason=failure_reason,
            transitions=list(self._transitions),
        )

    def run(self, target: PullRequestTarget) -> RunOutcome:
        """
        Review one pull request.

        Model failures are recovered with a fixed message. Any other error
        ends the run in FAILED with its message as the failure reason, and
        nothing is posted after it.

        Args:
            target: Pull request to review

        Returns:
            RunOutcome describing the final state
        """
        review = self.config.review
        result: Optional[ReviewResult] = None
        self._advance(RunState.CONFIGURED)
        logger.info(f"Reviewing {target} (mode={review.posting_mode.value}, dry_run={review.dry_run})")

        try:
            poster = create_poster(review.posting_mode, self.client, target)

            files = self.client.get_pull_request_files(target.owner, target.repo, target.number)
            self._advance(RunState.FILES_FETCHED)

            filtered = filter_files(files, review.include_globs, review.exclude_globs, notify=logger.info)
            logger.info(f"Fetched {len(files)} files, {len(filtered)} matched filters for PR #{target.number}")

            budget = normalize_budget(review.max_chars, notify=logger.info)
            patches = chunk_diffs(filtered, budget)

            if not patches:
                self._advance(RunState.NO_DIFF)
                result = ReviewResult.no_diff()
                if review.dry_run:
                    logger.info("DRY RUN: would post 'no diff' result")
                else:
                    self._post(poster, result)
                    logger.info("Posted 'no diff' result.")
                self._advance(RunState.DONE)
                return self._outcome(result)

            bundle = self.prompt_builder.build_bundle(target, filtered, patches)
            self._advance(RunState.PREPARED)

            if review.dry_run:
                preview = self.prompt_builder.build_preview(
                    target, patches, self.config.openai.model, review.posting_mode
                )
                result = ReviewResult(body=preview, kind=ResultKind.PREVIEW)
                self._advance(RunState.DRY_RUN_PREVIEW)
                logger.info("DRY RUN: generated preview content (not posted). Use outputs.review_body to view.")
                logger.info(preview)
                self._advance(RunState.DONE)
                return self._outcome(result)

            generator = self._get_generator()
            try:
                result = ReviewResult(body=generator.generate(bundle))
            except ModelInvocationError as e:
                logger.warning(f"OpenAI call failed: {e}")
                result = ReviewResult.model_failed()
            self._advance(RunState.MODEL_INVOKED)

            self._post(poster, result)
            self._advance(RunState.DONE)
            return self._outcome(result)

        except Exception as e:
            logger.error(f"Review of {target} failed: {e}")
            self._advance(RunState.FAILED)
            return self._outcome(result, failure_reason=str(e))

    def _get_generator(self) -> ReviewGenerator:
        """Build the generator on first use; the OpenAI key is only needed here."""
        if self.generator is None:
            self.config.require_openai_key()
            self.generator = ReviewGenerator.from_config(self.config.openai)
        return self.generator

    def _post(self, poster: Poster, result: ReviewResult) -> None:
        poster.deliver(result.body)
        self._advance(RunState.POSTED)
