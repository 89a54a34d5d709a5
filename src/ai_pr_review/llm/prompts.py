"""
Prompt Builder

Builds the system and user messages for the review model from the
category style, the changed file names and the chunked diff text.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import CategoryStyle, Model, PostingMode
from ..github.context import PullRequestTarget
from ..models.pr_diff import ChangedFile
from ..models.review import PromptBundle
from ..review.patterns import any_match


logger = logging.getLogger(__name__)

PREVIEW_PATCH_CHARS = 2000


@dataclass(frozen=True)
class AddonRule:
    """
    Named block of review guidance switched on by file names.

    A rule with neither extensions nor path globs applies to every run.
    """
    name: str
    text: str
    extensions: Tuple[str, ...] = field(default_factory=tuple)
    path_globs: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def always_on(self) -> bool:
        return not self.extensions and not self.path_globs

    def matches(self, filename: str) -> bool:
        lowered = filename.lower()
        if self.extensions and lowered.endswith(self.extensions):
            return True
        return bool(self.path_globs) and any_match(list(self.path_globs), filename)


# Priority order: general first, then ecosystem blocks
ADDON_RULES: Tuple[AddonRule, ...] = (
    AddonRule(
        name="general",
        text="""General engineering standards:
- Flag unclear names, dead code and duplicated logic.
- Call out missing error handling at I/O and network boundaries.
- Note new behavior that ships without tests.
- Point out secrets, credentials or personal data committed in code.""",
    ),
    AddonRule(
        name="python",
        text="""Python:
- Prefer context managers for files, locks and connections.
- Avoid mutable default arguments and bare `except:` clauses.
- Keep type hints consistent with the surrounding module.""",
        extensions=(".py", ".pyi"),
        path_globs=("**/requirements*.txt", "pyproject.toml", "**/pyproject.toml"),
    ),
    AddonRule(
        name="typescript",
        text="""TypeScript/JavaScript:
- Flag `any`, non-null assertions and unchecked casts.
- Check that promises are awaited or explicitly handled.
- Prefer `const` and strict equality.""",
        extensions=(".ts", ".js", ".mjs", ".cjs"),
        path_globs=("package.json", "**/package.json", "tsconfig*.json", "**/tsconfig*.json"),
    ),
    AddonRule(
        name="react",
        text="""React:
- Check hook dependency arrays and rules of hooks.
- Flag missing `key` props in rendered lists.
- Watch for state updates that cause needless re-renders.""",
        extensions=(".jsx", ".tsx"),
        path_globs=("**/components/**",),
    ),
    AddonRule(
        name="go",
        text="""Go:
- Errors must be checked or returned with context.
- Check goroutines for leaks and missing cancellation.
- Prefer small interfaces defined by the consumer.""",
        extensions=(".go",),
        path_globs=("go.mod", "**/go.mod"),
    ),
    AddonRule(
        name="jvm",
        text="""Java/Kotlin:
- Check null handling and Optional usage.
- Flag resources not closed with try-with-resources or `use`.
- Watch for blocking calls on request threads.""",
        extensions=(".java", ".kt", ".kts"),
        path_globs=("**/pom.xml", "pom.xml", "**/build.gradle*", "build.gradle*"),
    ),
    AddonRule(
        name="sql",
        text="""SQL & migrations:
- Migrations must be reversible or state why not.
- Flag locking operations on large tables and missing indexes.
- Check queries for injection through string concatenation.""",
        extensions=(".sql",),
        path_globs=("**/migrations/**", "migrations/**"),
    ),
    AddonRule(
        name="ci",
        text="""Containers & CI:
- Pin base images and third-party actions to a version or digest.
- Avoid running containers as root.
- Keep secrets out of build args, logs and layers.""",
        path_globs=(
            "Dockerfile",
            "**/Dockerfile",
            "**/*.dockerfile",
            "docker-compose*.yml",
            "**/docker-compose*.yml",
            ".github/workflows/*",
        ),
    ),
)


def select_addons(filenames: Iterable[str], rules: Sequence[AddonRule] = ADDON_RULES) -> List[AddonRule]:
    """
    Pick the addon rules that apply to a set of changed files.

    Args:
        filenames: Paths of the files under review
        rules: Candidate rules in priority order

    Returns:
        Matching rules, in the order given by ``rules``
    """
    names = [name for name in filenames if name]
    selected = [
        rule for rule in rules
        if rule.always_on or any(rule.matches(name) for name in names)
    ]
    logger.debug(f"Selected addons: {', '.join(rule.name for rule in selected)}")
    return selected


class PromptBuilder:
    """
    Builds the two chat messages for a review request.

    The category style only changes the wording; both styles produce the
    same five category labels.
    """

    def __init__(self, style: CategoryStyle = CategoryStyle.DEFAULT, enable_addons: bool = False):
        """
        Initialize prompt builder.

        Args:
            style: Category wording to use
            enable_addons: Append file-type specific guidance to the system prompt
        """
        self.style = style
        self.enable_addons = enable_addons
        self.templates = self._load_templates()

    def build_system_prompt(
        self,
        style: Optional[CategoryStyle] = None,
        addons: Optional[Sequence[AddonRule]] = None,
    ) -> str:
        """
        Build the system instruction.

        Args:
            style: Category style; defaults to the builder's style
            addons: Rule blocks appended after a blank line

        Returns:
            System prompt text
        """
        prompt = self.templates[style or self.style]
        if addons:
            addon_text = "\n\n".join(rule.text for rule in addons)
            prompt = f"{prompt}\n\n{addon_text}"
        return prompt

    def build_user_prompt(self, target: PullRequestTarget, patches: str) -> str:
        """Build the user message carrying the repository, PR number and diff text."""
        return (
            f"Repository: {target.owner}/{target.repo}\n"
            f"PR #{target.number}\n"
            f"Changed files and patches:\n{patches}\n"
        )

    def select_addons(self, filenames: Iterable[str]) -> List[AddonRule]:
        return select_addons(filenames)

    def build_bundle(
        self,
        target: PullRequestTarget,
        files: Sequence[ChangedFile],
        patches: str,
    ) -> PromptBundle:
        """
        Compose both messages for one run.

        Args:
            target: Pull request under review
            files: Filtered changed files, used for addon selection
            patches: Chunked diff text

        Returns:
            PromptBundle with system and user text
        """
        addons = self.select_addons(f.filename for f in files) if self.enable_addons else None
        bundle = PromptBundle(
            system_text=self.build_system_prompt(addons=addons),
            user_text=self.build_user_prompt(target, patches),
        )
        logger.debug(
            f"Prompt built: system {len(bundle.system_text)} chars, user {len(bundle.user_text)} chars"
        )
        return bundle

    def build_preview(
        self,
        target: PullRequestTarget,
        patches: str,
        model: Model,
        posting_mode: PostingMode,
    ) -> str:
        """Render the dry-run preview shown instead of calling the model."""
        return (
            f"DRY RUN: Preview review for {target.owner}/{target.repo} PR #{target.number}\n\n"
            f"System prompt style: {self.style.value}\n"
            f"Model: {model.value}\n"
            f"Posting mode: {posting_mode.value}\n\n"
            f"Included patches (truncated preview):\n{patches[:PREVIEW_PATCH_CHARS]}"
        )

    def _load_templates(self) -> dict:
        """Load system prompt templates per category style."""
        return {
            CategoryStyle.DEFAULT: """You are a senior reviewer. Provide feedback on a pull request.

Output format with emojis:
- 📋 Summary: one short paragraph
- 🔴 Must fix (blocking)
- 🟡 Should improve (important, not blocking)
- 🔵 Nice to have (advice, style, tests, performance)
- 🧾 Standards: note DRY, SIMPLE, SOLID adherence or violations

Rules:
- Be concise and actionable.
- Use bullet points for the content of each category but not for the category title.
- If no items in a category, write "None".
- Include code blocks only when they clarify a fix.""",

            CategoryStyle.STRICT: """You are a senior reviewer holding a pull request to a strict merge bar. Provide feedback on a pull request.

Output format with emojis:
- 📋 Summary: one short paragraph stating whether the change is ready to merge
- 🔴 Must fix (blocking): any bug, security issue, data loss risk, missing test for new behavior or broken contract
- 🟡 Should improve (important, not blocking): maintainability, naming, error handling and edge cases
- 🔵 Nice to have (advice, style, tests, performance)
- 🧾 Standards: state for each of DRY, SIMPLE, SOLID whether it is met or violated, with the location

Rules:
- Be concise and actionable.
- Use bullet points for the content of each category but not for the category title.
- When in doubt between two categories, choose the stricter one.
- If no items in a category, write "None".
- Include code blocks only when they clarify a fix.""",
        }
