"""
File Filter

Applies the include/exclude glob inputs to a pull request's changed files.
"""

import logging
from typing import Callable, List, Optional, Sequence

from ..models.pr_diff import ChangedFile
from .patterns import any_match, split_patterns


logger = logging.getLogger(__name__)


def filter_files(
    files: Sequence[ChangedFile],
    include_raw: Optional[str] = None,
    exclude_raw: Optional[str] = None,
    notify: Optional[Callable[[str], None]] = None,
) -> List[ChangedFile]:
    """
    Select the reviewable subset of changed files.

    Exclude patterns always win. Without include patterns every file that
    is not excluded is kept; with them, only files matching at least one.

    Args:
        files: Changed files in listing order
        include_raw: Comma-separated include globs
        exclude_raw: Comma-separated exclude globs
        notify: Optional sink for a one-line summary

    Returns:
        Matching files, in input order
    """
    include = split_patterns(include_raw)
    exclude = split_patterns(exclude_raw)

    selected = []
    for changed_file in files or []:
        name = (changed_file.filename if changed_file else "") or ""

        if exclude and any_match(exclude, name):
            logger.debug(f"Excluded {name}")
            continue

        if include and not any_match(include, name):
            logger.debug(f"Not included: {name}")
            continue

        selected.append(changed_file)

    if notify:
        notify(f"{len(selected)} of {len(files or [])} files matched filters")

    return selected
