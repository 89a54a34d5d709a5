"""
Diff Chunker

Concatenates per-file patches into a single digest bounded by a
character budget.
"""

import logging
from typing import Iterable, List

from ..models.pr_diff import ChangedFile


logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "\n"


def format_file_record(changed_file: ChangedFile) -> str:
    """Render the marker, header and patch for one file."""
    return f"\n---\nFile: {changed_file.filename}\n{changed_file.patch}"


def chunk_diffs(files: Iterable[ChangedFile], budget: int) -> str:
    """
    Build the diff digest for the model prompt.

    Files without a patch are skipped. Records are appended in order
    until the next one would push the digest past ``budget``; that
    record and everything after it is dropped, never truncated.

    Args:
        files: Filtered changed files
        budget: Maximum length of the returned text

    Returns:
        Records joined by newlines, or an empty string if none fit
    """
    records: List[str] = []
    used = 0

    for changed_file in files or []:
        if not changed_file or not changed_file.has_patch:
            continue

        record = format_file_record(changed_file)
        cost = len(record) + (len(RECORD_SEPARATOR) if records else 0)

        if used + cost > budget:
            logger.info(f"Diff budget of {budget} chars reached at {changed_file.filename}; remaining files dropped")
            break

        records.append(record)
        used += cost

    return RECORD_SEPARATOR.join(records)
