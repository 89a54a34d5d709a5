"""
Diff Selection

Glob filtering and budgeted concatenation of pull request patches.
"""

from .patterns import split_patterns, compile_glob, any_match
from .filters import filter_files
from .chunker import chunk_diffs, format_file_record

__all__ = [
    'split_patterns',
    'compile_glob',
    'any_match',
    'filter_files',
    'chunk_diffs',
    'format_file_record',
]
