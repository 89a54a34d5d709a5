"""
Pattern Matcher

Compiles the comma-separated glob strings accepted by the action
into anchored regular expressions over repository paths.

The dialect:

- literal characters match themselves
- ``*`` matches any run of characters except ``/``
- ``**`` matches any run of characters, ``/`` included
- everything else that regex treats specially is escaped, ``?`` included

There is no brace expansion and no character classes, so ``**/*.{js,ts}``
only matches a file literally named ``*.{js,ts}``. Supply
``**/*.js,**/*.ts`` instead.
"""

import re
import logging
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern


logger = logging.getLogger(__name__)

# Regex metacharacters escaped before wildcard substitution. ``*`` is left
# alone because it is glob syntax; ``?`` is a literal.
_SPECIAL_CHARS = re.compile(r"[.+?^${}()|\[\]\\]")
_DOUBLE_STAR_TOKEN = "\x00DOUBLE_STAR\x00"


def split_patterns(raw: Optional[str]) -> List[str]:
    """
    Split a raw comma-separated pattern string.

    Args:
        raw: Input such as ``"src/**/*.py, docs/*.md"``

    Returns:
        Trimmed, non-empty patterns in input order
    """
    if not raw:
        return []

    return [part.strip() for part in str(raw).split(",") if part.strip()]


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> Pattern[str]:
    """
    Translate a glob into an anchored regular expression.

    Args:
        pattern: Glob in the restricted dialect described above

    Returns:
        Compiled pattern that must match the whole path
    """
    escaped = _SPECIAL_CHARS.sub(lambda m: "\\" + m.group(0), pattern)
    translated = (
        escaped.replace("**", _DOUBLE_STAR_TOKEN)
        .replace("*", "[^/]*")
        .replace(_DOUBLE_STAR_TOKEN, ".*")
    )

    logger.debug(f"Compiled glob {pattern!r} -> ^{translated}$")
    return re.compile(f"^{translated}$", re.DOTALL)


def any_match(patterns: Iterable[str], text: str) -> bool:
    """
    Check whether any pattern matches the text.

    An empty pattern set never matches.
    """
    return any(compile_glob(pattern).fullmatch(text) for pattern in patterns)
