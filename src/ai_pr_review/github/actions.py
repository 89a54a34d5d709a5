"""
GitHub Actions Runtime

Reads action inputs and talks back to the runner through workflow
commands and the GITHUB_OUTPUT file.
"""

import hashlib
import logging
import os
from typing import Mapping, Optional


logger = logging.getLogger(__name__)


def get_input(name: str, environ: Optional[Mapping[str, str]] = None, default: str = "") -> str:
    """
    Read an action input from its ``INPUT_<NAME>`` variable.

    Args:
        name: Input name as declared in action.yml
        environ: Environment to read (defaults to os.environ)
        default: Value when the input is unset or blank

    Returns:
        Stripped input value
    """
    env = os.environ if environ is None else environ
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    value = env.get(key, "").strip()
    return value or default


def escape_data(text: str) -> str:
    """Escape a workflow command message."""
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_output(name: str, value: str, environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Publish a step output.

    Multi-line values are written to the GITHUB_OUTPUT file with a
    heredoc delimiter derived from the content, so the value can never
    contain its own terminator. Outside a runner the value is only logged.
    """
    env = os.environ if environ is None else environ
    text = "" if value is None else str(value)
    output_path = env.get("GITHUB_OUTPUT")

    if output_path:
        delimiter = f"EOF_{hashlib.sha256(f'{name}:{text}'.encode()).hexdigest()[:16]}"
        with open(output_path, "a", encoding="utf-8") as fh:
            fh.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
        logger.debug(f"Wrote output '{name}' ({len(text)} chars)")
    else:
        logger.debug(f"GITHUB_OUTPUT not set; output '{name}' not written:\n{text}")


def set_failed(message: str) -> None:
    """Report a fatal error to the runner; the caller sets the exit code."""
    print(f"::error::{escape_data(str(message))}")


class WorkflowCommandFormatter(logging.Formatter):
    """
    Log formatter that turns warnings and errors into workflow annotations.

    Lower levels are printed as plain log lines.
    """

    PREFIXES = {
        logging.WARNING: "::warning::",
        logging.ERROR: "::error::",
        logging.CRITICAL: "::error::",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        prefix = self.PREFIXES.get(record.levelno)
        if prefix:
            return prefix + escape_data(message)
        if record.levelno <= logging.DEBUG:
            return "::debug::" + escape_data(message)
        return message
