"""
Configuration Management

Parses and validates the action inputs into typed settings.
"""

import os
import re
import sys
import yaml
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
from pathlib import Path
import logging

from .errors import ConfigError
from .github.actions import WorkflowCommandFormatter, get_input


logger = logging.getLogger(__name__)

MAX_CHARS_DEFAULT = 120_000
MAX_CHARS_MIN = 10_000
MAX_CHARS_MAX = 300_000

INPUT_NAMES = (
    "openai_api_key",
    "model",
    "max_chars",
    "category_style",
    "posting_mode",
    "include_globs",
    "exclude_globs",
    "dry_run",
    "pr_number",
    "enable_addons",
)

_LEADING_INT = re.compile(r"^\s*([+-]?)([0-9]+)")


class _InputChoice(Enum):
    """Closed set of accepted values for one action input."""

    @classmethod
    def parse(cls, value: str, input_name: str):
        for member in cls:
            if member.value == value:
                return member

        allowed = ", ".join(member.value for member in cls)
        raise ConfigError(f"Invalid {input_name}: {value}. Allowed: {allowed}")


class Model(_InputChoice):
    """Chat models the action may call."""
    GPT_4_1_MINI = "gpt-4.1-mini"
    GPT_4_1 = "gpt-4.1"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4O = "gpt-4o"


class CategoryStyle(_InputChoice):
    """Wording of the review categories."""
    DEFAULT = "default"
    STRICT = "strict"


class PostingMode(_InputChoice):
    """Where the review ends up on the pull request."""
    COMMENT = "comment"
    REVIEW = "review"
    PR_DESCRIPTION = "pr_description"


def normalize_budget(
    raw: Any,
    default: int = MAX_CHARS_DEFAULT,
    minimum: int = MAX_CHARS_MIN,
    maximum: int = MAX_CHARS_MAX,
    notify: Optional[Callable[[str], None]] = None,
) -> int:
    """
    Clamp a user-supplied character budget into ``[minimum, maximum]``.

    The value is read like JavaScript's ``parseInt``: the leading run of
    ASCII digits counts, trailing garbage is ignored. Missing, unparseable
    and non-positive values fall back to ``default``.

    Args:
        raw: Input value (string or int)
        default: Budget used when ``raw`` is not a positive integer
        minimum: Lower clamp
        maximum: Upper clamp
        notify: Optional sink told about clamping

    Returns:
        Budget in characters
    """
    if raw is None or isinstance(raw, bool):
        return default

    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(str(raw))
        if not match:
            return default

        sign, digits = match.groups()
        digits = digits.lstrip("0") or "0"
        if sign == "-" or digits == "0":
            return default

        # too many digits for int(); any such value is above the maximum
        if len(digits) > len(str(maximum)):
            if notify:
                notify(f"max_chars ({digits[:len(str(maximum)) + 1]}...) above maximum {maximum}; using maximum.")
            return maximum

        value = int(digits)

    if value <= 0:
        return default

    if value < minimum:
        if notify:
            notify(f"max_chars ({value}) below minimum {minimum}; using minimum.")
        return minimum

    if value > maximum:
        if notify:
            # str() of a huge int hits the digit limit
            shown = value if value.bit_length() <= 64 else "huge value"
            notify(f"max_chars ({shown}) above maximum {maximum}; using maximum.")
        return maximum

    return value


def _parse_bool(value: Optional[str]) -> bool:
    return str(value or "false").strip().lower() == "true"


@dataclass
class GitHubConfig:
    """GitHub API settings"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass
class OpenAIConfig:
    """Chat model settings"""
    api_key: Optional[str] = None
    model: Model = Model.GPT_4_1_MINI
    temperature: float = 0.2


@dataclass
class ReviewConfig:
    """Review selection and delivery settings"""
    max_chars: int = MAX_CHARS_DEFAULT
    category_style: CategoryStyle = CategoryStyle.DEFAULT
    posting_mode: PostingMode = PostingMode.COMMENT
    include_globs: str = ""
    exclude_globs: str = ""
    dry_run: bool = False
    pr_number: Optional[str] = None
    enable_addons: bool = False


@dataclass
class LoggingConfig:
    """Logging settings"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggingConfig":
        env = os.environ if environ is None else environ
        level = env.get("LOG_LEVEL", "INFO")
        if env.get("RUNNER_DEBUG") == "1":
            level = "DEBUG"

        return cls(
            level=level,
            format=env.get("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file_path=env.get("LOG_FILE") or None,
            max_file_size=int(env.get("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
            backup_count=int(env.get("LOG_BACKUP_COUNT", "5")),
        )


@dataclass
class ActionConfig:
    """Complete settings for one review run"""
    github: GitHubConfig
    openai: OpenAIConfig
    review: ReviewConfig
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_inputs(
        cls,
        inputs: Mapping[str, Any],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ActionConfig":
        """
        Build and validate settings from raw input strings.

        Args:
            inputs: Action input name -> raw value
            environ: Environment used for credentials (defaults to os.environ)

        Returns:
            Validated ActionConfig

        Raises:
            ConfigError: On a missing credential or an unknown enumerated value
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> str:
            value = inputs.get(name)
            return "" if value is None else str(value).strip()

        token = env.get("GITHUB_TOKEN")
        if not token:
            raise ConfigError("Missing GITHUB_TOKEN")

        dry_run = _parse_bool(read("dry_run"))
        openai_key = read("openai_api_key") or env.get("OPENAI_API_KEY", "")

        model = Model.parse(read("model") or Model.GPT_4_1_MINI.value, "model")
        max_chars = normalize_budget(read("max_chars") or str(MAX_CHARS_DEFAULT), notify=logger.info)
        category_style = CategoryStyle.parse(read("category_style") or CategoryStyle.DEFAULT.value, "category_style")
        posting_mode = PostingMode.parse(
            (read("posting_mode") or PostingMode.COMMENT.value).lower(), "posting_mode"
        )

        config = cls(
            github=GitHubConfig(
                token=token,
                api_base_url=env.get("GITHUB_API_URL") or "https://api.github.com",
                timeout_seconds=int(env.get("GITHUB_TIMEOUT", "30")),
            ),
            openai=OpenAIConfig(api_key=openai_key or None, model=model),
            review=ReviewConfig(
                max_chars=max_chars,
                category_style=category_style,
                posting_mode=posting_mode,
                include_globs=read("include_globs"),
                exclude_globs=read("exclude_globs"),
                dry_run=dry_run,
                pr_number=read("pr_number") or None,
                enable_addons=_parse_bool(read("enable_addons")),
            ),
            logging=LoggingConfig.from_env(env),
        )
        config.validate()
        return config

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ActionConfig":
        """
        Load settings from ``INPUT_*`` variables set by the Actions runner.

        When the ``config_file`` input names a YAML file, its values are
        used for any input the workflow left empty.
        """
        env = os.environ if environ is None else environ
        inputs: Dict[str, str] = {}

        config_file = get_input("config_file", env)
        if config_file:
            inputs.update(_read_yaml_inputs(config_file))

        for name in INPUT_NAMES:
            value = get_input(name, env)
            if value:
                inputs[name] = value

        return cls.from_inputs(inputs, env)

    @classmethod
    def from_yaml(
        cls,
        config_path: str,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "ActionConfig":
        """
        Load settings from a YAML mapping of input names, for local runs.

        ``overrides`` replace file values before validation.
        """
        inputs: Dict[str, Any] = dict(_read_yaml_inputs(config_path))
        inputs.update(overrides or {})
        return cls.from_inputs(inputs, environ)

    def require_openai_key(self) -> str:
        """
        Return the OpenAI API key for a model call.

        Raises:
            ConfigError: If neither the input nor OPENAI_API_KEY provided one
        """
        if not self.openai.api_key:
            raise ConfigError(
                "Missing OpenAI API key: provide 'openai_api_key' input or set OPENAI_API_KEY env var"
            )
        return self.openai.api_key

    def validate(self) -> None:
        """Validate settings that depend on each other"""
        errors = []

        if not MAX_CHARS_MIN <= self.review.max_chars <= MAX_CHARS_MAX:
            errors.append(f"max_chars must be between {MAX_CHARS_MIN} and {MAX_CHARS_MAX}")

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigError("; ".join(errors))

    def to_dict(self) -> Dict[str, Any]:
        """Settings as a plain dict, without credentials"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # no token
            },
            'openai': {
                'model': self.openai.model.value,
                'temperature': self.openai.temperature,
            },
            'review': {
                'max_chars': self.review.max_chars,
                'category_style': self.review.category_style.value,
                'posting_mode': self.review.posting_mode.value,
                'include_globs': self.review.include_globs,
                'exclude_globs': self.review.exclude_globs,
                'dry_run': self.review.dry_run,
                'pr_number': self.review.pr_number,
                'enable_addons': self.review.enable_addons,
            },
            'logging': {
                'level': self.logging.level,
                'file_path': self.logging.file_path,
            },
        }


def _read_yaml_inputs(config_path: str) -> Dict[str, str]:
    """Read a YAML mapping of input names into raw input strings."""
    config_file = Path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    inputs = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        inputs[str(key)] = str(value)

    return inputs


def setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger for an Actions run."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(WorkflowCommandFormatter(config.format))

    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

    # Optional rotating log file next to the console output
    if config.file_path:
        from logging.handlers import RotatingFileHandler

        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(file_handler)
