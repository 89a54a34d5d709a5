"""
Unit tests for configuration parsing and the budget normalizer.
"""

import logging

import pytest

from ai_pr_review.config import (
    ActionConfig,
    CategoryStyle,
    LoggingConfig,
    Model,
    PostingMode,
    MAX_CHARS_DEFAULT,
    MAX_CHARS_MAX,
    MAX_CHARS_MIN,
    normalize_budget,
    setup_logging,
)
from ai_pr_review.errors import ConfigError


BASE_ENV = {"GITHUB_TOKEN": "ghs_test", "OPENAI_API_KEY": "sk-test"}


class TestNormalizeBudget:
    """Unit tests for normalize_budget."""

    @pytest.mark.parametrize("raw", [None, "", "abc", "0", "-1", "0x10", True])
    def test_defaults_for_missing_or_non_positive(self, raw):
        """Test fallback to the default budget."""
        assert normalize_budget(raw) == MAX_CHARS_DEFAULT

    def test_clamps_below_minimum(self):
        """Test clamping up to the minimum."""
        assert normalize_budget("999") == MAX_CHARS_MIN

    def test_clamps_above_maximum(self):
        """Test clamping down to the maximum."""
        assert normalize_budget(str(MAX_CHARS_MAX + 1)) == MAX_CHARS_MAX
        assert normalize_budget("9999999") == MAX_CHARS_MAX

    def test_passes_through_values_in_range(self):
        """Test in-range values, including the bounds."""
        assert normalize_budget(str(MAX_CHARS_MIN)) == MAX_CHARS_MIN
        assert normalize_budget("15000") == 15000
        assert normalize_budget(str(MAX_CHARS_MAX - 1)) == MAX_CHARS_MAX - 1
        assert normalize_budget(20000) == 20000

    def test_reads_leading_integer(self):
        """Test parseInt-style parsing of trailing garbage and whitespace."""
        assert normalize_budget("  15000") == 15000
        assert normalize_budget("15000chars") == 15000
        assert normalize_budget("25000.9") == 25000
        assert normalize_budget("1e5") == MAX_CHARS_MIN
        assert normalize_budget("0015000") == 15000

    def test_very_long_digit_runs(self):
        """Test digit runs too long for int() conversion."""
        messages = []

        assert normalize_budget("9" * 5000, notify=messages.append) == MAX_CHARS_MAX
        assert normalize_budget("-" + "9" * 5000) == MAX_CHARS_DEFAULT
        assert normalize_budget("0" * 5000 + "15000") == 15000
        assert normalize_budget(10 ** 5000, notify=messages.append) == MAX_CHARS_MAX
        assert len(messages) == 2
        assert all(m.endswith("above maximum 300000; using maximum.") for m in messages)

    @pytest.mark.parametrize("raw", ["１２３４５", "٣٠٠٠٠", "١٢"])
    def test_non_ascii_digits_are_not_numbers(self, raw):
        """Test that only ASCII digits are read."""
        assert normalize_budget(raw) == MAX_CHARS_DEFAULT

    def test_notify_on_clamp(self):
        """Test the clamp messages sent to the sink."""
        messages = []

        normalize_budget("999", notify=messages.append)
        normalize_budget("400000", notify=messages.append)
        normalize_budget("50000", notify=messages.append)

        assert messages == [
            "max_chars (999) below minimum 10000; using minimum.",
            "max_chars (400000) above maximum 300000; using maximum.",
        ]

    def test_custom_bounds(self):
        """Test explicit default and bounds."""
        assert normalize_budget("5", default=50, minimum=10, maximum=100) == 10
        assert normalize_budget("", default=50, minimum=10, maximum=100) == 50


class TestInputChoices:
    """Unit tests for enumerated input parsing."""

    def test_parse_known_values(self):
        """Test parsing each enum from its input string."""
        assert Model.parse("gpt-4o", "model") is Model.GPT_4O
        assert CategoryStyle.parse("strict", "category_style") is CategoryStyle.STRICT
        assert PostingMode.parse("pr_description", "posting_mode") is PostingMode.PR_DESCRIPTION

    def test_parse_unknown_value(self):
        """Test the error message for a value outside the allow-list."""
        with pytest.raises(ConfigError) as exc_info:
            Model.parse("gpt-3.5-turbo", "model")

        assert str(exc_info.value) == (
            "Invalid model: gpt-3.5-turbo. Allowed: gpt-4.1-mini, gpt-4.1, gpt-4o-mini, gpt-4o"
        )


class TestActionConfig:
    """Unit tests for ActionConfig loading and validation."""

    def test_defaults(self):
        """Test defaults when no inputs are given."""
        config = ActionConfig.from_inputs({}, BASE_ENV)

        assert config.github.token == "ghs_test"
        assert config.github.api_base_url == "https://api.github.com"
        assert config.openai.api_key == "sk-test"
        assert config.openai.model is Model.GPT_4_1_MINI
        assert config.openai.temperature == 0.2
        assert config.review.max_chars == MAX_CHARS_DEFAULT
        assert config.review.category_style is CategoryStyle.DEFAULT
        assert config.review.posting_mode is PostingMode.COMMENT
        assert config.review.dry_run is False
        assert config.review.enable_addons is False
        assert config.review.pr_number is None

    def test_missing_github_token(self):
        """Test that the repository token is mandatory."""
        with pytest.raises(ConfigError, match="Missing GITHUB_TOKEN"):
            ActionConfig.from_inputs({}, {"OPENAI_API_KEY": "sk-test"})

    def test_missing_openai_key_deferred(self):
        """Test that the OpenAI key is only demanded for a model call."""
        config = ActionConfig.from_inputs({}, {"GITHUB_TOKEN": "ghs_test"})

        assert config.openai.api_key is None
        with pytest.raises(ConfigError, match="Missing OpenAI API key"):
            config.require_openai_key()

    def test_require_openai_key(self):
        """Test returning a configured key."""
        assert ActionConfig.from_inputs({}, BASE_ENV).require_openai_key() == "sk-test"

    def test_dry_run_without_openai_key(self):
        """Test that dry runs do not need an OpenAI key."""
        config = ActionConfig.from_inputs({"dry_run": "TRUE"}, {"GITHUB_TOKEN": "ghs_test"})

        assert config.review.dry_run is True
        assert config.openai.api_key is None

    def test_input_key_overrides_env(self):
        """Test that the openai_api_key input wins over the env var."""
        config = ActionConfig.from_inputs({"openai_api_key": "sk-input"}, BASE_ENV)
        assert config.openai.api_key == "sk-input"

    def test_posting_mode_is_lowercased(self):
        """Test case-insensitive posting_mode."""
        config = ActionConfig.from_inputs({"posting_mode": "REVIEW"}, BASE_ENV)
        assert config.review.posting_mode is PostingMode.REVIEW

    @pytest.mark.parametrize("name,value", [
        ("model", "gpt-5"),
        ("category_style", "gentle"),
        ("posting_mode", "slack"),
    ])
    def test_invalid_enumerated_inputs(self, name, value):
        """Test rejection of values outside each allow-list."""
        with pytest.raises(ConfigError, match=f"Invalid {name}: {value}. Allowed: "):
            ActionConfig.from_inputs({name: value}, BASE_ENV)

    def test_budget_is_normalized(self):
        """Test that max_chars goes through the normalizer."""
        assert ActionConfig.from_inputs({"max_chars": "999"}, BASE_ENV).review.max_chars == MAX_CHARS_MIN
        assert ActionConfig.from_inputs({"max_chars": "0"}, BASE_ENV).review.max_chars == MAX_CHARS_DEFAULT

    def test_invalid_log_level(self):
        """Test log level validation."""
        env = dict(BASE_ENV, LOG_LEVEL="LOUD")
        with pytest.raises(ConfigError, match="Invalid log level"):
            ActionConfig.from_inputs({}, env)

    def test_from_env_reads_action_inputs(self):
        """Test loading from INPUT_* variables."""
        env = dict(
            BASE_ENV,
            INPUT_MODEL="gpt-4o-mini",
            INPUT_INCLUDE_GLOBS="src/**",
            INPUT_ENABLE_ADDONS="true",
            INPUT_PR_NUMBER=" 42 ",
            GITHUB_API_URL="https://ghe.example.com/api/v3",
        )

        config = ActionConfig.from_env(env)

        assert config.openai.model is Model.GPT_4O_MINI
        assert config.review.include_globs == "src/**"
        assert config.review.enable_addons is True
        assert config.review.pr_number == "42"
        assert config.github.api_base_url == "https://ghe.example.com/api/v3"

    def test_from_yaml(self, tmp_path):
        """Test loading inputs from a YAML file."""
        config_file = tmp_path / "review.yml"
        config_file.write_text(
            "model: gpt-4o\n"
            "dry_run: true\n"
            "max_chars: 50000\n"
            "exclude_globs:\n"
            "  - '**/*.lock'\n"
            "  - 'dist/**'\n",
            encoding="utf-8",
        )

        config = ActionConfig.from_yaml(str(config_file), {"GITHUB_TOKEN": "ghs_test"})

        assert config.openai.model is Model.GPT_4O
        assert config.review.dry_run is True
        assert config.review.max_chars == 50000
        assert config.review.exclude_globs == "**/*.lock,dist/**"

    def test_from_env_with_config_file(self, tmp_path):
        """Test that workflow inputs override the YAML defaults."""
        config_file = tmp_path / "review.yml"
        config_file.write_text("model: gpt-4o\ncategory_style: strict\n", encoding="utf-8")
        env = dict(BASE_ENV, INPUT_CONFIG_FILE=str(config_file), INPUT_MODEL="gpt-4.1")

        config = ActionConfig.from_env(env)

        assert config.openai.model is Model.GPT_4_1
        assert config.review.category_style is CategoryStyle.STRICT

    def test_from_yaml_overrides(self, tmp_path):
        """Test that overrides replace file values before validation."""
        config_file = tmp_path / "review.yml"
        config_file.write_text("dry_run: false\nmodel: gpt-4o\n", encoding="utf-8")

        config = ActionConfig.from_yaml(
            str(config_file), {"GITHUB_TOKEN": "ghs_test"}, overrides={"dry_run": "true"}
        )

        assert config.review.dry_run is True
        assert config.openai.model is Model.GPT_4O

    def test_from_yaml_missing_file(self, tmp_path):
        """Test error for a missing config file."""
        with pytest.raises(ConfigError, match="Config file not found"):
            ActionConfig.from_yaml(str(tmp_path / "nope.yml"), BASE_ENV)

    def test_to_dict_omits_secrets(self):
        """Test that credentials never appear in the dict form."""
        config = ActionConfig.from_inputs({"openai_api_key": "sk-secret"}, BASE_ENV)

        data = config.to_dict()

        assert "token" not in data["github"]
        assert "api_key" not in data["openai"]
        assert "sk-secret" not in str(data)
        assert "ghs_test" not in str(data)
        assert data["openai"]["model"] == "gpt-4.1-mini"
        assert data["review"]["posting_mode"] == "comment"


class TestLoggingConfig:
    """Unit tests for logging configuration."""

    def test_runner_debug_forces_debug(self):
        """Test RUNNER_DEBUG handling."""
        assert LoggingConfig.from_env({"RUNNER_DEBUG": "1", "LOG_LEVEL": "ERROR"}).level == "DEBUG"
        assert LoggingConfig.from_env({"LOG_LEVEL": "WARNING"}).level == "WARNING"
        assert LoggingConfig.from_env({}).level == "INFO"

    def test_setup_logging_with_file(self, tmp_path):
        """Test that a rotating file handler is attached when requested."""
        log_file = tmp_path / "review.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            setup_logging(LoggingConfig(level="DEBUG", file_path=str(log_file)))
            logging.getLogger("ai_pr_review.test").debug("hello log file")
            for handler in root.handlers:
                handler.flush()

            assert root.level == logging.DEBUG
            assert "hello log file" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in root.handlers[:]:
                if handler not in saved_handlers:
                    root.removeHandler(handler)
                    handler.close()
            for handler in saved_handlers:
                if handler not in root.handlers:
                    root.addHandler(handler)
            root.setLevel(saved_level)
