"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from ttsprep.config import ConfigLoader, RuntimeConfigSources, TtsPrepConfig
from ttsprep.errors import ConfigurationError
from ttsprep.models.datatypes import CleaningOptions, SplitStrategy


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse valid payloads and normalize typed/blank values."""

    config_path = tmp_path / "ttsprep.yml"
    config_path.write_text(
        """
input_path: " docs/book.pdf "
output_dir: " out/book "
split_strategy: NONE
provider: " gemini "
model: " gemini-2.5-flash "
api_key: " test-key "
timeout_seconds: 120
write_archive: "no"
options:
  remove_headers_footers: false
  remove_page_numbers: "yes"
  normalize_whitespace: true
  linearize_tables: "off"
  start_page: 3
  end_page: " 12 "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.input_path == Path("docs/book.pdf")
    assert config.output_dir == Path("out/book")
    assert config.split_strategy is SplitStrategy.NONE
    assert config.provider == "gemini"
    assert config.model == "gemini-2.5-flash"
    assert config.api_key == "test-key"
    assert config.timeout_seconds == 120.0
    assert config.write_archive is False
    assert config.options == CleaningOptions(
        remove_headers_footers=False,
        remove_page_numbers=True,
        normalize_whitespace=True,
        linearize_tables=False,
        start_page=3,
        end_page=12,
    )


def test_config_loader_from_yaml_applies_defaults(tmp_path: Path) -> None:
    """Omitted fields should fall back to documented defaults."""

    config_path = tmp_path / "minimal.yml"
    config_path.write_text("input_path: sample.txt\n", encoding="utf-8")

    config = ConfigLoader.from_yaml(config_path)

    assert config.output_dir == Path("out")
    assert config.split_strategy is SplitStrategy.AUTO
    assert config.provider == "gemini"
    assert config.model == "gemini-2.5-pro"
    assert config.write_archive is True
    assert config.options == CleaningOptions()


def test_config_loader_from_yaml_rejects_missing_and_unknown_keys(tmp_path: Path) -> None:
    """YAML loader should fail clearly on missing required or unknown fields."""

    missing_path = tmp_path / "missing.yml"
    missing_path.write_text("output_dir: out\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match=r"missing required key\(s\): input_path"):
        ConfigLoader.from_yaml(missing_path)

    unknown_path = tmp_path / "unknown.yml"
    unknown_path.write_text("input_path: in.pdf\nunknown_field: x\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match=r"unsupported key\(s\): unknown_field"):
        ConfigLoader.from_yaml(unknown_path)

    unknown_option_path = tmp_path / "unknown_option.yml"
    unknown_option_path.write_text(
        "input_path: in.pdf\noptions:\n  strip_emoji: true\n", encoding="utf-8"
    )
    with pytest.raises(ConfigurationError, match="strip_emoji"):
        ConfigLoader.from_yaml(unknown_option_path)


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("input_path: in.pdf\noptions:\n  start_page: 0\n", "`start_page` must be a positive"),
        ("input_path: in.pdf\noptions:\n  end_page: abc\n", "`end_page` must be a positive"),
        ("input_path: in.pdf\noptions:\n  linearize_tables: maybe\n", "must be a boolean"),
        ("input_path: in.pdf\nsplit_strategy: chapters\n", "Unsupported split strategy"),
        ("input_path: in.pdf\nprovider: openai\n", "Unsupported provider"),
        ("input_path: in.pdf\ntimeout_seconds: -1\n", "positive number"),
        ("- just\n- a list\n", "top-level mapping"),
        ("input_path: [unclosed\n", "not valid YAML"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_values(
    tmp_path: Path, body: str, message: str
) -> None:
    """Invalid values should raise `ConfigurationError` with an actionable message."""

    config_path = tmp_path / "invalid.yml"
    config_path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigurationError, match=message):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_reads_options_and_runtime_sources() -> None:
    """Environment loader should parse options and capture runtime env keys."""

    env = {
        "TTSPREP_INPUT": "book.pdf",
        "TTSPREP_OUTPUT_DIR": "prepared",
        "TTSPREP_SPLIT": "none",
        "TTSPREP_REMOVE_PAGE_NUMBERS": "false",
        "TTSPREP_START_PAGE": "5",
        "TTSPREP_MODEL": "gemini-2.5-flash",
        "GEMINI_API_KEY": " env-key ",
        "UNRELATED": "ignored",
    }

    config = ConfigLoader.from_env(env)

    assert config.input_path == Path("book.pdf")
    assert config.output_dir == Path("prepared")
    assert config.split_strategy is SplitStrategy.NONE
    assert config.options.remove_page_numbers is False
    assert config.options.remove_headers_footers is True
    assert config.options.start_page == 5
    assert config.options.end_page is None
    assert config.model == "gemini-2.5-flash"
    assert config.api_key == "env-key"
    assert "UNRELATED" not in config.runtime_sources.env


def test_config_loader_from_env_requires_input() -> None:
    """The input document variable is mandatory."""

    with pytest.raises(ConfigurationError, match="TTSPREP_INPUT"):
        ConfigLoader.from_env({})


def test_resolved_provider_runtime_uses_cli_secure_env_default_precedence() -> None:
    """Runtime resolution should prefer CLI, then secure storage, then env, then fields."""

    config = TtsPrepConfig(input_path=Path("in.pdf"), api_key="field-key")

    assert config.resolved_provider_runtime().api_key == "field-key"

    env_only = RuntimeConfigSources(env={"GEMINI_API_KEY": "env-key", "TTSPREP_MODEL": "m-env"})
    resolved = config.resolved_provider_runtime(env_only)
    assert resolved.api_key == "env-key"
    assert resolved.model == "m-env"

    secure = RuntimeConfigSources(secure={"api_key": "secure-key"}, env={"GEMINI_API_KEY": "env-key"})
    assert config.resolved_provider_runtime(secure).api_key == "secure-key"

    cli = RuntimeConfigSources(
        cli={"api_key": "cli-key", "model": "m-cli", "timeout_seconds": "30"},
        secure={"api_key": "secure-key"},
        env={"GEMINI_API_KEY": "env-key", "TTSPREP_MODEL": "m-env"},
    )
    resolved_cli = config.resolved_provider_runtime(cli)
    assert resolved_cli.api_key == "cli-key"
    assert resolved_cli.model == "m-cli"
    assert resolved_cli.timeout_seconds == 30.0


def test_resolved_provider_runtime_leaves_missing_api_key_unset() -> None:
    """A missing credential resolves to `None` so the gateway can fail before network use."""

    config = TtsPrepConfig(input_path=Path("in.pdf"))

    runtime = config.resolved_provider_runtime(RuntimeConfigSources(env={"GEMINI_API_KEY": "  "}))

    assert runtime.api_key is None
    assert runtime.provider == "gemini"


def test_resolved_provider_runtime_rejects_unknown_provider() -> None:
    """Unknown provider ids from any source should fail validation."""

    config = TtsPrepConfig(input_path=Path("in.pdf"))

    with pytest.raises(ConfigurationError, match="Unsupported provider `other`"):
        config.resolved_provider_runtime(RuntimeConfigSources(cli={"provider": "other"}))
