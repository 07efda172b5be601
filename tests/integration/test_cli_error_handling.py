"""CLI error-handling tests for concise stage-aware diagnostics."""

from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from ttsprep.cli import app
from ttsprep.errors import ModelError


def test_clean_command_reports_stage_error_with_hint(
    monkeypatch: MonkeyPatch, sample_document_path: Path, tmp_path: Path
) -> None:
    """`clean` should print stage-aware diagnostics and fail with exit code 1."""

    def _failing_prepare(*_: object, **__: object) -> None:
        """Raise a model error to simulate an overloaded service."""

        raise ModelError(
            "Gemini is overloaded or rate limited (HTTP 503): try later",
            hint="The model might be overloaded; retry later.",
        )

    monkeypatch.setattr("ttsprep.cli.DocumentPreparer.prepare", _failing_prepare)
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "clean",
            str(sample_document_path),
            "--out",
            str(tmp_path / "out"),
            "--api-key",
            "test-key",
            "--no-store-api-key",
        ],
    )

    assert result.exit_code == 1
    assert "clean failed at stage `invoke`" in result.output
    assert "Hint: The model might be overloaded; retry later." in result.output
    assert not (tmp_path / "out").exists()


def test_clean_command_reports_missing_api_key(
    sample_document_path: Path,
    tmp_path: Path,
    generation_calls: list[dict[str, object]],
) -> None:
    """Without any credential source `clean` should fail with an auth diagnostic."""

    runner = CliRunner()

    result = runner.invoke(
        app, ["clean", str(sample_document_path), "--out", str(tmp_path / "out")]
    )

    assert result.exit_code == 1
    assert "clean failed at stage `invoke`: Missing Gemini API key." in result.output
    assert "GEMINI_API_KEY" in result.output
    assert generation_calls == []


def test_clean_command_reports_missing_document(tmp_path: Path) -> None:
    """A missing input document should fail at the encode stage."""

    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "clean",
            str(tmp_path / "missing.pdf"),
            "--api-key",
            "test-key",
            "--no-store-api-key",
        ],
    )

    assert result.exit_code == 1
    assert "clean failed at stage `encode`" in result.output
    assert "missing.pdf" in result.output


def test_clean_command_reports_missing_config_file() -> None:
    """`clean` should fail with stage-aware diagnostics when `--config` path is missing."""

    runner = CliRunner()
    result = runner.invoke(app, ["clean", "--config", "missing-ttsprep.yaml"])

    assert result.exit_code == 1
    assert "clean failed at stage `config`" in result.output
    assert "Config file not found: `missing-ttsprep.yaml`." in result.output


def test_clean_command_reports_invalid_config_payload(tmp_path: Path) -> None:
    """`clean` should fail fast when YAML config schema/values are invalid."""

    config_path = tmp_path / "invalid.yaml"
    config_path.write_text("output_dir: out\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["clean", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "clean failed at stage `config`" in result.output
    assert "missing required key(s): input_path" in result.output


def test_clean_command_requires_input_without_config() -> None:
    """`clean` without input or config should explain how to provide one."""

    runner = CliRunner()
    result = runner.invoke(app, ["clean"])

    assert result.exit_code == 1
    assert "Input document path is required" in result.output


def test_clean_command_rejects_unknown_split_strategy(sample_document_path: Path) -> None:
    """Unknown split tokens should be reported as configuration errors."""

    runner = CliRunner()
    result = runner.invoke(
        app, ["clean", str(sample_document_path), "--split", "chapters", "--no-store-api-key"]
    )

    assert result.exit_code == 1
    assert "clean failed at stage `config`" in result.output
    assert "Unsupported split strategy `chapters`" in result.output


def test_instructions_command_rejects_invalid_page() -> None:
    """`instructions` should validate page bounds before composing."""

    runner = CliRunner()
    result = runner.invoke(app, ["instructions", "--start-page", "0"])

    assert result.exit_code == 1
    assert "instructions failed at stage `config`" in result.output
