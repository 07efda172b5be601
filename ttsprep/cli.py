"""Command-line interface for ttsprep.

Responsibilities:
- Expose user-facing commands for document preparation.
- Convert CLI arguments into `TtsPrepConfig` and run the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_chapter_list, echo_export_summary, exit_with_command_error
from .cli_runtime import prompt_hidden_api_key, resolve_provider_runtime_sources
from .config import ConfigLoader, RuntimeConfigSources, TtsPrepConfig
from .credentials import create_credential_store
from .errors import ConfigurationError
from .io.chapter_export import ChapterExporter
from .llm.prompts import InstructionComposer
from .models.datatypes import CleaningOptions, SplitStrategy
from .pipeline import DocumentPreparer
from .provider_factory import ProviderFactory
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="ttsprep",
    no_args_is_help=True,
    help="Prepare documents for Text-to-Speech narration.",
)

SplitOption = Annotated[
    str | None,
    typer.Option("--split", help="Chapter splitting strategy: `auto` or `none`."),
]
StartPageOption = Annotated[
    int | None,
    typer.Option("--start-page", help="First 1-based page to process."),
]
EndPageOption = Annotated[
    int | None,
    typer.Option("--end-page", help="Last 1-based page to process."),
]
HeadersFootersOption = Annotated[
    bool | None,
    typer.Option(
        "--remove-headers-footers/--keep-headers-footers",
        help="Remove repeating headers and footers.",
    ),
]
PageNumbersOption = Annotated[
    bool | None,
    typer.Option(
        "--remove-page-numbers/--keep-page-numbers",
        help="Remove page numbering.",
    ),
]
WhitespaceOption = Annotated[
    bool | None,
    typer.Option(
        "--normalize-whitespace/--preserve-whitespace",
        help="Collapse whitespace into a continuous text flow.",
    ),
]
TablesOption = Annotated[
    bool | None,
    typer.Option(
        "--linearize-tables/--preserve-tables",
        help="Rewrite tables as readable linear prose.",
    ),
]


def _option_overrides(
    start_page: int | None,
    end_page: int | None,
    remove_headers_footers: bool | None,
    remove_page_numbers: bool | None,
    normalize_whitespace: bool | None,
    linearize_tables: bool | None,
) -> dict[str, object]:
    """Collect explicitly provided cleaning option values."""

    candidates = {
        "start_page": start_page,
        "end_page": end_page,
        "remove_headers_footers": remove_headers_footers,
        "remove_page_numbers": remove_page_numbers,
        "normalize_whitespace": normalize_whitespace,
        "linearize_tables": linearize_tables,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def _load_yaml_config(config_path: Path | None) -> TtsPrepConfig | None:
    """Load a YAML config file when requested and map failures to config errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ConfigurationError as exc:
        raise ConfigurationError(
            f"Invalid config file `{config_path}`: {exc.detail}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise ConfigurationError(
            f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_base_config(
    config_file: Path | None,
    input_path: Path | None,
    out: Path | None,
    split: str | None,
    write_archive: bool | None,
    option_overrides: dict[str, object],
) -> TtsPrepConfig:
    """Resolve effective command config from YAML defaults and explicit CLI overrides."""

    loaded_config = _load_yaml_config(config_file)
    if loaded_config is None:
        if input_path is None:
            raise ConfigurationError(
                "Input document path is required when `--config` is not provided.",
                hint="Pass `<input>` or use `--config <path.yaml>` with `input_path`.",
            )
        loaded_config = TtsPrepConfig(input_path=input_path)

    return replace(
        loaded_config,
        input_path=input_path if input_path is not None else loaded_config.input_path,
        output_dir=out if out is not None else loaded_config.output_dir,
        split_strategy=(
            SplitStrategy.parse(split) if split is not None else loaded_config.split_strategy
        ),
        write_archive=(
            write_archive if write_archive is not None else loaded_config.write_archive
        ),
        options=replace(loaded_config.options, **option_overrides),
    )


@app.command("clean")
def clean_command(
    input_path: Annotated[
        Path | None,
        typer.Argument(
            help="Path to source document (pdf, docx, txt, rtf, md, html). "
            "Required unless provided by `--config`.",
        ),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Output directory (overrides config file value)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    split: SplitOption = None,
    start_page: StartPageOption = None,
    end_page: EndPageOption = None,
    remove_headers_footers: HeadersFootersOption = None,
    remove_page_numbers: PageNumbersOption = None,
    normalize_whitespace: WhitespaceOption = None,
    linearize_tables: TablesOption = None,
    provider: Annotated[
        str | None, typer.Option("--provider", help="Model provider id.")
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="Model id override.")
    ] = None,
    timeout_seconds: Annotated[
        float | None,
        typer.Option("--timeout", help="Model request timeout in seconds."),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option(
            "--api-key",
            help="Provider API key override. Prefer `--prompt-api-key` to avoid shell history.",
        ),
    ] = None,
    prompt_api_key: Annotated[
        bool,
        typer.Option(
            "--prompt-api-key",
            help="Prompt for API key with hidden input (never echoed).",
        ),
    ] = False,
    store_api_key: Annotated[
        bool,
        typer.Option(
            "--store-api-key/--no-store-api-key",
            help="Persist CLI-entered API key to secure credential storage.",
        ),
    ] = True,
    write_archive: Annotated[
        bool | None,
        typer.Option("--zip/--no-zip", help="Also bundle chapter files into a zip archive."),
    ] = None,
) -> None:
    """Clean a document with the model and export its chapters."""

    try:
        runtime_cli_values, runtime_secure_values = resolve_provider_runtime_sources(
            provider=provider,
            model=model,
            timeout_seconds=timeout_seconds,
            api_key=api_key,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            credential_store_factory=create_credential_store,
        )
        base_config = _resolve_command_base_config(
            config_file=config_file,
            input_path=input_path,
            out=out,
            split=split,
            write_archive=write_archive,
            option_overrides=_option_overrides(
                start_page,
                end_page,
                remove_headers_footers,
                remove_page_numbers,
                normalize_whitespace,
                linearize_tables,
            ),
        )
        config = replace(
            base_config,
            runtime_sources=RuntimeConfigSources(
                cli=runtime_cli_values,
                secure=runtime_secure_values,
                env=os.environ,
            ),
        )
        config.validate()
        gateway = ProviderFactory.from_runtime(config.resolved_provider_runtime())
        preparer = DocumentPreparer(gateway=gateway, run_logger=RunLogger())
        chapters = preparer.prepare(config.input_path, config.options, config.split_strategy)

        exporter = ChapterExporter(config.output_dir)
        exporter.write_chapters(chapters)
        archive_path = exporter.write_archive(chapters) if config.write_archive else None
    except Exception as exc:
        exit_with_command_error("clean", exc)

    echo_chapter_list(chapters)
    echo_export_summary(config.output_dir, archive_path)


@app.command("instructions")
def instructions_command(
    split: SplitOption = None,
    start_page: StartPageOption = None,
    end_page: EndPageOption = None,
    remove_headers_footers: HeadersFootersOption = None,
    remove_page_numbers: PageNumbersOption = None,
    normalize_whitespace: WhitespaceOption = None,
    linearize_tables: TablesOption = None,
) -> None:
    """Print the composed model instructions without contacting the model."""

    try:
        options = replace(
            CleaningOptions(),
            **_option_overrides(
                start_page,
                end_page,
                remove_headers_footers,
                remove_page_numbers,
                normalize_whitespace,
                linearize_tables,
            ),
        )
        options.validate()
        instruction = InstructionComposer().compose(options, SplitStrategy.parse(split or "auto"))
    except Exception as exc:
        exit_with_command_error("instructions", exc)

    typer.echo(instruction)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage the securely stored provider API key."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            ConfigurationError(
                "`--set-api-key` and `--clear-api-key` cannot be used together.",
                stage="credentials",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = prompt_hidden_api_key("Gemini API key (hidden input)")
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                ConfigurationError(
                    "No API key entered.",
                    stage="credentials",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                ConfigurationError(
                    f"Failed to store API key securely: {exc}",
                    stage="credentials",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        if credential_store.clear_api_key():
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    status = "present" if credential_store.get_api_key() is not None else "not set"
    typer.echo(f"Stored Gemini API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
