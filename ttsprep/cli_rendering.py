"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and chapter listings.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Sequence

import typer

from .errors import PreparationError
from .models.datatypes import Chapter


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PreparationError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_chapter_list(chapters: Sequence[Chapter]) -> None:
    """Print chapter index/title rows with content length in document order."""

    typer.echo(f"Chapters: {len(chapters)}")
    for chapter in chapters:
        typer.echo(f"{chapter.index}. {chapter.title} ({len(chapter.content)} chars)")


def echo_export_summary(output_dir: Path, archive_path: Path | None) -> None:
    """Print where exported chapter files were written."""

    typer.echo(f"Chapter files: {output_dir}")
    typer.echo(f"Archive: {archive_path if archive_path is not None else '(not written)'}")
