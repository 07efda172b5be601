"""Chapter export to text files and zip archives.

Responsibilities:
- Write one UTF-8 text file per chapter with deterministic names.
- Write a `chapters.json` index describing the exported chapter order.
- Bundle every chapter file into one downloadable zip archive.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence
import zipfile

from ..models.datatypes import Chapter
from ..text.slug import chapter_file_name


DEFAULT_ARCHIVE_NAME = "cleaned_text_chapters.zip"
CHAPTER_INDEX_NAME = "chapters.json"


class ChapterExporter:
    """Filesystem-backed exporter for prepared chapters."""

    def __init__(self, root: Path) -> None:
        """Initialize the exporter with a root output directory."""

        self.root = root

    @staticmethod
    def file_name_for(chapter: Chapter) -> str:
        """Return the export filename for one chapter."""

        return chapter_file_name(chapter.index, chapter.title)

    def write_chapters(self, chapters: Sequence[Chapter]) -> list[Path]:
        """Write each chapter as a text file plus a JSON index and return file paths."""

        self.root.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for chapter in chapters:
            path = self.root / self.file_name_for(chapter)
            path.write_text(chapter.content, encoding="utf-8")
            written.append(path)

        index_payload = {
            "chapters": [
                {
                    "index": chapter.index,
                    "title": chapter.title,
                    "file": self.file_name_for(chapter),
                }
                for chapter in chapters
            ]
        }
        (self.root / CHAPTER_INDEX_NAME).write_text(
            json.dumps(index_payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        return written

    def write_archive(
        self,
        chapters: Sequence[Chapter],
        archive_name: str = DEFAULT_ARCHIVE_NAME,
    ) -> Path:
        """Write every chapter into one zip archive and return its path."""

        self.root.mkdir(parents=True, exist_ok=True)
        archive_path = self.root / archive_name
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for chapter in chapters:
                archive.writestr(self.file_name_for(chapter), chapter.content)
        return archive_path
