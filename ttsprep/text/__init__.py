"""Text helpers for deterministic chapter naming."""

from .slug import chapter_file_name, slugify_chapter_title

__all__ = ["chapter_file_name", "slugify_chapter_title"]
