"""Deterministic chapter filename helpers.

Responsibilities:
- Turn free-form chapter titles into stable filesystem-safe stems.
- Keep numbering zero-padded so files sort in document order.
"""

from __future__ import annotations

import re


def slugify_chapter_title(value: str) -> str:
    """Return a lowercase stem with every non-alphanumeric ASCII character as `_`."""

    stem = re.sub(r"[^a-z0-9]", "_", value, flags=re.IGNORECASE).lower()
    return stem or "chapter"


def chapter_file_name(index: int, title: str, suffix: str = ".txt") -> str:
    """Return a `NN_title.txt` style filename for a 1-based chapter index."""

    return f"{index:02d}_{slugify_chapter_title(title)}{suffix}"
