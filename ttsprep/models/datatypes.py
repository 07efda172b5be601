"""Core datatypes shared across ttsprep modules.

Responsibilities:
- Represent immutable records exchanged between preparation stages.
- Validate caller-supplied cleaning directives before any I/O happens.

Key types:
- `CleaningOptions`, `SplitStrategy`, `EncodedDocument`, and `Chapter`.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum

from ..errors import ConfigurationError


class SplitStrategy(str, Enum):
    """How the model partitions cleaned text into chapters."""

    AUTO = "auto"
    NONE = "none"

    @classmethod
    def parse(cls, value: object) -> SplitStrategy:
        """Parse a strategy from an enum member or case-insensitive text token."""

        if isinstance(value, SplitStrategy):
            return value
        token = str(value).strip().lower() if value is not None else ""
        for member in cls:
            if member.value == token:
                return member
        supported = ", ".join(member.value for member in cls)
        raise ConfigurationError(
            f"Unsupported split strategy `{value}`; supported: {supported}.",
        )


@dataclass(frozen=True, slots=True)
class CleaningOptions:
    """Cleaning directives and page range for one preparation call.

    Attributes:
        remove_headers_footers: Remove repeating headers and footers.
        remove_page_numbers: Remove page numbering.
        normalize_whitespace: Collapse whitespace into a continuous text flow.
        linearize_tables: Rewrite tables as readable linear prose.
        start_page: Optional 1-based first page to process.
        end_page: Optional 1-based last page to process.
    """

    remove_headers_footers: bool = True
    remove_page_numbers: bool = True
    normalize_whitespace: bool = True
    linearize_tables: bool = True
    start_page: int | None = None
    end_page: int | None = None

    def validate(self) -> None:
        """Validate option types and page bounds."""

        for field_name in (
            "remove_headers_footers",
            "remove_page_numbers",
            "normalize_whitespace",
            "linearize_tables",
        ):
            if not isinstance(getattr(self, field_name), bool):
                raise ConfigurationError(f"`{field_name}` must be a boolean value.")
        for field_name in ("start_page", "end_page"):
            value = getattr(self, field_name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(
                    f"`{field_name}` must be a positive integer when set.",
                    hint="Page numbers are 1-based.",
                )

    @property
    def has_page_range(self) -> bool:
        """Return whether at least one page bound is set."""

        return self.start_page is not None or self.end_page is not None

    @property
    def has_inverted_range(self) -> bool:
        """Return whether both bounds are set with the end before the start."""

        return (
            self.start_page is not None
            and self.end_page is not None
            and self.end_page < self.start_page
        )


@dataclass(frozen=True, slots=True)
class EncodedDocument:
    """Whole-document payload ready for inline transmission.

    Attributes:
        data: Raw document bytes.
        media_type: Declared MIME type of the document.
        file_name: Original file name, used for diagnostics only.
    """

    data: bytes
    media_type: str
    file_name: str = "document"

    @property
    def size_bytes(self) -> int:
        """Return payload size in bytes."""

        return len(self.data)

    def as_base64(self) -> str:
        """Return the payload as ASCII-safe base64 text."""

        return base64.b64encode(self.data).decode("ascii")


@dataclass(frozen=True, slots=True)
class Chapter:
    """A titled unit of cleaned narration text.

    Attributes:
        index: 1-based position in document order.
        title: Human-readable chapter title.
        content: Cleaned narration text.
    """

    index: int
    title: str
    content: str
