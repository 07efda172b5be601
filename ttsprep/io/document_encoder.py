"""Source document encoding for inline model transmission.

Responsibilities:
- Buffer the whole source document in memory.
- Declare a media type from the file extension.
- Map read failures to `DocumentReadError`.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

from ..errors import DocumentReadError
from ..models.datatypes import EncodedDocument
from ..parsing import normalize_optional_string


_FALLBACK_MEDIA_TYPE = "application/octet-stream"

SUPPORTED_MEDIA_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".rtf": "text/rtf",
    ".md": "text/markdown",
    ".html": "text/html",
    ".htm": "text/html",
}


def guess_media_type(file_name: str) -> str:
    """Return the declared media type for a file name."""

    suffix = Path(file_name).suffix.lower()
    if suffix in SUPPORTED_MEDIA_TYPES:
        return SUPPORTED_MEDIA_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or _FALLBACK_MEDIA_TYPE


class DocumentEncoder:
    """Read source documents into `EncodedDocument` payloads."""

    def encode(self, path: Path) -> EncodedDocument:
        """Read a document from disk and declare its media type.

        The full document is always sent; page ranges are enforced by
        instruction, never by truncating the payload.

        Raises:
            DocumentReadError: If the file cannot be read.
        """

        source = Path(path)
        try:
            data = source.read_bytes()
        except OSError as exc:
            raise DocumentReadError(
                f"Failed to read document `{source}`: {exc.strerror or exc}",
                hint="Verify the input path exists and is a readable file.",
            ) from exc
        return EncodedDocument(
            data=data,
            media_type=guess_media_type(source.name),
            file_name=source.name,
        )

    def encode_bytes(
        self,
        data: bytes,
        file_name: str,
        media_type: str | None = None,
    ) -> EncodedDocument:
        """Wrap already-uploaded bytes, declaring a media type when none is given."""

        if not isinstance(data, bytes | bytearray | memoryview):
            raise DocumentReadError(
                f"Document payload for `{file_name}` must be bytes.",
            )
        declared = normalize_optional_string(media_type) or guess_media_type(file_name)
        return EncodedDocument(data=bytes(data), media_type=declared, file_name=file_name)
