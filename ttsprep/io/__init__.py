"""Input/output components for ttsprep.

This package contains source document encoding and chapter export helpers
used around the preparation pipeline.
"""

from .chapter_export import ChapterExporter
from .document_encoder import DocumentEncoder

__all__ = ["ChapterExporter", "DocumentEncoder"]
