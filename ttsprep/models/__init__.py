"""Shared typed data models for ttsprep.

This package contains dataclasses used across preparation modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import Chapter, CleaningOptions, EncodedDocument, SplitStrategy

__all__ = [
    "Chapter",
    "CleaningOptions",
    "EncodedDocument",
    "SplitStrategy",
]
