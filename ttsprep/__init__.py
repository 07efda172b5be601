"""Top-level package for ttsprep.

This package prepares documents for Text-to-Speech narration by delegating
text cleaning to a structured-output language model and mapping the result
into ordered chapters. The main orchestration entry point is
`DocumentPreparer`.
"""

from .models.datatypes import Chapter, CleaningOptions, EncodedDocument, SplitStrategy
from .pipeline import DocumentPreparer

__all__ = [
    "Chapter",
    "CleaningOptions",
    "DocumentPreparer",
    "EncodedDocument",
    "SplitStrategy",
    "__version__",
]

__version__ = "0.1.0"
