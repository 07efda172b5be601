"""Instruction composition for the document cleaning model.

Responsibilities:
- Map `CleaningOptions` and `SplitStrategy` to one deterministic instruction text.
- Keep composition pure so it can be tested without any I/O.

The composed payload has a fixed framing preamble, an optional page-range
clause, the cleaning clause, the splitting clause, and a closing output
requirement, in that order.
"""

from __future__ import annotations

from ..models.datatypes import CleaningOptions, SplitStrategy


FULL_DOCUMENT_TITLE = "Full Document"

_PREAMBLE = (
    "You are an expert text processing engine that prepares document content for "
    "Text-to-Speech (TTS) narration. Your goal is to produce clean, structured, and "
    "easily narratable text.\n\n"
    "A document file is attached. Perform the following tasks."
)

_OUTPUT_REQUIREMENT = (
    "Your final output MUST be a single valid JSON object matching the provided "
    "response schema. Do not include any text or markdown formatting outside of the "
    "JSON object."
)

# (option attribute, clause when enabled, clause when disabled), in fixed order.
_OPTIONAL_CLEANING_RULES: tuple[tuple[str, str, str], ...] = (
    (
        "remove_headers_footers",
        "Identify and remove any repeating headers and footers.",
        "Keep headers and footers.",
    ),
    (
        "remove_page_numbers",
        "Remove all page numbering.",
        "Keep page numbering.",
    ),
    (
        "normalize_whitespace",
        "Normalize all whitespace. Remove extra spaces, tabs, and line breaks to "
        "create a smooth, continuous text flow. Separate paragraphs with a single "
        "newline.",
        "Preserve original whitespace as much as possible.",
    ),
    (
        "linearize_tables",
        "Convert any tables into a linear, readable paragraph format. For example, a "
        "row with 'Name: John, Age: 30' should become 'Name: John, Age: 30.'.",
        "Preserve table structure or represent it clearly.",
    ),
)

_FIXED_CLEANING_RULES: tuple[str, ...] = (
    "Remove superfluous artifacts like standalone URLs or footnote markers from the "
    "main body text.",
    "Remove all parentheses ().",
    'Remove all quotation marks ("").',
    "Remove all hyphens (-). If a hyphen breaks a word at the end of a line, rejoin "
    "the word.",
    "Convert all numerical digits into their full-text word equivalents in the "
    "document's own language. For example, '1,645' should become 'one thousand six "
    "hundred forty-five' and 'Chapter 10' should become 'Chapter ten'.",
    "Correct any obvious OCR errors if the source is an image-based document.",
)

_AUTO_SPLIT_INSTRUCTION = (
    "Analyze the document's structure, such as chapters or sections with clear "
    "headings, and split the cleaned text into logical chapters in document order. "
    "Give each chapter an original, concise, descriptive title."
)

_SINGLE_CHAPTER_INSTRUCTION = (
    "Process the entire document as a single, unified text block. Return exactly one "
    f"chapter titled '{FULL_DOCUMENT_TITLE}' containing the entire cleaned text."
)


class InstructionComposer:
    """Build the instruction payload sent alongside the document."""

    def cleaning_clause(self, options: CleaningOptions) -> str:
        """Return the bullet list of optional and always-on cleaning rules."""

        rules = [
            enabled_text if getattr(options, attribute) else disabled_text
            for attribute, enabled_text, disabled_text in _OPTIONAL_CLEANING_RULES
        ]
        rules.extend(_FIXED_CLEANING_RULES)
        return "\n".join(f"- {rule}" for rule in rules)

    def splitting_clause(self, strategy: SplitStrategy) -> str:
        """Return the chapter splitting instruction for a strategy."""

        if SplitStrategy.parse(strategy) is SplitStrategy.AUTO:
            return _AUTO_SPLIT_INSTRUCTION
        return _SINGLE_CHAPTER_INSTRUCTION

    def range_clause(self, options: CleaningOptions) -> str | None:
        """Return the page-range instruction, or `None` when no bound is set.

        An inverted range keeps only the start bound.
        """

        start_page = options.start_page
        end_page = options.end_page
        if options.has_inverted_range:
            end_page = None

        if start_page is not None and end_page is not None:
            return (
                "IMPORTANT: Focus your processing ONLY on the content of pages "
                f"{start_page} to {end_page} of the provided document. Ignore all "
                "content outside this page range."
            )
        if start_page is not None:
            return (
                f"IMPORTANT: Focus your processing ONLY on the content from page "
                f"{start_page} onward to the end of the provided document. Ignore all "
                "content before this page."
            )
        if end_page is not None:
            return (
                "IMPORTANT: Focus your processing ONLY on the content from the "
                f"beginning of the document up to page {end_page}. Ignore all content "
                "after this page."
            )
        return None

    def compose(self, options: CleaningOptions, strategy: SplitStrategy) -> str:
        """Return the full instruction payload for one preparation call."""

        sections = [_PREAMBLE]
        range_text = self.range_clause(options)
        if range_text is not None:
            sections.append(range_text)
        sections.append(
            "1. Analyze and clean the text. Apply the following cleaning rules:\n"
            f"{self.cleaning_clause(options)}"
        )
        sections.append(f"2. Structure the output. {self.splitting_clause(strategy)}")
        sections.append(_OUTPUT_REQUIREMENT)
        return "\n\n".join(sections)


def compose_instructions(options: CleaningOptions, strategy: SplitStrategy) -> str:
    """Compose instructions with a default `InstructionComposer`."""

    return InstructionComposer().compose(options, strategy)
