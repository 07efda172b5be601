"""Structured-output contract between ttsprep and the cleaning model.

Responsibilities:
- Declare the chapter-list schema the model output must satisfy.
- Render the schema as JSON Schema and as the Gemini `responseSchema` dialect.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


CHAPTERS_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "chapters": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "A concise title for the chapter or section.",
                    },
                    "content": {
                        "type": "string",
                        "description": "The full, cleaned text content of the chapter.",
                    },
                },
                "required": ["title", "content"],
            },
        },
    },
    "required": ["chapters"],
}


def _to_gemini_schema(node: Any) -> Any:
    """Recursively rewrite JSON Schema nodes into Gemini's OpenAPI subset."""

    if isinstance(node, list):
        return [_to_gemini_schema(item) for item in node]
    if not isinstance(node, dict):
        return node

    converted: dict[str, Any] = {}
    for key, value in node.items():
        if key == "type" and isinstance(value, str):
            converted[key] = value.upper()
        elif key == "minItems":
            converted[key] = str(value)
        elif key == "properties" and isinstance(value, dict):
            converted[key] = {name: _to_gemini_schema(child) for name, child in value.items()}
        else:
            converted[key] = _to_gemini_schema(value)
    return converted


@dataclass(frozen=True, slots=True)
class ResponseContract:
    """Authoritative response schema for one model invocation."""

    schema: dict[str, Any] = field(
        default_factory=lambda: copy.deepcopy(CHAPTERS_RESPONSE_SCHEMA)
    )
    media_type: str = "application/json"

    def as_json_schema(self) -> dict[str, Any]:
        """Return a defensive copy of the JSON Schema form."""

        return copy.deepcopy(self.schema)

    def as_gemini_schema(self) -> dict[str, Any]:
        """Return the schema in the Gemini `responseSchema` dialect."""

        return _to_gemini_schema(self.schema)
