"""Validation and mapping of raw model output into chapters.

The mapper is the only place that turns "the model followed instructions"
into "the internal model is well-formed". It validates structure only and
never rewrites titles or content.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors import EmptyResultError, SchemaViolationError
from ..models.datatypes import Chapter


class ResultMapper:
    """Map contract-conforming model output to an ordered `Chapter` tuple."""

    def map(self, raw: str) -> tuple[Chapter, ...]:
        """Parse raw JSON text and return chapters in array order.

        Raises:
            SchemaViolationError: If the text is not JSON or breaks the contract.
            EmptyResultError: If the `chapters` array is empty.
        """

        payload = self._parse(raw)
        entries = payload.get("chapters")
        if entries is None:
            raise SchemaViolationError("Model output is missing the `chapters` array.")
        if not isinstance(entries, list):
            raise SchemaViolationError("Model output field `chapters` must be an array.")
        if not entries:
            raise EmptyResultError(
                "Model output contains no chapters.",
                hint="Retry, or try a different document or page range.",
            )

        return tuple(
            self._map_entry(position, entry)
            for position, entry in enumerate(entries, start=1)
        )

    @staticmethod
    def _parse(raw: str) -> dict[str, Any]:
        """Decode raw text into a top-level JSON object."""

        if not isinstance(raw, str):
            raise SchemaViolationError("Model output must be JSON text.")
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SchemaViolationError(f"Model output is not valid JSON: {exc.msg}.") from exc
        if not isinstance(payload, dict):
            raise SchemaViolationError("Model output must be a JSON object.")
        return payload

    @staticmethod
    def _map_entry(position: int, entry: Any) -> Chapter:
        """Validate one chapter entry and convert it to a `Chapter`."""

        if not isinstance(entry, dict):
            raise SchemaViolationError(f"Chapter entry {position} must be an object.")
        for field_name in ("title", "content"):
            if field_name not in entry:
                raise SchemaViolationError(
                    f"Chapter entry {position} is missing `{field_name}`."
                )
            if not isinstance(entry[field_name], str):
                raise SchemaViolationError(
                    f"Chapter entry {position} field `{field_name}` must be a string."
                )
        if not entry["title"].strip():
            raise SchemaViolationError(f"Chapter entry {position} has a blank title.")
        return Chapter(index=position, title=entry["title"], content=entry["content"])
