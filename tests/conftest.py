"""Shared pytest fixtures for the full ttsprep test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from ttsprep.llm.contract import ResponseContract
from ttsprep.models.datatypes import EncodedDocument


TWO_CHAPTER_RESPONSE = (
    '{"chapters":[{"title":"Intro","content":"Hello world."},'
    '{"title":"Conclusion","content":"The end."}]}'
)


class RecordingGateway:
    """Model gateway stub returning a fixed raw payload and recording calls."""

    def __init__(self, raw_output: str = TWO_CHAPTER_RESPONSE) -> None:
        """Initialize the stub with the raw output every call returns."""

        self.raw_output = raw_output
        self.calls: list[tuple[str, EncodedDocument, ResponseContract]] = []

    def invoke(
        self,
        instruction: str,
        document: EncodedDocument,
        contract: ResponseContract,
    ) -> str:
        """Record the call and return the configured raw output."""

        self.calls.append((instruction, document, contract))
        return self.raw_output


@pytest.fixture
def sample_document_path(tmp_path: Path) -> Path:
    """Provide a small plain-text `sample.txt` source document."""

    path = tmp_path / "sample.txt"
    path.write_text(
        "Intro\n\nHello world.\n\nPage 1\n\nConclusion\n\nThe end.\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def recording_gateway() -> RecordingGateway:
    """Provide a gateway stub answering with a two-chapter response."""

    return RecordingGateway()


@pytest.fixture
def make_recording_gateway():  # type: ignore[no-untyped-def]
    """Provide a factory for gateway stubs with custom raw output."""

    return RecordingGateway
