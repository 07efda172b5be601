"""Document preparation orchestration.

Responsibilities:
- Run encode, compose, invoke, and map stages for one document.
- Keep every call independent: no state is shared across invocations.
- Emit phase logs and surface the first failure without partial results.

Key types:
- `DocumentPreparer`: orchestration entry point.
"""

from __future__ import annotations

from pathlib import Path

from .errors import PreparationError
from .io.document_encoder import DocumentEncoder
from .llm.contract import ResponseContract
from .llm.gateway import ModelGateway
from .llm.prompts import InstructionComposer
from .llm.result_mapper import ResultMapper
from .models.datatypes import Chapter, CleaningOptions, EncodedDocument, SplitStrategy
from .telemetry.logger import RunLogger


class DocumentPreparer:
    """Prepare one document for TTS narration through a model gateway."""

    def __init__(
        self,
        gateway: ModelGateway,
        run_logger: RunLogger | None = None,
        encoder: DocumentEncoder | None = None,
        composer: InstructionComposer | None = None,
        mapper: ResultMapper | None = None,
        contract: ResponseContract | None = None,
    ) -> None:
        """Initialize stage collaborators; only the gateway is required."""

        self.gateway = gateway
        self.run_logger = run_logger
        self.encoder = encoder if encoder is not None else DocumentEncoder()
        self.composer = composer if composer is not None else InstructionComposer()
        self.mapper = mapper if mapper is not None else ResultMapper()
        self.contract = contract if contract is not None else ResponseContract()

    def prepare(
        self,
        path: Path,
        options: CleaningOptions,
        strategy: SplitStrategy = SplitStrategy.AUTO,
    ) -> tuple[Chapter, ...]:
        """Read a document from disk and return its cleaned chapters."""

        document = self._run_stage("encode", lambda: self.encoder.encode(path))
        return self.prepare_document(document, options, strategy)

    def prepare_bytes(
        self,
        data: bytes,
        file_name: str,
        options: CleaningOptions,
        strategy: SplitStrategy = SplitStrategy.AUTO,
        media_type: str | None = None,
    ) -> tuple[Chapter, ...]:
        """Prepare an already-uploaded document payload."""

        document = self._run_stage(
            "encode",
            lambda: self.encoder.encode_bytes(data, file_name, media_type),
        )
        return self.prepare_document(document, options, strategy)

    def prepare_document(
        self,
        document: EncodedDocument,
        options: CleaningOptions,
        strategy: SplitStrategy = SplitStrategy.AUTO,
    ) -> tuple[Chapter, ...]:
        """Compose instructions, invoke the gateway once, and map the result."""

        instruction = self._run_stage(
            "compose",
            lambda: self.build_instruction(options, strategy),
        )
        if options.has_inverted_range:
            self._warn(
                "compose",
                "inverted_page_range",
                start_page=options.start_page,
                end_page=options.end_page,
            )

        raw_output = self._run_stage(
            "invoke",
            lambda: self.gateway.invoke(instruction, document, self.contract),
            media_type=document.media_type,
            size_bytes=document.size_bytes,
        )
        chapters = self._run_stage("map", lambda: self.mapper.map(raw_output))
        for chapter in chapters:
            if not chapter.content.strip():
                self._warn("map", "empty_content", chapter=chapter.index)
        return chapters

    def build_instruction(self, options: CleaningOptions, strategy: SplitStrategy) -> str:
        """Validate options and return the composed instruction text."""

        options.validate()
        return self.composer.compose(options, SplitStrategy.parse(strategy))

    def _run_stage(self, stage: str, action, **context: object):  # type: ignore[no-untyped-def]
        """Run one stage callable with start/complete/failure logging."""

        if self.run_logger is not None:
            self.run_logger.log_stage_start(stage, **context)
        try:
            result = action()
        except PreparationError as exc:
            if self.run_logger is not None:
                self.run_logger.log_stage_failure(stage, type(exc).__name__)
            raise
        if self.run_logger is not None:
            self.run_logger.log_stage_complete(stage)
        return result

    def _warn(self, stage: str, event: str, **context: object) -> None:
        """Emit a non-fatal warning when a run logger is attached."""

        if self.run_logger is not None:
            self.run_logger.log_stage_warning(stage, event, **context)
