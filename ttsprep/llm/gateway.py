"""Model gateway implementations for one schema-constrained cleaning call.

Responsibilities:
- Issue exactly one external request per invocation, without retry or caching.
- Map provider failures onto the domain error taxonomy.
"""

from __future__ import annotations

from typing import Protocol

from ..errors import AuthError, ModelError, TransportError
from ..models.datatypes import EncodedDocument
from .contract import ResponseContract
from .gemini_client import GeminiClient, ProviderError


DEFAULT_GEMINI_MODEL = "gemini-2.5-pro"

_AUTH_FAILURE_KINDS = frozenset({"missing_api_key", "invalid_api_key"})
_TRANSPORT_FAILURE_KINDS = frozenset({"transport", "timeout"})


class ModelGateway(Protocol):
    """Protocol for gateways returning raw structured model output."""

    def invoke(
        self,
        instruction: str,
        document: EncodedDocument,
        contract: ResponseContract,
    ) -> str:
        """Return raw JSON text produced for the instruction and document."""


class GeminiModelGateway:
    """Gateway backed by Gemini structured-output generation."""

    provider_id = "gemini"

    def __init__(
        self,
        model: str = DEFAULT_GEMINI_MODEL,
        api_key: str | None = None,
        timeout_seconds: float = 600.0,
        client: GeminiClient | None = None,
    ) -> None:
        """Initialize the gateway with an injected credential or client."""

        self.model = model
        self.client = (
            client
            if client is not None
            else GeminiClient(api_key=api_key, timeout_seconds=timeout_seconds)
        )

    def invoke(
        self,
        instruction: str,
        document: EncodedDocument,
        contract: ResponseContract,
    ) -> str:
        """Send one generation request and return its raw JSON text."""

        try:
            return self.client.generate_structured_json(
                model=self.model,
                instruction=instruction,
                document_base64=document.as_base64(),
                document_media_type=document.media_type,
                response_schema=contract.as_gemini_schema(),
                response_media_type=contract.media_type,
            )
        except ProviderError as exc:
            raise map_provider_error(exc) from exc


def map_provider_error(exc: ProviderError) -> AuthError | TransportError | ModelError:
    """Translate a `ProviderError` into the matching domain error."""

    detail = str(exc)
    if exc.failure_kind in _AUTH_FAILURE_KINDS:
        return AuthError(
            detail,
            hint="Configure a Gemini API key via `GEMINI_API_KEY`, `--api-key`, or "
            "`ttsprep credentials --set-api-key`.",
        )
    if exc.failure_kind in _TRANSPORT_FAILURE_KINDS:
        return TransportError(
            detail,
            hint="Check network connectivity and retry.",
        )
    if exc.failure_kind == "overloaded":
        return ModelError(detail, hint="The model might be overloaded; retry later.")
    if exc.failure_kind == "invalid_model":
        return ModelError(detail, hint="Pass a supported model id via `--model`.")
    return ModelError(
        detail,
        hint="The document format could be incompatible with the model.",
    )
