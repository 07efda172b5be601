"""Gemini HTTP client for schema-constrained document cleaning.

Responsibilities:
- Send one `generateContent` request with text and inline document parts.
- Normalize response text extraction from candidate parts.
- Raise `ProviderError` with a deterministic `failure_kind` for gateway mapping.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Any

import requests


class ProviderError(RuntimeError):
    """Raised when a provider request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        """Initialize provider error metadata for stage-aware diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code


class GeminiClient:
    """Minimal requests-based client for the Gemini REST API."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: float = 600.0,
    ) -> None:
        """Initialize Gemini HTTP client settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def require_api_key(self) -> None:
        """Require API key presence before issuing requests."""

        if not self.api_key:
            raise ProviderError(
                "Missing Gemini API key. Set `GEMINI_API_KEY`, use `--api-key`, or "
                "`--prompt-api-key`.",
                failure_kind="missing_api_key",
            )

    def generate_structured_json(
        self,
        *,
        model: str,
        instruction: str,
        document_base64: str,
        document_media_type: str,
        response_schema: dict[str, Any],
        response_media_type: str = "application/json",
    ) -> str:
        """Return the JSON text produced by one schema-constrained generation."""

        self.require_api_key()

        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": instruction},
                        {
                            "inline_data": {
                                "mime_type": document_media_type,
                                "data": document_base64,
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {
                "responseMimeType": response_media_type,
                "responseSchema": response_schema,
            },
        }
        raw_payload = self._post_json_bytes(
            endpoint_path=f"/models/{model}:generateContent",
            payload=payload,
        ).decode("utf-8")
        return self._extract_candidate_text(raw_payload)

    def _post_json_bytes(self, *, endpoint_path: str, payload: dict[str, Any]) -> bytes:
        """POST a JSON payload and map failures consistently."""

        endpoint = f"{self.base_url}{endpoint_path}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(
                endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Gemini request timed out."
            else:
                detail = f"Gemini request transport error: {self._short_message(str(exc))}"
            raise ProviderError(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise ProviderError("Gemini request timed out.", failure_kind="timeout") from exc

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        return bytes(response.content).decode("utf-8", errors="replace").strip()

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bAIza[0-9A-Za-z_-]{20,}\b", "[redacted-key]", text)
        redacted = re.sub(r"(?i)key=[A-Za-z0-9._-]{12,}", "key=[redacted-key]", redacted)
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider message and optional provider status code."""

        if not body:
            return "", None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        provider_code: str | None = None
        message: str | None = None
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            payload = payload[0]
        if isinstance(payload, dict):
            error_payload = payload.get("error")
            if isinstance(error_payload, dict):
                status_value = error_payload.get("status")
                if isinstance(status_value, str) and status_value.strip():
                    provider_code = status_value.strip()
                message_value = error_payload.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()

        if message is None:
            message = body

        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_code

    @staticmethod
    def _classify_http_failure(
        status_code: int,
        provider_message: str,
        provider_code: str | None,
    ) -> str:
        """Classify HTTP errors into deterministic diagnostic kinds."""

        message_lower = provider_message.lower()
        normalized_code = provider_code.upper() if provider_code is not None else ""

        if (
            status_code in {401, 403}
            or normalized_code in {"UNAUTHENTICATED", "PERMISSION_DENIED"}
            or "api key not valid" in message_lower
        ):
            return "invalid_api_key"
        if status_code in {429, 503} or normalized_code in {"RESOURCE_EXHAUSTED", "UNAVAILABLE"}:
            return "overloaded"
        if normalized_code == "NOT_FOUND" and "model" in message_lower:
            return "invalid_model"
        if status_code in {408, 504} or normalized_code == "DEADLINE_EXCEEDED":
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_provider_error(cls, exc: requests.HTTPError) -> ProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        body = cls._decode_error_body(exc)
        provider_message, provider_code = cls._extract_provider_message(body)
        failure_kind = cls._classify_http_failure(status_code, provider_message, provider_code)

        headline = {
            "invalid_api_key": "Gemini authentication failed",
            "overloaded": "Gemini is overloaded or rate limited",
            "invalid_model": "Gemini rejected the selected model",
            "timeout": "Gemini request timed out",
        }.get(failure_kind, "Gemini request failed")

        if provider_message:
            detail = f"{headline} (HTTP {status_code}): {provider_message}"
        else:
            detail = f"{headline} (HTTP {status_code})."

        return ProviderError(
            detail,
            failure_kind=failure_kind,
            status_code=status_code,
            provider_code=provider_code,
        )

    @staticmethod
    def _extract_candidate_text(raw_payload: str) -> str:
        """Extract the first candidate's concatenated text parts."""

        try:
            payload = json.loads(raw_payload)
        except json.JSONDecodeError as exc:
            raise ProviderError("Gemini returned invalid JSON payload.") from exc
        if not isinstance(payload, dict):
            raise ProviderError("Gemini response payload is not an object.")

        prompt_feedback = payload.get("promptFeedback")
        if isinstance(prompt_feedback, dict) and prompt_feedback.get("blockReason"):
            raise ProviderError(
                f"Gemini blocked the request: {prompt_feedback['blockReason']}.",
                failure_kind="blocked",
            )

        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise ProviderError("Gemini response missing non-empty `candidates` list.")

        first_candidate = candidates[0]
        if not isinstance(first_candidate, dict):
            raise ProviderError("Gemini response `candidates[0]` is malformed.")

        content = first_candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            finish_reason = first_candidate.get("finishReason", "unknown")
            raise ProviderError(
                f"Gemini response has no content parts (finish reason: {finish_reason}).",
                failure_kind="blocked" if finish_reason == "SAFETY" else "unknown",
            )

        text = "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text.strip():
            raise ProviderError("Gemini response content is empty.")
        return text
