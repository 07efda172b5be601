"""Integration-test fixtures for deterministic provider and credential behavior."""

from __future__ import annotations

import pytest

from ttsprep.llm.gemini_client import GeminiClient


INTEGRATION_RESPONSE = (
    '{"chapters":[{"title":"Intro","content":"Hello world."},'
    '{"title":"Conclusion","content":"The end."}]}'
)


class InMemoryCredentialStore:
    """Credential store stub so CLI tests never touch the OS keyring."""

    def __init__(self) -> None:
        """Initialize with no stored key."""

        self.api_key: str | None = None

    def get_api_key(self) -> str | None:
        """Return the stored key, if any."""

        return self.api_key

    def set_api_key(self, api_key: str) -> None:
        """Store a normalized key value."""

        self.api_key = api_key.strip()

    def clear_api_key(self) -> bool:
        """Clear the stored key and report whether one existed."""

        existed = self.api_key is not None
        self.api_key = None
        return existed


@pytest.fixture
def generation_calls() -> list[dict[str, object]]:
    """Collect keyword arguments of mocked Gemini generation calls."""

    return []


@pytest.fixture(autouse=True)
def _mock_gemini_generation(
    monkeypatch: pytest.MonkeyPatch, generation_calls: list[dict[str, object]]
) -> None:
    """Mock Gemini generation in integration tests to avoid network access."""

    def _mock_generate(self: GeminiClient, **kwargs: object) -> str:
        """Return a deterministic two-chapter payload after the credential check."""

        self.require_api_key()
        generation_calls.append(kwargs)
        return INTEGRATION_RESPONSE

    monkeypatch.setattr(GeminiClient, "generate_structured_json", _mock_generate)


@pytest.fixture(autouse=True)
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Replace secure storage and clear ambient provider environment variables."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("ttsprep.cli.create_credential_store", lambda: store)
    for key in ("GEMINI_API_KEY", "TTSPREP_PROVIDER", "TTSPREP_MODEL", "TTSPREP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)
    return store
