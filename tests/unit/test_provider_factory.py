"""Unit tests for provider factory gateway construction."""

from __future__ import annotations

import pytest

from ttsprep.config import ProviderRuntimeConfig
from ttsprep.errors import ConfigurationError
from ttsprep.llm.gateway import GeminiModelGateway
from ttsprep.provider_factory import ProviderFactory


def test_create_gateway_returns_gemini_gateway_with_runtime_values() -> None:
    """The `gemini` provider id should produce a configured Gemini gateway."""

    gateway = ProviderFactory.from_runtime(
        ProviderRuntimeConfig(
            provider="gemini",
            model="gemini-2.5-flash",
            timeout_seconds=42.0,
            api_key="test-key",
        )
    )

    assert isinstance(gateway, GeminiModelGateway)
    assert gateway.model == "gemini-2.5-flash"
    assert gateway.client.timeout_seconds == 42.0
    assert gateway.client.api_key == "test-key"


def test_create_gateway_rejects_unknown_provider() -> None:
    """Unknown provider identifiers should fail with a configuration error."""

    with pytest.raises(ConfigurationError, match="Unsupported model provider `openai`"):
        ProviderFactory.create_gateway("openai", model="gpt-4.1")
