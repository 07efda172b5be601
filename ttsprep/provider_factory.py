"""Provider factory helpers for the model gateway.

Responsibilities:
- Resolve provider identifiers to concrete gateway implementations.
- Keep orchestration independent from concrete gateway construction.

Notes:
- Only `gemini` is implemented at the moment.
"""

from __future__ import annotations

from .config import ProviderRuntimeConfig
from .errors import ConfigurationError
from .llm.gateway import GeminiModelGateway, ModelGateway


class ProviderFactory:
    """Factory for provider-backed gateways used by the pipeline."""

    @staticmethod
    def create_gateway(
        provider_id: str,
        model: str,
        api_key: str | None = None,
        timeout_seconds: float = 600.0,
    ) -> ModelGateway:
        """Create a model gateway for a configured provider identifier."""

        if provider_id == "gemini":
            return GeminiModelGateway(
                model=model,
                api_key=api_key,
                timeout_seconds=timeout_seconds,
            )
        raise ConfigurationError(f"Unsupported model provider `{provider_id}`.")

    @staticmethod
    def from_runtime(runtime: ProviderRuntimeConfig) -> ModelGateway:
        """Create a gateway from resolved runtime provider settings."""

        return ProviderFactory.create_gateway(
            provider_id=runtime.provider,
            model=runtime.model,
            api_key=runtime.api_key,
            timeout_seconds=runtime.timeout_seconds,
        )
