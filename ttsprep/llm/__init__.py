"""LLM-facing components for instruction composition and structured output.

This package defines the instruction composer, the response contract, the
model gateway, and the mapper that validates returned chapters.
"""

from .contract import ResponseContract
from .gateway import GeminiModelGateway, ModelGateway
from .gemini_client import GeminiClient, ProviderError
from .prompts import InstructionComposer, compose_instructions
from .result_mapper import ResultMapper

__all__ = [
    "GeminiClient",
    "GeminiModelGateway",
    "InstructionComposer",
    "ModelGateway",
    "ProviderError",
    "ResponseContract",
    "ResultMapper",
    "compose_instructions",
]
