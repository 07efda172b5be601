"""Domain exceptions for document preparation and CLI diagnostics.

Every failure surfaced by the preparation pipeline is a `PreparationError`
subclass carrying the stage it occurred in, a detail message, and an optional
actionable hint. No partial results accompany a failure.
"""

from __future__ import annotations


class PreparationError(RuntimeError):
    """Base class for stage-scoped preparation failures."""

    stage = "prepare"

    def __init__(
        self,
        detail: str,
        *,
        stage: str | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped preparation error."""

        super().__init__(detail)
        self.detail = detail
        self.hint = hint
        if stage is not None:
            self.stage = stage


class ConfigurationError(PreparationError, ValueError):
    """Raised when cleaning options or runtime settings are invalid."""

    stage = "config"


class DocumentReadError(PreparationError):
    """Raised when the source document cannot be read."""

    stage = "encode"


class AuthError(PreparationError):
    """Raised when no valid provider credential is available."""

    stage = "invoke"


class TransportError(PreparationError):
    """Raised when the model service cannot be reached."""

    stage = "invoke"


class ModelError(PreparationError):
    """Raised when the model service fails, is overloaded, or refuses output."""

    stage = "invoke"


class SchemaViolationError(PreparationError):
    """Raised when model output does not conform to the response contract."""

    stage = "map"


class EmptyResultError(SchemaViolationError):
    """Raised when model output conforms structurally but carries no chapters."""
