"""Custom exception classes for textshift.

Includes:
- Base exception with a serializable payload
- Pipeline-stage exceptions with retry metadata
- Provider exceptions split by failure kind (transport, response shape,
  configuration, availability)
"""

from datetime import UTC, datetime
from typing import Any


class TextShiftError(Exception):
    """Base exception for all textshift errors."""

    def __init__(self, detail: str, error_code: str = "INTERNAL_ERROR"):
        self.detail = detail
        self.error_code = error_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)

    def to_dict(self):
        """Convert exception to dictionary for notifications and logs."""
        return {
            "error": self.error_code,
            "detail": self.detail,
            "timestamp": self.timestamp,
        }


# =============================================================================
# PIPELINE EXCEPTIONS (with retry support)
# =============================================================================


class PipelineError(TextShiftError):
    """Base exception for all pipeline errors with retry metadata."""

    def __init__(
        self,
        detail: str,
        stage: str = "unknown",
        original_error: Exception | None = None,
        context: dict[str, Any] | None = None,
        retryable: bool = True,
    ):
        super().__init__(detail=detail, error_code=f"PIPELINE_{stage.upper()}_ERROR")
        self.stage = stage
        self.original_error = original_error
        self.context = context or {}
        self.retryable = retryable

    def to_dict(self):
        base = super().to_dict()
        base.update(
            {
                "stage": self.stage,
                "retryable": self.retryable,
                "context": self.context,
            }
        )
        return base


class TranslationError(PipelineError):
    """Error during translation."""

    def __init__(
        self,
        detail: str,
        original_error: Exception | None = None,
        source_lang: str | None = None,
        target_lang: str | None = None,
    ):
        super().__init__(
            detail=detail,
            stage="translation",
            original_error=original_error,
            context={"source_lang": source_lang, "target_lang": target_lang},
        )


class PolishError(PipelineError):
    """Error during content polishing."""

    def __init__(self, detail: str, original_error: Exception | None = None):
        super().__init__(detail=detail, stage="polish", original_error=original_error)


class FormatError(PipelineError):
    """Error while applying typographic formatting."""

    def __init__(
        self,
        detail: str,
        original_error: Exception | None = None,
        node_name: str | None = None,
    ):
        super().__init__(
            detail=detail,
            stage="format",
            original_error=original_error,
            context={"node_name": node_name} if node_name else {},
            retryable=False,
        )


# =============================================================================
# PROVIDER EXCEPTIONS
# =============================================================================


class ProviderError(PipelineError):
    """Network or HTTP failure talking to an external provider."""

    def __init__(
        self,
        detail: str,
        provider: str,
        original_error: Exception | None = None,
        status_code: int | None = None,
        retryable: bool = True,
    ):
        context: dict[str, Any] = {"provider": provider}
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(
            detail=detail,
            stage="provider",
            original_error=original_error,
            context=context,
            retryable=retryable,
        )
        self.provider = provider
        self.status_code = status_code


class ProviderResponseError(ProviderError):
    """Provider answered with an unexpected or malformed payload."""

    def __init__(
        self, detail: str, provider: str, original_error: Exception | None = None
    ):
        super().__init__(
            detail=f"Malformed response: {detail}",
            provider=provider,
            original_error=original_error,
            retryable=False,
        )
        self.error_code = "PROVIDER_RESPONSE_ERROR"


class ProviderConfigurationError(ProviderError):
    """Credentials or settings required by a provider are missing."""

    def __init__(self, provider: str, missing: list[str]):
        super().__init__(
            detail=f"{provider} is not configured (missing: {', '.join(missing)})",
            provider=provider,
            retryable=False,
        )
        self.missing = missing
        self.error_code = "PROVIDER_CONFIGURATION_ERROR"


class ProviderUnavailableError(ProviderError):
    """Liveness probe failed and no fallback provider applies."""

    def __init__(self, provider: str):
        super().__init__(
            detail=f"{provider} is currently unreachable",
            provider=provider,
            retryable=True,
        )
        self.error_code = "PROVIDER_UNAVAILABLE"
