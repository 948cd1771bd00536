"""Error taxonomy for transcript acquisition and summarization."""

from typing import Optional


class TLDRError(Exception):
    """Base exception for the TLDR pipeline.

    ``client_error`` marks failures caused by the request itself (bad URL,
    no transcript) as opposed to failures of our own dependencies.
    """

    def __init__(
        self,
        detail: str,
        error_code: str = "TLDR_ERROR",
        client_error: bool = False
    ):
        self.detail = detail
        self.message = detail  # Alias for compatibility
        self.error_code = error_code
        self.client_error = client_error
        super().__init__(detail)

    @property
    def kind(self) -> str:
        """Name used for the error kind in boundary payloads."""
        return type(self).__name__


class InvalidIdentifier(TLDRError):
    """Malformed or unsupported URL / video identifier. Never retried."""

    def __init__(self, detail: str = "Invalid YouTube URL format"):
        super().__init__(
            detail=detail,
            error_code="INVALID_IDENTIFIER",
            client_error=True
        )


class EmptyTranscript(TLDRError):
    """A strategy or parser produced no usable transcript text."""

    def __init__(self, detail: str = "Transcript content is empty"):
        super().__init__(
            detail=detail,
            error_code="EMPTY_TRANSCRIPT",
            client_error=True
        )


class StrategyExhausted(TLDRError):
    """Every acquisition strategy failed or returned unusable text."""

    def __init__(self, detail: str = "No transcript available", reason: Optional[str] = None):
        if reason:
            detail = f"{detail}. Reason: {reason}"
        super().__init__(
            detail=detail,
            error_code="STRATEGY_EXHAUSTED",
            client_error=True
        )
        self.reason = reason


class ProviderTransientFailure(TLDRError):
    """Network, timeout, non-2xx or empty payload from an LLM provider."""

    def __init__(self, detail: str, provider: str = "provider"):
        super().__init__(
            detail=f"{provider}: {detail}",
            error_code="PROVIDER_FAILURE"
        )
        self.provider = provider


class ProviderNotConfigured(TLDRError):
    """An LLM provider has no credentials. Not retried."""

    def __init__(self, provider: str = "provider"):
        super().__init__(
            detail=f"{provider}: API key not configured",
            error_code="PROVIDER_NOT_CONFIGURED"
        )
        self.provider = provider


class AllProvidersFailed(TLDRError):
    """Primary and secondary LLM providers are both exhausted."""

    def __init__(self, detail: str = "All LLM providers failed"):
        super().__init__(
            detail=detail,
            error_code="ALL_PROVIDERS_FAILED"
        )


class AnalyticsFailure(TLDRError):
    """Analytics sink failure. Logged only, never surfaced to callers."""

    def __init__(self, detail: str = "Failed to log request"):
        super().__init__(
            detail=detail,
            error_code="ANALYTICS_FAILURE"
        )


def status_code_for(error: Exception) -> int:
    """Suggested status for an error: 400 for client errors, 500 otherwise."""
    if isinstance(error, TLDRError) and error.client_error:
        return 400
    return 500
