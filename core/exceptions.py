"""Custom exception hierarchy for the Ollama/OpenAI proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class InvalidURL(ProxyError):
    """Raised when a URL cannot be parsed as an absolute URL."""


class BadRequest(ProxyError):
    """Request body is missing, not JSON, or lacks a string ``model`` field."""


class UpstreamError(ProxyError):
    """Raised when forwarding to an upstream provider fails.

    Attributes:
        message: Error message
        status_code: HTTP status code to report to the caller (optional)
        provider: Upstream route name (e.g., 'openai', 'ollama')
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.provider = provider


class UpstreamTimeoutError(UpstreamError):
    """Raised when an upstream provider request times out."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, status_code=504, provider=provider)


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to an upstream provider."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, status_code=502, provider=provider)
