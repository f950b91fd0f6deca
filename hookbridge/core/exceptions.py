"""
Core Exceptions

Custom exceptions for hookbridge.

Internal layers (validators, providers, the API client) raise these; the
Integration façade converts them into IntegrationResult envelopes.
"""

from typing import Any


class HookbridgeError(Exception):
    """Base class for all hookbridge errors."""

    def __init__(self, message: str = "Integration error"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(HookbridgeError):
    """
    Raised when integration, OAuth or webhook configuration is unusable.

    Configuration errors are fatal and never retryable, e.g. a custom OAuth
    provider constructed without a token URL.
    """


class UnsupportedAlgorithmError(HookbridgeError):
    """Raised when a signature method has no registered validator."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Unsupported signature method: {method}")


class OAuthError(HookbridgeError):
    """
    Raised when an OAuth platform reports a failure.

    Covers both non-2xx HTTP responses and platforms that report errors
    inside a 200 response body (Slack's ``ok: false``).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ):
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ApiError(HookbridgeError):
    """Raised by ApiClient when a request fails after retries."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int | None = None,
        response: Any = None,
        retryable: bool = False,
    ):
        self.code = code
        self.status = status
        self.response = response
        self.retryable = retryable
        super().__init__(message)
