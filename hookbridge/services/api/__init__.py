"""
Generic platform API client.
"""

from hookbridge.services.api.client import ApiClient, ApiRequest, ApiResponse
from hookbridge.services.api.rate_limiter import RateLimiter, RateLimitState

__all__ = [
    "ApiClient",
    "ApiRequest",
    "ApiResponse",
    "RateLimiter",
    "RateLimitState",
]
