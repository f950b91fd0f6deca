"""
Contract models (pydantic) for hookbridge configuration and results.
"""

from hookbridge.models.contracts.api import ApiConfig, RateLimitConfig
from hookbridge.models.contracts.integrations import (
    IntegrationConfig,
    IntegrationContext,
    IntegrationError,
    IntegrationResult,
)
from hookbridge.models.contracts.oauth import (
    OAuthAuthorizationResult,
    OAuthConfig,
    OAuthRefreshResult,
    OAuthState,
    OAuthTokenResult,
    OAuthTokens,
    PKCEChallenge,
)
from hookbridge.models.contracts.webhooks import RetryPolicy, WebhookConfig

__all__ = [
    "ApiConfig",
    "RateLimitConfig",
    "IntegrationConfig",
    "IntegrationContext",
    "IntegrationError",
    "IntegrationResult",
    "OAuthAuthorizationResult",
    "OAuthConfig",
    "OAuthRefreshResult",
    "OAuthState",
    "OAuthTokenResult",
    "OAuthTokens",
    "PKCEChallenge",
    "RetryPolicy",
    "WebhookConfig",
]
