"""
hookbridge: OAuth connection and webhook ingestion for third-party platforms.

    from hookbridge import Integration

    integration = Integration({
        "name": "github",
        "version": "1.0.0",
        "provider": "github",
        "webhooks": {"endpoint": "https://example.com/hooks/github", "secret": "..."},
    })
    integration.on_webhook("push", handle_push)
    result = await integration.handle_webhook(headers, body, raw_body, context)
"""

from hookbridge.core.exceptions import (
    ApiError,
    ConfigurationError,
    HookbridgeError,
    OAuthError,
    UnsupportedAlgorithmError,
)
from hookbridge.integration import Integration
from hookbridge.models import *  # noqa: F401,F403
from hookbridge.models import __all__ as _model_names
from hookbridge.services.api import ApiClient, ApiResponse, RateLimiter
from hookbridge.services.events import EventEmitter
from hookbridge.services.oauth import OAuthProvider, create_oauth_provider
from hookbridge.services.webhooks import (
    WebhookManager,
    WebhookPayload,
    WebhookProcessingResult,
    WebhookProcessor,
    WebhookValidator,
)

__version__ = "1.0.0"

__all__ = [
    *_model_names,
    "Integration",
    "EventEmitter",
    "WebhookManager",
    "WebhookProcessor",
    "WebhookValidator",
    "WebhookPayload",
    "WebhookProcessingResult",
    "OAuthProvider",
    "create_oauth_provider",
    "ApiClient",
    "ApiResponse",
    "RateLimiter",
    "HookbridgeError",
    "ConfigurationError",
    "UnsupportedAlgorithmError",
    "OAuthError",
    "ApiError",
]
