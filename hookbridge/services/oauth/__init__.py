"""
OAuth services for hookbridge.
"""

from hookbridge.services.oauth.provider import OAuthProvider
from hookbridge.services.oauth.providers import (
    BUILTIN_PROVIDERS,
    CustomOAuthProvider,
    GitHubOAuthProvider,
    NetlifyOAuthProvider,
    SlackOAuthProvider,
    VercelOAuthProvider,
    create_oauth_provider,
)

__all__ = [
    "OAuthProvider",
    "BUILTIN_PROVIDERS",
    "create_oauth_provider",
    "GitHubOAuthProvider",
    "VercelOAuthProvider",
    "NetlifyOAuthProvider",
    "SlackOAuthProvider",
    "CustomOAuthProvider",
]
