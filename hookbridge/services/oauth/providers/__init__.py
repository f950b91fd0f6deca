"""
Built-in OAuth providers.

Maps each Provider to its OAuthProvider class. Use create_oauth_provider()
to build one from an OAuthConfig.
"""

import httpx

from hookbridge.core.exceptions import ConfigurationError
from hookbridge.models.contracts.oauth import OAuthConfig
from hookbridge.models.enums import Provider
from hookbridge.services.oauth.provider import OAuthProvider
from hookbridge.services.oauth.providers.custom import CustomOAuthProvider
from hookbridge.services.oauth.providers.github import GitHubOAuthProvider
from hookbridge.services.oauth.providers.netlify import NetlifyOAuthProvider
from hookbridge.services.oauth.providers.slack import SlackOAuthProvider
from hookbridge.services.oauth.providers.vercel import VercelOAuthProvider

BUILTIN_PROVIDERS: dict[Provider, type[OAuthProvider]] = {
    Provider.GITHUB: GitHubOAuthProvider,
    Provider.VERCEL: VercelOAuthProvider,
    Provider.NETLIFY: NetlifyOAuthProvider,
    Provider.SLACK: SlackOAuthProvider,
    Provider.CUSTOM: CustomOAuthProvider,
}


def create_oauth_provider(
    provider: Provider | str,
    config: OAuthConfig,
    name: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> OAuthProvider:
    """
    Instantiate the OAuth provider for a platform.

    Args:
        provider: Platform identifier
        config: OAuth client configuration
        name: Provider name override (used for custom integrations)
        http_client: Shared HTTP client; one is created when omitted

    Raises:
        ConfigurationError: Unknown platform or unusable configuration
    """
    try:
        provider_class = BUILTIN_PROVIDERS[Provider(provider)]
    except (KeyError, ValueError):
        raise ConfigurationError(f"Unsupported OAuth provider: {provider}") from None

    return provider_class(config, name=name, http_client=http_client)


__all__ = [
    "BUILTIN_PROVIDERS",
    "create_oauth_provider",
    "GitHubOAuthProvider",
    "VercelOAuthProvider",
    "NetlifyOAuthProvider",
    "SlackOAuthProvider",
    "CustomOAuthProvider",
]
