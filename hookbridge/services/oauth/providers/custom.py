"""
Custom OAuth provider for any standard OAuth 2.0 platform.
"""

from typing import Any

import httpx

from hookbridge.core.exceptions import ConfigurationError
from hookbridge.models.contracts.oauth import OAuthConfig, OAuthTokens
from hookbridge.services.oauth.provider import OAuthProvider


class CustomOAuthProvider(OAuthProvider):
    """
    Provider whose endpoints all come from OAuthConfig.

    auth_url and token_url are required; user info is fetched only when
    user_info_url is configured.
    """

    name = "custom"

    def __init__(
        self,
        config: OAuthConfig,
        name: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not config.auth_url or not config.token_url:
            raise ConfigurationError("Custom OAuth provider requires auth_url and token_url")
        super().__init__(config, name=name, http_client=http_client)

    async def _fetch_user_info_after_exchange(self, tokens: OAuthTokens) -> Any:
        if not self.user_info_url:
            return None
        return await self.get_user_info(tokens)
