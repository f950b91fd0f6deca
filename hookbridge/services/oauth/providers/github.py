"""
GitHub OAuth provider.
"""

import logging

from hookbridge.core.exceptions import ConfigurationError
from hookbridge.models.contracts.integrations import IntegrationContext
from hookbridge.models.contracts.oauth import OAuthTokens
from hookbridge.services.oauth.provider import OAuthProvider

logger = logging.getLogger(__name__)


class GitHubOAuthProvider(OAuthProvider):
    """
    GitHub OAuth Apps.

    The token endpoint answers 200 with an ``error`` field on failure, which
    the base response check already rejects.
    """

    name = "github"
    AUTH_URL = "https://github.com/login/oauth/authorize"
    TOKEN_URL = "https://github.com/login/oauth/access_token"
    USER_INFO_URL = "https://api.github.com/user"
    REVOKE_URL = "https://api.github.com/applications/{client_id}/grant"

    async def revoke_tokens(
        self,
        tokens: OAuthTokens,
        context: IntegrationContext | None = None,
    ) -> None:
        """Delete the app grant, authenticating with the client credentials."""
        if not self.config.client_secret:
            raise ConfigurationError("GitHub token revocation requires a client secret")

        response = await self.http.request(
            "DELETE",
            self.REVOKE_URL.format(client_id=self.config.client_id),
            auth=(self.config.client_id, self.config.client_secret),
            headers={"Accept": "application/vnd.github+json"},
            json={"access_token": tokens.access_token},
        )
        if response.status_code != 204:
            self._json_or_raise(response, "Token revocation failed")

        logger.info("Revoked GitHub OAuth grant")
