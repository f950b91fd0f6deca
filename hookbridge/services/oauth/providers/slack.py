"""
Slack OAuth provider (OAuth v2).

Slack reports errors as HTTP 200 with ``{"ok": false, "error": "..."}``,
so every response is checked for ``ok`` before it is used.
"""

import logging
from typing import Any

from hookbridge.core.exceptions import OAuthError
from hookbridge.models.contracts.integrations import IntegrationContext
from hookbridge.models.contracts.oauth import OAuthTokens
from hookbridge.services.oauth.provider import OAuthProvider

logger = logging.getLogger(__name__)


class SlackOAuthProvider(OAuthProvider):
    name = "slack"
    AUTH_URL = "https://slack.com/oauth/v2/authorize"
    TOKEN_URL = "https://slack.com/api/oauth.v2.access"
    USER_INFO_URL = "https://slack.com/api/users.identity"
    REVOKE_URL = "https://slack.com/api/auth.revoke"
    scope_separator = ","

    def _check_token_response(self, data: dict[str, Any]) -> None:
        if not data.get("ok"):
            raise OAuthError(f"Slack OAuth error: {data.get('error')}", details=data)

    def parse_token_response(self, data: dict[str, Any]) -> OAuthTokens:
        tokens = super().parse_token_response(data)
        # Slack sends token_type "bot"/"user"; the Authorization scheme is always Bearer
        return tokens.model_copy(update={"token_type": "Bearer"})

    def parse_user_info(self, data: Any) -> Any:
        if not data.get("ok"):
            raise OAuthError(f"Slack API error: {data.get('error')}", details=data)
        return data.get("user")

    async def revoke_tokens(
        self,
        tokens: OAuthTokens,
        context: IntegrationContext | None = None,
    ) -> None:
        response = await self.http.post(
            self.REVOKE_URL,
            data={"token": tokens.access_token},
            headers=self.create_auth_headers(tokens),
        )
        body = self._json_or_raise(response, "Token revocation failed")
        if not body.get("ok"):
            raise OAuthError(f"Slack API error: {body.get('error')}", details=body)

        logger.info("Revoked Slack token")
