"""
Vercel OAuth provider.
"""

from typing import Any

from hookbridge.services.oauth.provider import OAuthProvider


class VercelOAuthProvider(OAuthProvider):
    name = "vercel"
    AUTH_URL = "https://vercel.com/oauth/authorize"
    TOKEN_URL = "https://api.vercel.com/v2/oauth/access_token"
    USER_INFO_URL = "https://api.vercel.com/v2/user"

    def parse_user_info(self, data: Any) -> Any:
        # Profile is wrapped: {"user": {...}}
        return data.get("user")
