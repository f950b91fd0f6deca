"""
Netlify OAuth provider.
"""

from hookbridge.services.oauth.provider import OAuthProvider


class NetlifyOAuthProvider(OAuthProvider):
    name = "netlify"
    AUTH_URL = "https://app.netlify.com/authorize"
    TOKEN_URL = "https://api.netlify.com/oauth/token"
    USER_INFO_URL = "https://api.netlify.com/api/v1/user"
