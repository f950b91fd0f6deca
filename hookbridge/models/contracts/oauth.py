"""
OAuth contract models for hookbridge.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ==================== CONFIGURATION ====================


class OAuthConfig(BaseModel):
    """
    OAuth client configuration for one integration.

    auth_url, token_url and user_info_url override the platform defaults;
    the custom provider requires auth_url and token_url.
    """
    client_id: str = Field(..., min_length=1)
    client_secret: str | None = Field(
        default=None,
        description="Client secret (optional for PKCE flows)"
    )
    redirect_uri: str = Field(..., pattern=r"^https?://")
    scopes: list[str] = Field(default_factory=list)
    auth_url: str | None = Field(default=None, pattern=r"^https?://")
    token_url: str | None = Field(default=None, pattern=r"^https?://")
    user_info_url: str | None = Field(default=None, pattern=r"^https?://")
    use_pkce: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator('client_secret', 'auth_url', 'token_url', 'user_info_url', mode='before')
    @classmethod
    def convert_empty_strings(cls, v):
        """Convert empty strings to None for optional fields"""
        if v == '':
            return None
        return v

    @field_validator('scopes', mode='before')
    @classmethod
    def parse_scopes(cls, v):
        """Accept scopes as string (space or comma separated) or list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.replace(',', ' ').split() if s.strip()]
        return v


# ==================== TOKENS ====================


class OAuthTokens(BaseModel):
    """
    Canonical token set returned by every provider.

    A plain value: hookbridge never stores it.
    """
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
    token_type: str = "Bearer"
    scope: str | None = None

    @field_validator('expires_at')
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive expiry timestamps as UTC"""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and datetime.now(timezone.utc) >= self.expires_at


# ==================== AUTHORIZATION FLOW ====================


class OAuthState(BaseModel):
    """
    Per-authorization-attempt state.

    The state token travels through the external redirect; storing the
    state -> code_verifier mapping is the caller's job.
    """
    state: str = ""
    code_verifier: str | None = None
    redirect_uri: str
    scopes: list[str] = Field(default_factory=list)
    user_id: str | None = None
    organization_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class PKCEChallenge(BaseModel):
    """PKCE verifier/challenge pair (RFC 7636, S256 only)"""
    code_verifier: str
    code_challenge: str
    code_challenge_method: Literal["S256"] = "S256"


class OAuthAuthorizationResult(BaseModel):
    """Result of building an authorization URL"""
    authorization_url: str
    state: str
    code_verifier: str | None = None


class OAuthTokenResult(BaseModel):
    """Result of exchanging an authorization code"""
    tokens: OAuthTokens
    user_info: Any = None


class OAuthRefreshResult(BaseModel):
    """Result of refreshing tokens"""
    tokens: OAuthTokens
