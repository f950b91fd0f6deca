"""
OAuth Provider

Base class for platform OAuth 2.0 clients. Subclasses declare their default
endpoints and override the few hooks where a platform deviates from the
standard authorization-code flow.

Stateless: the state -> code_verifier mapping belongs to the caller.
"""

import base64
import hashlib
import logging
import secrets
from abc import ABC
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode

import httpx

from hookbridge.config import get_settings
from hookbridge.core.exceptions import ConfigurationError, OAuthError
from hookbridge.models.contracts.integrations import IntegrationContext
from hookbridge.models.contracts.oauth import (
    OAuthAuthorizationResult,
    OAuthConfig,
    OAuthRefreshResult,
    OAuthState,
    OAuthTokenResult,
    OAuthTokens,
    PKCEChallenge,
)

logger = logging.getLogger(__name__)


class OAuthProvider(ABC):
    """
    Platform OAuth client.

    Class attributes:
        name: Provider identifier used in logs and errors
        AUTH_URL / TOKEN_URL / USER_INFO_URL: Platform defaults, overridden
            by the matching OAuthConfig fields
        scope_separator: Joins scopes in the authorization URL
    """

    name: str = "oauth"
    AUTH_URL: str | None = None
    TOKEN_URL: str | None = None
    USER_INFO_URL: str | None = None
    scope_separator: str = " "

    def __init__(
        self,
        config: OAuthConfig,
        name: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        if name:
            self.name = name

        self.auth_url = config.auth_url or self.AUTH_URL
        self.token_url = config.token_url or self.TOKEN_URL
        self.user_info_url = config.user_info_url or self.USER_INFO_URL

        self._owns_client = http_client is None
        if http_client is None:
            settings = get_settings()
            http_client = httpx.AsyncClient(
                timeout=settings.http_timeout_seconds,
                headers={"User-Agent": settings.user_agent},
            )
        self.http = http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self.http.aclose()

    # ==================== AUTHORIZATION ====================

    async def get_authorization_url(self, state: OAuthState) -> OAuthAuthorizationResult:
        """
        Build the URL the user is redirected to for consent.

        A fresh state token is generated on every call; ``state.state`` is
        ignored. With ``use_pkce`` a S256 challenge is added and its
        verifier returned for the caller to keep.
        """
        if not self.auth_url:
            raise ConfigurationError(f"Authorization URL not configured for {self.name} provider")

        auth_state = self._generate_state()
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": state.redirect_uri,
            "scope": self.scope_separator.join(state.scopes),
            "state": auth_state,
            "response_type": "code",
        }

        code_verifier = None
        if self.config.use_pkce:
            pkce = self._generate_pkce_challenge()
            params["code_challenge"] = pkce.code_challenge
            params["code_challenge_method"] = pkce.code_challenge_method
            code_verifier = pkce.code_verifier

        separator = "&" if "?" in self.auth_url else "?"
        return OAuthAuthorizationResult(
            authorization_url=f"{self.auth_url}{separator}{urlencode(params)}",
            state=auth_state,
            code_verifier=code_verifier,
        )

    async def exchange_code_for_tokens(self, code: str, state: OAuthState) -> OAuthTokenResult:
        """
        Exchange an authorization code for tokens, then fetch user info.

        Raises:
            OAuthError: Platform rejected the exchange
            httpx.HTTPError: Network failure
        """
        data = {
            "grant_type": "authorization_code",
            "client_id": self.config.client_id,
            "code": code,
            "redirect_uri": state.redirect_uri,
        }
        if state.code_verifier:
            data["code_verifier"] = state.code_verifier
        if self.config.client_secret and not (self.config.use_pkce and state.code_verifier):
            data["client_secret"] = self.config.client_secret

        body = await self._post_token_request(data)
        tokens = self.parse_token_response(body)
        user_info = await self._fetch_user_info_after_exchange(tokens)

        logger.info(f"Exchanged authorization code with {self.name}")
        return OAuthTokenResult(tokens=tokens, user_info=user_info)

    async def refresh_tokens(
        self,
        refresh_token: str,
        context: IntegrationContext | None = None,
    ) -> OAuthRefreshResult:
        """
        Exchange a refresh token for a new token set.

        Raises:
            ConfigurationError: No token URL configured
            OAuthError: Platform rejected the refresh
        """
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.config.client_id,
        }
        if self.config.client_secret:
            data["client_secret"] = self.config.client_secret

        body = await self._post_token_request(data)
        tokens = self.parse_token_response(body)
        # Some platforms only return a refresh token on the initial exchange
        if tokens.refresh_token is None:
            tokens = tokens.model_copy(update={"refresh_token": refresh_token})

        logger.info(f"Refreshed tokens with {self.name}")
        return OAuthRefreshResult(tokens=tokens)

    async def revoke_tokens(
        self,
        tokens: OAuthTokens,
        context: IntegrationContext | None = None,
    ) -> None:
        """Revoke tokens at the platform. No-op unless a platform supports it."""
        logger.debug(f"Token revocation not supported by {self.name}; skipping")

    # ==================== USER INFO ====================

    async def get_user_info(self, tokens: OAuthTokens) -> Any:
        """
        Fetch the authorized user's profile.

        Raises:
            ConfigurationError: No user info URL configured
            OAuthError: Platform rejected the request
        """
        if not self.user_info_url:
            raise ConfigurationError(f"User info URL not configured for {self.name} provider")

        response = await self.http.get(
            self.user_info_url,
            headers={**self.create_auth_headers(tokens), "Accept": "application/json"},
        )
        body = self._json_or_raise(response, "User info request failed")
        return self.parse_user_info(body)

    async def validate_tokens(self, tokens: OAuthTokens) -> bool:
        """
        Check tokens are unexpired and accepted by the platform.

        Never raises.
        """
        if tokens.is_expired:
            return False

        try:
            await self.get_user_info(tokens)
            return True
        except Exception as e:
            logger.debug(f"Token validation failed for {self.name}: {e}")
            return False

    # ==================== PLATFORM HOOKS ====================

    def parse_token_response(self, data: dict[str, Any]) -> OAuthTokens:
        """Map a token endpoint response onto OAuthTokens."""
        self._check_token_response(data)

        access_token = data.get("access_token")
        if not access_token:
            raise OAuthError(
                f"No access token in {self.name} token response",
                details=data,
            )

        expires_at = None
        expires_in = data.get("expires_in")
        if expires_in:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))

        return OAuthTokens(
            access_token=access_token,
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            token_type=data.get("token_type") or "Bearer",
            scope=data.get("scope"),
        )

    def parse_user_info(self, data: Any) -> Any:
        return data

    def create_auth_headers(self, tokens: OAuthTokens) -> dict[str, str]:
        return {"Authorization": f"{tokens.token_type or 'Bearer'} {tokens.access_token}"}

    async def _fetch_user_info_after_exchange(self, tokens: OAuthTokens) -> Any:
        return await self.get_user_info(tokens)

    def _check_token_response(self, data: dict[str, Any]) -> None:
        """Reject token responses that report an error inside a 200 body."""
        error = data.get("error")
        if error:
            description = data.get("error_description", error)
            raise OAuthError(f"{self.name} OAuth error: {description}", details=data)

    # ==================== HELPERS ====================

    async def _post_token_request(self, data: dict[str, str]) -> dict[str, Any]:
        if not self.token_url:
            raise ConfigurationError(f"Token URL not configured for {self.name} provider")

        response = await self.http.post(
            self.token_url,
            data=data,
            headers={"Accept": "application/json"},
        )
        return self._json_or_raise(response, "Token request failed")

    def _json_or_raise(self, response: httpx.Response, message: str) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.is_error:
            logger.error(f"{self.name} {message}: {response.status_code} - {response.text}")
            raise OAuthError(
                f"{message}: HTTP {response.status_code}",
                status_code=response.status_code,
                details=body,
            )
        if not isinstance(body, dict):
            raise OAuthError(
                f"{message}: unexpected response body",
                status_code=response.status_code,
                details=body,
            )
        return body

    @staticmethod
    def _generate_state() -> str:
        return secrets.token_hex(16)

    @staticmethod
    def _generate_pkce_challenge() -> PKCEChallenge:
        code_verifier = base64.urlsafe_b64encode(secrets.token_bytes(32)).rstrip(b"=").decode("ascii")
        digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
        code_challenge = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
        return PKCEChallenge(code_verifier=code_verifier, code_challenge=code_challenge)
