"""
Integration

Façade for one configured third-party integration. Composes the OAuth
provider, the webhook manager, the optional API client and the lifecycle
event emitter behind a small set of async operations.

Every public operation returns an IntegrationResult; exceptions from the
layers below are converted here and never reach the caller.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from hookbridge.core.exceptions import ConfigurationError, OAuthError
from hookbridge.models.contracts.integrations import (
    IntegrationConfig,
    IntegrationContext,
    IntegrationResult,
)
from hookbridge.models.contracts.oauth import OAuthState, OAuthTokens
from hookbridge.models.enums import IntegrationEvent
from hookbridge.services.api.client import ApiClient
from hookbridge.services.events import EventEmitter, EventHandler
from hookbridge.services.oauth.provider import OAuthProvider
from hookbridge.services.oauth.providers import create_oauth_provider
from hookbridge.services.webhooks.manager import WebhookManager
from hookbridge.services.webhooks.protocol import WebhookHandler, WebhookProcessingResult

logger = logging.getLogger(__name__)


def error_details(error: Exception) -> dict[str, Any]:
    """Describe an exception for IntegrationError.details."""
    details: dict[str, Any] = {
        "exception": type(error).__name__,
        "message": str(error),
    }
    if isinstance(error, OAuthError):
        details["status_code"] = error.status_code
        details["response"] = error.details
    elif isinstance(error, httpx.HTTPStatusError):
        details["status_code"] = error.response.status_code
        details["response"] = error.response.text
    return details


class Integration:
    """
    One configured integration.

    Usage:
        async with Integration(config) as integration:
            result = await integration.initialize_oauth(context)
    """

    def __init__(
        self,
        config: IntegrationConfig | dict[str, Any],
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            config: Integration configuration (validated here)
            http_client: Shared HTTP client for the OAuth provider and API
                client; each creates its own when omitted

        Raises:
            ConfigurationError: Invalid configuration or unusable OAuth setup
        """
        if not isinstance(config, IntegrationConfig):
            try:
                config = IntegrationConfig.model_validate(config)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid integration configuration: {e}") from e
        self._config = config

        self.events = EventEmitter()
        self._webhook_manager = WebhookManager(events=self.events)
        if config.webhooks:
            self._webhook_manager.register(config.name, config.webhooks)

        self._oauth_provider: OAuthProvider | None = None
        if config.oauth:
            self._oauth_provider = create_oauth_provider(
                config.provider,
                config.oauth,
                name=config.name,
                http_client=http_client,
            )

        self._api_client: ApiClient | None = None
        if config.api:
            self._api_client = ApiClient(config.api, http_client=http_client)

        logger.debug(f"Initialized integration {config.name} ({config.provider.value})")

    # ==================== ACCESSORS ====================

    def get_config(self) -> IntegrationConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def oauth_provider(self) -> OAuthProvider | None:
        return self._oauth_provider

    @property
    def webhook_manager(self) -> WebhookManager:
        return self._webhook_manager

    @property
    def api_client(self) -> ApiClient | None:
        return self._api_client

    # ==================== OAUTH ====================

    async def initialize_oauth(self, context: IntegrationContext) -> IntegrationResult:
        """
        Start an authorization flow.

        Returns:
            data: {"auth_url", "state", "code_verifier"}. The caller keeps the
            state -> code_verifier mapping until the callback arrives.
        """
        if self._oauth_provider is None:
            return self._oauth_not_configured()

        try:
            result = await self._oauth_provider.get_authorization_url(self._oauth_state(context))
        except Exception as e:
            logger.error(f"OAuth initialization failed for {self.name}: {e}", exc_info=True)
            return self._failure("OAUTH_INIT_FAILED", e, "OAuth initialization failed")

        return IntegrationResult.ok(
            {
                "auth_url": result.authorization_url,
                "state": result.state,
                "code_verifier": result.code_verifier,
            }
        )

    async def complete_oauth(
        self,
        code: str,
        state: str,
        context: IntegrationContext,
        code_verifier: str | None = None,
    ) -> IntegrationResult:
        """
        Exchange the authorization code from the callback for tokens.

        Returns:
            data: {"tokens", "user_info"}; emits oauth.authorized on success
        """
        if self._oauth_provider is None:
            return self._oauth_not_configured()

        try:
            oauth_state = self._oauth_state(context, state=state, code_verifier=code_verifier)
            result = await self._oauth_provider.exchange_code_for_tokens(code, oauth_state)
        except Exception as e:
            logger.error(f"OAuth code exchange failed for {self.name}: {e}", exc_info=True)
            return self._failure("OAUTH_EXCHANGE_FAILED", e, "OAuth token exchange failed")

        data = {"tokens": result.tokens, "user_info": result.user_info}
        await self.events.emit(IntegrationEvent.OAUTH_AUTHORIZED, data, context)
        return IntegrationResult.ok(data)

    async def refresh_tokens(self, refresh_token: str, context: IntegrationContext) -> IntegrationResult:
        """Refresh tokens. data is the new OAuthTokens; emits oauth.refreshed."""
        if self._oauth_provider is None:
            return self._oauth_not_configured()

        try:
            result = await self._oauth_provider.refresh_tokens(refresh_token, context)
        except Exception as e:
            logger.error(f"Token refresh failed for {self.name}: {e}", exc_info=True)
            return self._failure("TOKEN_REFRESH_FAILED", e, "Token refresh failed")

        await self.events.emit(IntegrationEvent.OAUTH_REFRESHED, {"tokens": result.tokens}, context)
        return IntegrationResult.ok(result.tokens)

    async def revoke_tokens(self, tokens: OAuthTokens, context: IntegrationContext) -> IntegrationResult:
        """Revoke tokens at the platform; emits oauth.revoked."""
        if self._oauth_provider is None:
            return self._oauth_not_configured()

        try:
            await self._oauth_provider.revoke_tokens(tokens, context)
        except Exception as e:
            logger.error(f"Token revocation failed for {self.name}: {e}", exc_info=True)
            return self._failure("TOKEN_REVOKE_FAILED", e, "Token revocation failed")

        await self.events.emit(IntegrationEvent.OAUTH_REVOKED, {"tokens": tokens}, context)
        return IntegrationResult.ok()

    # ==================== WEBHOOKS ====================

    async def handle_webhook(
        self,
        headers: dict[str, str],
        body: Any,
        raw_body: bytes | str,
        context: IntegrationContext,
    ) -> IntegrationResult:
        """
        Process an inbound webhook request.

        Returns:
            The handler's outcome; metadata carries delivery_id and event
        """
        if self._config.webhooks is None:
            return self._webhooks_not_configured()

        try:
            result = await self._webhook_manager.handle_webhook(
                self.name, headers, body, raw_body, context
            )
        except Exception as e:
            logger.error(f"Webhook processing failed for {self.name}: {e}", exc_info=True)
            return self._failure("WEBHOOK_PROCESSING_FAILED", e, "Webhook processing failed")

        return self._to_result(result)

    async def retry_webhook(
        self,
        delivery_id: str,
        headers: dict[str, str],
        body: Any,
        raw_body: bytes | str,
        context: IntegrationContext,
    ) -> IntegrationResult:
        """Retry a recorded delivery with the original request materials."""
        if self._config.webhooks is None:
            return self._webhooks_not_configured()

        try:
            result = await self._webhook_manager.retry_webhook(
                self.name, delivery_id, headers, body, raw_body, context
            )
        except Exception as e:
            logger.error(f"Webhook retry failed for {self.name}: {e}", exc_info=True)
            return self._failure("WEBHOOK_PROCESSING_FAILED", e, "Webhook processing failed")

        return self._to_result(result)

    def on_webhook(self, event: str, handler: WebhookHandler) -> None:
        """Register the handler for a webhook event ("*" for the catch-all)."""
        self._webhook_manager.on_webhook_event(event, handler)

    # ==================== LIFECYCLE EVENTS ====================

    def on(self, event: IntegrationEvent | str, handler: EventHandler) -> None:
        self.events.on(event, handler)

    def off(self, event: IntegrationEvent | str, handler: EventHandler) -> None:
        self.events.off(event, handler)

    # ==================== RESOURCES ====================

    async def aclose(self) -> None:
        if self._oauth_provider is not None:
            await self._oauth_provider.aclose()
        if self._api_client is not None:
            await self._api_client.aclose()

    async def __aenter__(self) -> "Integration":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ==================== INTERNALS ====================

    def _oauth_state(
        self,
        context: IntegrationContext,
        state: str = "",
        code_verifier: str | None = None,
    ) -> OAuthState:
        oauth = self._config.oauth
        return OAuthState(
            state=state,
            code_verifier=code_verifier,
            redirect_uri=oauth.redirect_uri,
            scopes=oauth.scopes,
            user_id=context.user_id,
            organization_id=context.organization_id,
            metadata=context.metadata,
        )

    @staticmethod
    def _to_result(result: WebhookProcessingResult) -> IntegrationResult:
        return IntegrationResult(
            success=result.success,
            data=result.data,
            error=result.error,
            metadata={"delivery_id": result.delivery_id, "event": result.event},
        )

    @staticmethod
    def _failure(code: str, error: Exception, fallback: str) -> IntegrationResult:
        return IntegrationResult.fail(
            code,
            str(error) or fallback,
            retryable=not isinstance(error, ConfigurationError),
            details=error_details(error),
        )

    @staticmethod
    def _oauth_not_configured() -> IntegrationResult:
        return IntegrationResult.fail(
            "OAUTH_NOT_CONFIGURED",
            "OAuth is not configured for this integration",
        )

    @staticmethod
    def _webhooks_not_configured() -> IntegrationResult:
        return IntegrationResult.fail(
            "WEBHOOKS_NOT_CONFIGURED",
            "Webhooks are not configured for this integration",
        )
