"""
Integration contract models: declarative configuration, caller context and
the result envelope returned by every public operation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hookbridge.models.contracts.api import ApiConfig
from hookbridge.models.contracts.oauth import OAuthConfig, OAuthTokens
from hookbridge.models.contracts.webhooks import WebhookConfig
from hookbridge.models.enums import Provider


class IntegrationConfig(BaseModel):
    """
    Declarative configuration for one integration.

    Validated once when an Integration is constructed.
    """
    name: str = Field(..., min_length=1)
    version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")
    description: str | None = None
    provider: Provider
    oauth: OAuthConfig | None = None
    webhooks: WebhookConfig | None = None
    api: ApiConfig | None = None

    model_config = ConfigDict(frozen=True)


class IntegrationContext(BaseModel):
    """
    Caller-supplied identifiers threaded through every operation and handler.

    Treated as opaque pass-through data.
    """
    user_id: str | None = None
    organization_id: str | None = None
    installation_id: str | None = None
    tokens: OAuthTokens | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class IntegrationError(BaseModel):
    """Error payload of the result envelope"""
    code: str
    message: str
    details: Any = None
    retryable: bool | None = None


class IntegrationResult(BaseModel):
    """
    Uniform result envelope.

    The only way public façade operations signal failure.
    """
    success: bool
    data: Any = None
    error: IntegrationError | None = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def ok(cls, data: Any = None, metadata: dict[str, Any] | None = None) -> "IntegrationResult":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        retryable: bool = False,
        details: Any = None,
    ) -> "IntegrationResult":
        return cls(
            success=False,
            error=IntegrationError(
                code=code,
                message=message,
                retryable=retryable,
                details=details,
            ),
        )
