"""
Generic API client contract models.
"""

from pydantic import BaseModel, ConfigDict, Field

from hookbridge.models.contracts.webhooks import RetryPolicy
from hookbridge.models.enums import RateLimitStrategy


class RateLimitConfig(BaseModel):
    """Client-side request budget per time window"""
    requests: int = Field(..., ge=1)
    window: int = Field(..., ge=1000, description="Window length (ms)")
    strategy: RateLimitStrategy = RateLimitStrategy.FIXED

    model_config = ConfigDict(frozen=True)


class ApiConfig(BaseModel):
    """Configuration for the generic platform API client"""
    base_url: str = Field(..., pattern=r"^https?://")
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: int | None = Field(default=None, ge=1000, description="Request timeout (ms)")
    retry_policy: RetryPolicy | None = None
    rate_limit: RateLimitConfig | None = None

    model_config = ConfigDict(frozen=True)
