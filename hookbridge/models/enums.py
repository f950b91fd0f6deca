"""
Enumeration types used across hookbridge.
"""

from enum import Enum


class Provider(str, Enum):
    """Supported OAuth/webhook platforms"""
    GITHUB = "github"
    VERCEL = "vercel"
    NETLIFY = "netlify"
    SLACK = "slack"
    CUSTOM = "custom"


class SignatureMethod(str, Enum):
    """Webhook signature digest algorithms"""
    HMAC_SHA256 = "hmac-sha256"
    HMAC_SHA1 = "hmac-sha1"


class BackoffStrategy(str, Enum):
    """Delay growth between retry attempts"""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class DeliveryStatus(str, Enum):
    """Webhook delivery status"""
    PENDING = "pending"  # Never stored; first attempt records its outcome directly
    DELIVERED = "delivered"
    FAILED = "failed"
    RETRYING = "retrying"


class IntegrationEvent(str, Enum):
    """Lifecycle events emitted to integration subscribers"""
    OAUTH_AUTHORIZED = "oauth.authorized"
    OAUTH_REFRESHED = "oauth.refreshed"
    OAUTH_REVOKED = "oauth.revoked"
    WEBHOOK_RECEIVED = "webhook.received"
    WEBHOOK_FAILED = "webhook.failed"


class RateLimitStrategy(str, Enum):
    """API client rate limit window types"""
    FIXED = "fixed"
    SLIDING = "sliding"
