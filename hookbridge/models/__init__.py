from hookbridge.models.contracts import *  # noqa: F401,F403
from hookbridge.models.contracts import __all__ as _contract_names
from hookbridge.models.enums import (
    BackoffStrategy,
    DeliveryStatus,
    IntegrationEvent,
    Provider,
    RateLimitStrategy,
    SignatureMethod,
)

__all__ = [
    *_contract_names,
    "BackoffStrategy",
    "DeliveryStatus",
    "IntegrationEvent",
    "Provider",
    "RateLimitStrategy",
    "SignatureMethod",
]
