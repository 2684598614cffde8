from .events import EventDispatcher
from .exceptions import (
    HubRegistrationError,
    HubUnregistrationError,
    MissingBodyError,
    MissingChallengeError,
    MissingParameterError,
    SubscriptionDeniedError,
    UnsupportedMethodError,
    WebhookError,
)
from .handler import WebSubHandler
from .registry import SubscriptionRegistry

__all__ = [
    "EventDispatcher",
    "HubRegistrationError",
    "HubUnregistrationError",
    "MissingBodyError",
    "MissingChallengeError",
    "MissingParameterError",
    "SubscriptionDeniedError",
    "SubscriptionRegistry",
    "UnsupportedMethodError",
    "WebSubHandler",
    "WebhookError",
]
