from typing import Optional, Sequence


class WebhookError(Exception):
    """Base class for every error raised by the hub relay"""


class MissingParameterError(WebhookError):
    pass


class SubscriptionDeniedError(WebhookError):
    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(f"Hub subscription denied. Reason: {reason}")


class MissingChallengeError(WebhookError):
    def __init__(self):
        super().__init__("Missing the hub.challenge parameter")


class MissingBodyError(WebhookError):
    pass


class UnsupportedMethodError(WebhookError):
    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Invalid method {method}")


class HubRegistrationError(WebhookError):
    """The hub rejected a subscribe request or could not be reached"""


class HubUnregistrationError(WebhookError):
    """An unsubscribe request never got an answer from the hub"""

    def __init__(self, message: str, failed_ids: Sequence[str] = ()):
        self.failed_ids = list(failed_ids)
        super().__init__(message)
