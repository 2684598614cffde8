from .delivery_log import DeliveryLog
from .subscription import Subscription

__all__ = ["DeliveryLog", "Subscription"]
