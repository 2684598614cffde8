import threading
from typing import Dict, List, Optional

from .models.subscription import Subscription
from .security import generate_secret, generate_subscription_id


class SubscriptionRegistry:
    """
    In-memory map of subscription id to Subscription.

    Every mutation holds the lock, so the registry can be shared between the
    event loop and the threadpool the hub requests run in.
    """

    def __init__(self):
        self._subscriptions: Dict[str, Subscription] = {}
        self._lock = threading.Lock()

    def new_subscription(self, topic: str, event_name: str) -> Subscription:
        """Build a subscription with an unused id without storing it"""
        with self._lock:
            subscription_id = generate_subscription_id()
            while subscription_id in self._subscriptions:
                subscription_id = generate_subscription_id()
        return Subscription(
            id=subscription_id,
            topic=topic,
            event_name=event_name,
            secret=generate_secret(),
        )

    def add(self, subscription: Subscription) -> Subscription:
        with self._lock:
            if subscription.id in self._subscriptions:
                raise ValueError(f"Subscription {subscription.id} already exists")
            self._subscriptions[subscription.id] = subscription
        return subscription

    def create(self, topic: str, event_name: str) -> Subscription:
        return self.add(self.new_subscription(topic, event_name))

    def get(self, subscription_id: Optional[str]) -> Optional[Subscription]:
        if subscription_id is None:
            return None
        return self._subscriptions.get(subscription_id)

    def remove(self, subscription_id: str) -> None:
        with self._lock:
            self._subscriptions.pop(subscription_id, None)

    def all(self) -> List[Subscription]:
        with self._lock:
            return list(self._subscriptions.values())

    def clear(self) -> None:
        with self._lock:
            self._subscriptions.clear()

    def __len__(self):
        return len(self._subscriptions)

    def __contains__(self, subscription_id):
        return subscription_id in self._subscriptions
