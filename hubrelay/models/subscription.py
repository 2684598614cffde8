from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Subscription:
    """A topic registered with the hub; lives in memory only"""

    id: str
    topic: str
    event_name: str
    secret: str = field(repr=False)
    subscribed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
