from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, model_validator


class SubscriptionCreate(BaseModel):
    topic: str
    event_name: str


class UserFollowsCreate(BaseModel):
    from_id: Optional[str] = None
    to_id: Optional[str] = None

    @model_validator(mode="after")
    def require_one_id(self):
        if not self.from_id and not self.to_id:
            raise ValueError("from_id or to_id is required")
        return self


class StreamUpDownCreate(BaseModel):
    user_id: str


class SubscriptionResponse(BaseModel):
    id: str
    topic: str
    event_name: str
    subscribed_at: datetime


class DeliveryAttempt(BaseModel):
    timestamp: datetime
    status_code: int
    success: bool
    event_name: Optional[str] = None


class DeliveryHistory(BaseModel):
    subscription_id: str
    delivered: int
    rejected: int
    deliveries: List[DeliveryAttempt]
