from sqlalchemy import Column, Integer, String, DateTime, Boolean
from datetime import datetime, timezone
from ..database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class DeliveryLog(Base):
    __tablename__ = "delivery_logs"

    id = Column(Integer, primary_key=True, index=True)
    subscription_id = Column(String, index=True, nullable=True)
    event_name = Column(String, nullable=True)
    timestamp = Column(DateTime, default=_utcnow)
    status_code = Column(Integer)
    success = Column(Boolean)
