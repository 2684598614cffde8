import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()  # Load environment variables from .env file

DEFAULT_HUB_URL = "https://api.twitch.tv/helix/webhooks/hub"
DEFAULT_LEASE_SECONDS = 864000  # 10 days


class Settings(BaseModel):
    client_id: Optional[str] = None
    callback_url: Optional[str] = None
    hub_url: str = DEFAULT_HUB_URL
    lease_seconds: int = DEFAULT_LEASE_SECONDS
    hub_timeout: float = 10.0
    database_url: str = "sqlite://"
    api_keys: List[str] = []
    log_level: str = "INFO"


def _split_keys(raw: str) -> List[str]:
    return [key.strip() for key in raw.split(",") if key.strip()]


def load_settings() -> Settings:
    """Build settings from the environment, ignoring unset variables"""
    return Settings(
        client_id=os.getenv("CLIENT_ID") or None,
        callback_url=os.getenv("CALLBACK_URL") or None,
        hub_url=os.getenv("HUB_URL", DEFAULT_HUB_URL),
        lease_seconds=int(os.getenv("LEASE_SECONDS", DEFAULT_LEASE_SECONDS)),
        hub_timeout=float(os.getenv("HUB_TIMEOUT", "10")),
        database_url=os.getenv("DATABASE_URL", "sqlite://"),
        api_keys=_split_keys(os.getenv("API_KEYS", "")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
