import logging

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

from .config import get_settings
from .handler import WebSubHandler

logger = logging.getLogger(__name__)

# API Key Authentication Setup
API_KEY_NAME = "x-api-key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


def valid_api_keys():
    keys = get_settings().api_keys
    if not keys:
        logger.warning("API_KEYS is not set, falling back to the test key")
        return {"test-key": "test-user"}
    return {key: f"user-{i}" for i, key in enumerate(keys, 1)}


async def get_api_key(api_key: str = Security(api_key_header)):
    if api_key not in valid_api_keys():
        raise HTTPException(
            status_code=403,
            detail="Invalid API Key"
        )
    return api_key


def get_handler(request: Request) -> WebSubHandler:
    handler = getattr(request.app.state, "handler", None)
    if handler is None:
        raise HTTPException(status_code=503, detail="Webhook handler is not configured")
    return handler
