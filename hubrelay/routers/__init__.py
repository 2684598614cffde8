# hubrelay/routers/__init__.py
from .webhooks import router as webhooks_router
from .subscriptions import router as subscriptions_router

__all__ = ["webhooks_router", "subscriptions_router"]
