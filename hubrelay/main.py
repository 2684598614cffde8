from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request

from .config import get_settings
from .database import Base, engine
from .handler import WebSubHandler
from .routers import subscriptions_router, webhooks_router

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create tables
Base.metadata.create_all(bind=engine)


def build_handler() -> WebSubHandler:
    return WebSubHandler(
        client_id=settings.client_id,
        callback_url=settings.callback_url,
        hub_url=settings.hub_url,
        lease_seconds=settings.lease_seconds,
        timeout=settings.hub_timeout
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "handler", None) is None:
        app.state.handler = build_handler()
    logger.info(f"Receiving hub callbacks at {app.state.handler.callback_url}")
    yield
    # Subscriptions are not persisted, so release them on the hub before exiting
    await app.state.handler.destroy()


# Initialize FastAPI
app = FastAPI(title="WebSub Hub Relay", lifespan=lifespan)
app.include_router(webhooks_router)
app.include_router(subscriptions_router)


# Health check endpoint (unauthenticated)
@app.get("/health")
async def health_check(request: Request):
    handler = getattr(request.app.state, "handler", None)
    return {
        "status": "healthy",
        "subscriptions": len(handler.registry) if handler else 0
    }
