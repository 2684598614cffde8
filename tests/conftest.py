import json
from unittest.mock import MagicMock, Mock

import pytest
from fastapi import FastAPI
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hubrelay.database import Base, get_db
from hubrelay.handler import WebSubHandler
from hubrelay.routers import subscriptions_router, webhooks_router
from hubrelay.security import sign_payload

CALLBACK_URL = "https://relay.example.com/webhooks/hub"
HUB_URL = "https://hub.example.com/hub"


def hub_response(status_code=202, text=""):
    return Mock(status_code=status_code, text=text)


@pytest.fixture
def hub_session():
    session = MagicMock()
    session.post.return_value = hub_response()
    return session


@pytest.fixture
def handler(hub_session):
    return WebSubHandler(
        client_id="test-client",
        callback_url=CALLBACK_URL,
        hub_url=HUB_URL,
        session=hub_session
    )


def signed_delivery(handler, subscription_id, payload):
    """Body and headers the hub would send for payload"""
    body = json.dumps(payload).encode()
    secret = handler.registry.get(subscription_id).secret
    return body, {"X-Hub-Signature": sign_payload(secret, body)}


@pytest.fixture
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def app(handler, db_session_factory):
    app = FastAPI()
    app.include_router(webhooks_router)
    app.include_router(subscriptions_router)
    app.state.handler = handler

    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app
