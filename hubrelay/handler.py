import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

import requests
from fastapi.concurrency import run_in_threadpool

from .config import DEFAULT_HUB_URL, DEFAULT_LEASE_SECONDS
from .events import EventDispatcher
from .exceptions import (
    HubRegistrationError,
    HubUnregistrationError,
    MissingBodyError,
    MissingChallengeError,
    MissingParameterError,
    SubscriptionDeniedError,
    UnsupportedMethodError,
)
from .models.subscription import Subscription
from .registry import SubscriptionRegistry
from .security import validate_signature

CORRELATION_PARAM = "item.id"
SIGNATURE_HEADER = "x-hub-signature"

Body = Union[bytes, str, Dict[str, Any], None]


class WebSubHandler:
    """
    Subscriber side of the WebSub hub protocol.

    Sends subscribe/unsubscribe requests to the hub and classifies the requests
    the hub sends back to the public callback URL. Requests arriving at that
    URL must be forwarded to handle_request.
    """

    def __init__(
        self,
        client_id: str,
        callback_url: str,
        logger: Optional[logging.Logger] = None,
        hub_url: str = DEFAULT_HUB_URL,
        lease_seconds: int = DEFAULT_LEASE_SECONDS,
        timeout: float = 10.0,
        registry: Optional[SubscriptionRegistry] = None,
        dispatcher: Optional[EventDispatcher] = None,
        session: Optional[requests.Session] = None,
    ):
        if not client_id:
            raise ValueError("client_id is required")
        if not callback_url:
            raise ValueError("callback_url is required")
        self.client_id = client_id
        self.callback_url = callback_url
        self.logger = logger or logging.getLogger(__name__)
        self.hub_url = hub_url
        self.lease_seconds = lease_seconds
        self.timeout = timeout
        self.registry = registry if registry is not None else SubscriptionRegistry()
        self.dispatcher = dispatcher if dispatcher is not None else EventDispatcher()
        self.session = session or requests.Session()
        self.closed = False

    def on(self, event_name: str, listener) -> None:
        self.dispatcher.on(event_name, listener)

    def callback_for(self, subscription: Subscription) -> str:
        separator = "&" if "?" in self.callback_url else "?"
        return f"{self.callback_url}{separator}{CORRELATION_PARAM}={subscription.id}"

    def _post_to_hub(self, form: Dict[str, Any]) -> requests.Response:
        return self.session.post(
            self.hub_url,
            data=form,
            headers={"Client-ID": self.client_id},
            timeout=self.timeout
        )

    async def subscribe(self, topic: str, event_name: str) -> str:
        """
        Register topic with the hub; verified notifications are dispatched as
        event_name. Returns the subscription id.
        """
        if not topic:
            raise ValueError("topic is required")
        if not event_name:
            raise ValueError("event_name is required")

        if self.closed:
            raise HubRegistrationError("Handler has been destroyed")

        self.logger.debug(f"Subscribing Webhook with topic: {topic}")
        subscription = self.registry.new_subscription(topic, event_name)
        form = {
            "hub.callback": self.callback_for(subscription),
            "hub.mode": "subscribe",
            "hub.topic": topic,
            "hub.lease_seconds": self.lease_seconds,
            "hub.secret": subscription.secret,
        }

        try:
            response = await run_in_threadpool(self._post_to_hub, form)
        except requests.exceptions.RequestException as e:
            raise HubRegistrationError(f"Hub request failed for topic {topic}: {e}") from e

        if response.status_code // 100 != 2:
            raise HubRegistrationError(
                f"Hub rejected subscription to {topic} with status {response.status_code}: {response.text}"
            )

        self.registry.add(subscription)
        if self.closed:
            # destroy ran while the hub was answering; release the late subscription
            try:
                await self.unsubscribe(subscription.id)
            except HubUnregistrationError as e:
                self.logger.warning(f"Could not release {subscription.id}: {e}")
            self.registry.remove(subscription.id)
            raise HubRegistrationError(f"Handler was destroyed while subscribing to {topic}")
        self.logger.debug(f"Webhook subscribed: {subscription.id}")
        return subscription.id

    async def unsubscribe(self, subscription_id: str) -> None:
        self.logger.debug(f"Requesting Webhook unsubscription with id: {subscription_id}")
        subscription = self.registry.get(subscription_id)
        if subscription is None:
            self.logger.warning(f"Unable to find subscription with id {subscription_id}")
            return

        form = {
            "hub.callback": self.callback_for(subscription),
            "hub.mode": "unsubscribe",
            "hub.topic": subscription.topic,
            "hub.secret": subscription.secret,
        }

        try:
            response = await run_in_threadpool(self._post_to_hub, form)
        except requests.exceptions.RequestException as e:
            raise HubUnregistrationError(
                f"Hub request failed while unsubscribing {subscription_id}: {e}",
                failed_ids=[subscription_id]
            ) from e

        if response.status_code // 100 != 2:
            self.logger.warning(
                f"Hub answered unsubscribe of {subscription_id} with status {response.status_code}"
            )
        self.registry.remove(subscription_id)
        self.logger.debug(f"Webhook unsubscribed: {subscription_id}")

    async def destroy(self, strict: bool = False) -> None:
        """
        Unsubscribe every active subscription, one at a time, then empty the
        registry. Failures are logged; with strict=True they are raised after
        the registry has been cleared.
        """
        self.logger.info("Destroying WebSubHandler...")
        self.closed = True
        failed = []
        try:
            for subscription in self.registry.all():
                try:
                    await self.unsubscribe(subscription.id)
                except Exception as e:
                    self.logger.warning(f"Could not unsubscribe {subscription.id}: {e}")
                    failed.append(subscription.id)
        finally:
            self.registry.clear()
        self.logger.info("WebSubHandler destroyed.")

        if failed and strict:
            raise HubUnregistrationError(
                f"{len(failed)} subscription(s) failed to unsubscribe",
                failed_ids=failed
            )

    def handle_request(
        self,
        method: str,
        headers: Mapping[str, str],
        query: Mapping[str, str],
        body: Body = None,
    ) -> Dict[str, Any]:
        """
        Classify a request the hub sent to the callback URL.

        GET is the verification handshake, POST a notification delivery.
        Returns a dict with the status to answer with and, for the handshake,
        the challenge to echo as data.
        """
        self.logger.debug("Handling new Webhook request")
        if not method:
            raise MissingParameterError("Missing method parameter")
        if headers is None:
            raise MissingParameterError("Missing headers parameter")
        if query is None:
            raise MissingParameterError("Missing query parameter")

        verb = method.upper()
        if verb == "GET":
            return self._handle_verification(query)
        if verb == "POST":
            return self._handle_notification(headers, query, body)
        raise UnsupportedMethodError(method)

    def _handle_verification(self, query: Mapping[str, str]) -> Dict[str, Any]:
        if query.get("hub.mode") == "denied":
            raise SubscriptionDeniedError(query.get("hub.reason"))
        challenge = query.get("hub.challenge")
        if not challenge:
            raise MissingChallengeError()
        return {"status": 200, "data": challenge}

    def _handle_notification(
        self,
        headers: Mapping[str, str],
        query: Mapping[str, str],
        body: Body,
    ) -> Dict[str, Any]:
        if not body:
            raise MissingBodyError("Missing body parameter")

        subscription = self.registry.get(query.get(CORRELATION_PARAM))
        if subscription is None:
            self.logger.warning(f"Notification for unknown subscription {query.get(CORRELATION_PARAM)}")
            return {"status": 410}

        raw = _raw_body(body)
        signature = _header(headers, SIGNATURE_HEADER)
        if not validate_signature(signature, subscription.secret, raw):
            self.logger.warning(f"Invalid signature for subscription {subscription.id}")
            return {"status": 403}

        payload = body if isinstance(body, dict) else _parse_json(raw)
        self.dispatcher.emit(subscription.event_name, payload.get("data"), subscription.id)
        return {"status": 200}


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _raw_body(body: Body) -> bytes:
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode()
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode()


def _parse_json(raw: bytes) -> Dict[str, Any]:
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise MissingBodyError("Body is not valid JSON") from e
    if not isinstance(payload, dict):
        raise MissingBodyError("Body must be a JSON object")
    return payload
