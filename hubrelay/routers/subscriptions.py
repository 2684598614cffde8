from fastapi import APIRouter, HTTPException, Depends, Response
from typing import List

from ..dependencies import get_api_key, get_handler
from ..exceptions import HubRegistrationError, HubUnregistrationError
from ..handler import WebSubHandler
from ..schemas import (
    StreamUpDownCreate,
    SubscriptionCreate,
    SubscriptionResponse,
    UserFollowsCreate,
)
from ..topics import subscribe_stream_up_down, subscribe_user_follows

router = APIRouter(
    prefix="/subscriptions",
    tags=["subscriptions"],
    dependencies=[Depends(get_api_key)]
)


def _lookup(handler: WebSubHandler, subscription_id: str):
    subscription = handler.registry.get(subscription_id)
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


def _to_response(subscription) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=subscription.id,
        topic=subscription.topic,
        event_name=subscription.event_name,
        subscribed_at=subscription.subscribed_at
    )


@router.post("/", response_model=SubscriptionResponse, status_code=201)
async def create_subscription(
    subscription: SubscriptionCreate,
    handler: WebSubHandler = Depends(get_handler)
):
    """Subscribe to a topic on the hub"""
    try:
        subscription_id = await handler.subscribe(subscription.topic, subscription.event_name)
    except HubRegistrationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _to_response(_lookup(handler, subscription_id))


@router.post("/user-follows", response_model=SubscriptionResponse, status_code=201)
async def create_user_follows_subscription(
    follows: UserFollowsCreate,
    handler: WebSubHandler = Depends(get_handler)
):
    try:
        subscription_id = await subscribe_user_follows(handler, follows.from_id, follows.to_id)
    except HubRegistrationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _to_response(_lookup(handler, subscription_id))


@router.post("/stream-up-down", response_model=SubscriptionResponse, status_code=201)
async def create_stream_up_down_subscription(
    stream: StreamUpDownCreate,
    handler: WebSubHandler = Depends(get_handler)
):
    try:
        subscription_id = await subscribe_stream_up_down(handler, stream.user_id)
    except HubRegistrationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _to_response(_lookup(handler, subscription_id))


@router.get("/", response_model=List[SubscriptionResponse])
def list_subscriptions(handler: WebSubHandler = Depends(get_handler)):
    return [_to_response(s) for s in handler.registry.all()]


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(subscription_id: str, handler: WebSubHandler = Depends(get_handler)):
    return _to_response(_lookup(handler, subscription_id))


@router.delete("/{subscription_id}", status_code=204)
async def delete_subscription(
    subscription_id: str,
    handler: WebSubHandler = Depends(get_handler)
):
    """Unsubscribe from the hub and forget the subscription"""
    if subscription_id not in handler.registry:
        raise HTTPException(status_code=404, detail="Subscription not found")
    try:
        await handler.unsubscribe(subscription_id)
    except HubUnregistrationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return Response(status_code=204)
