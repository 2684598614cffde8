from fastapi import APIRouter, HTTPException, Request, Depends, Response
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..dependencies import get_api_key, get_handler
from ..exceptions import (
    MissingBodyError,
    MissingChallengeError,
    SubscriptionDeniedError,
    UnsupportedMethodError,
)
from ..handler import CORRELATION_PARAM, WebSubHandler
from ..models import DeliveryLog
from ..schemas import DeliveryHistory

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

logger = logging.getLogger(__name__)


@router.get("/hub", response_class=PlainTextResponse)
async def verify_subscription(
    request: Request,
    handler: WebSubHandler = Depends(get_handler)
):
    """
    Hub verification handshake: echo hub.challenge as plain text
    """
    try:
        result = handler.handle_request(
            request.method, request.headers, request.query_params
        )
    except SubscriptionDeniedError as e:
        logger.warning(str(e))
        return PlainTextResponse("", status_code=200)
    except MissingChallengeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PlainTextResponse(result["data"], status_code=result["status"])


@router.post("/hub")
async def receive_notification(
    request: Request,
    handler: WebSubHandler = Depends(get_handler),
    db: Session = Depends(get_db)
):
    """
    Notification delivery from the hub, answered with 200, 403 or 410
    """
    body = await request.body()
    try:
        result = handler.handle_request(
            request.method, request.headers, request.query_params, body
        )
    except (MissingBodyError, UnsupportedMethodError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    subscription = handler.registry.get(request.query_params.get(CORRELATION_PARAM))
    if subscription is None:
        # Unknown ids are not logged; anyone can post them
        return Response(status_code=result["status"])

    delivery_log = DeliveryLog(
        subscription_id=subscription.id,
        event_name=subscription.event_name,
        status_code=result["status"],
        success=result["status"] == 200
    )
    db.add(delivery_log)
    db.commit()

    return Response(status_code=result["status"])


@router.get("/deliveries/{subscription_id}", response_model=DeliveryHistory)
def get_delivery_history(
    subscription_id: str,
    db: Session = Depends(get_db),
    api_key: str = Depends(get_api_key)
):
    """
    Notifications received for a subscription, oldest first
    """
    deliveries = db.query(DeliveryLog).filter(
        DeliveryLog.subscription_id == subscription_id
    ).order_by(DeliveryLog.timestamp, DeliveryLog.id).all()

    if not deliveries:
        raise HTTPException(status_code=404, detail="No deliveries for this subscription")

    return {
        "subscription_id": subscription_id,
        "delivered": sum(1 for d in deliveries if d.success),
        "rejected": sum(1 for d in deliveries if not d.success),
        "deliveries": [
            {
                "timestamp": d.timestamp,
                "status_code": d.status_code,
                "success": d.success,
                "event_name": d.event_name
            }
            for d in deliveries
        ]
    }
