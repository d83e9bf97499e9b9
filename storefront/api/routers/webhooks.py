# storefront/api/routers/webhooks.py
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from storefront.api.deps import get_gateway, get_notifier
from storefront.data.database import get_db
from storefront.domain.errors import (
    PaymentNotCompletedError,
    PaymentVerificationError,
    WebhookSignatureError,
)
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import StripeGateway
from storefront.services.settlement_service import SettlementService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

SETTLEMENT_EVENTS = {
    "checkout.session.completed",
    "checkout.session.async_payment_succeeded",
}


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="stripe-signature"),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Webhook Stripe. Podpis sprawdzany na surowym body zanim cokolwiek
    dotknie bazy; brak sekretu w konfiguracji = odrzucamy wszystko.
    """
    payload = await request.body()

    try:
        event = gateway.construct_event(payload, stripe_signature)
    except WebhookSignatureError as e:
        logger.warning(f"Webhook rejected: {e}")
        return JSONResponse(status_code=401, content={"error": "Invalid signature"})
    except ValueError as e:
        logger.warning(f"Webhook payload malformed: {e}")
        return JSONResponse(status_code=400, content={"error": "Invalid payload"})

    event_type = event.get("type")
    logger.info(f"Webhook event received: {event_type} ({event.get('id')})")

    if event_type not in SETTLEMENT_EVENTS:
        return {"received": True}

    session = (event.get("data") or {}).get("object") or {}
    session_id = session.get("id")
    if not session_id:
        logger.warning(f"Event {event.get('id')} carries no session id")
        return JSONResponse(status_code=400, content={"error": "Invalid payload"})

    svc = SettlementService(db, gateway, notifier)
    try:
        order_id = await run_in_threadpool(svc.reconcile, session_id)
    except PaymentNotCompletedError:
        # platnosc odroczona - zamowienie powstanie przy async_payment_succeeded
        logger.info(f"Session {session_id} completed but not paid yet, waiting for async payment")
        return {"received": True}
    except PaymentVerificationError as e:
        logger.error(f"Webhook settlement of {session_id} failed: {e}")
        return JSONResponse(status_code=500, content={"error": "Payment verification failed"})

    logger.info(f"Webhook settled session {session_id} as order {order_id}")
    return {"received": True}
