# storefront/api/routers/checkout.py
import redis
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.deps import (
    CurrentUser,
    get_cart_storage_factory,
    get_gateway,
    get_notifier,
    get_optional_user,
)
from storefront.data.database import get_db
from storefront.domain.cart import CartStore
from storefront.domain.errors import CheckoutSessionError, PaymentVerificationError
from storefront.domain.schemas import CheckoutSessionIn, CheckoutSessionOut, VerifyPaymentIn
from storefront.services.checkout_service import CheckoutService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import StripeGateway
from storefront.services.settlement_service import SettlementService
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/checkout", tags=["checkout"])

VERIFY_FAILED = "Payment verification failed"


def clear_cart(cart_key: str | None, storage_factory, stage: str) -> None:
    """Best-effort: koszyk czyszczony po przekazaniu do Stripe i po potwierdzeniu platnosci."""
    if not cart_key:
        return
    try:
        CartStore(storage_factory(cart_key)).clear()
    except redis.RedisError as e:
        logger.warning(f"Cart {cart_key} not cleared after {stage}: {e}")
        return
    logger.info(f"Cart {cart_key} cleared after {stage}")


@router.post("/session", response_model=CheckoutSessionOut)
def create_checkout_session(
    payload: CheckoutSessionIn,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
    user: CurrentUser | None = Depends(get_optional_user),
    storage_factory=Depends(get_cart_storage_factory),
):
    """
    Tworzy sesje Stripe Checkout dla koszyka i zwraca URL strony platnosci.
    Zalogowany klient bez customerInfo dostaje prefill z profilu.
    """
    customer_info = payload.customer_info
    if customer_info is None and user is not None:
        customer_info = UserService(db).customer_info(user.id)

    svc = CheckoutService(gateway)
    try:
        url = svc.create_session(
            payload.items,
            customer_info=customer_info,
            customer_email=payload.customer_email,
            account_id=user.id if user else None,
        )
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except CheckoutSessionError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})

    clear_cart(payload.cart_key, storage_factory, "checkout handoff")
    return {"url": url}


@router.post("/verify")
def verify_payment(
    payload: VerifyPaymentIn,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
    notifier: NotificationService = Depends(get_notifier),
    user: CurrentUser | None = Depends(get_optional_user),
    storage_factory=Depends(get_cart_storage_factory),
):
    """
    Weryfikacja po powrocie ze strony platnosci. Rownolegle z webhookiem;
    obie drogi koncza sie tym samym zamowieniem.
    Konto bierzemy z tokenu, userId z body nie decyduje o wlascicielu.
    """
    if not payload.session_id:
        return JSONResponse(status_code=400, content={"error": "No session ID provided"})

    account_id = user.id if user else None
    if payload.user_id and payload.user_id != account_id:
        logger.warning(
            f"Verify for {payload.session_id}: ignoring userId {payload.user_id} not matching the signed-in account"
        )

    logger.info(f"Verifying session {payload.session_id} (user {account_id})")

    svc = SettlementService(db, gateway, notifier)
    try:
        order_id = svc.reconcile(payload.session_id, account_id)
    except PaymentVerificationError as e:
        logger.error(f"Verification of session {payload.session_id} failed: {e}")
        return JSONResponse(status_code=500, content={"error": VERIFY_FAILED})

    clear_cart(payload.cart_key, storage_factory, "payment confirmation")
    return {"success": True, "orderId": order_id}
