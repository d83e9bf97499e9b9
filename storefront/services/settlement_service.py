# storefront/services/settlement_service.py
from typing import Any, Dict, List

import stripe
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import PaymentNotCompletedError, PaymentVerificationError
from storefront.domain.order_status import OrderStatus
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import StripeGateway
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ADDRESS_FIELDS = ("line1", "line2", "city", "state", "postal_code", "country")


def _address_from(name: str | None, address: Dict[str, Any] | None) -> Dict[str, Any] | None:
    if not address:
        return None
    data = {"name": name}
    data.update({field: address.get(field) for field in ADDRESS_FIELDS})
    return data


def extract_shipping_address(session: Dict[str, Any]) -> Dict[str, Any] | None:
    """
    Adres dostawy z sesji checkout. Kolejnosc:
    collected_information.shipping_details (aktualne API),
    shipping_details (starsze wersje API),
    customer_details.address (niektore metody platnosci nie podaja osobnego adresu).
    """
    collected = (session.get("collected_information") or {}).get("shipping_details")
    for details in (collected, session.get("shipping_details")):
        if details and details.get("address"):
            return _address_from(details.get("name"), details["address"])

    customer = session.get("customer_details") or {}
    return _address_from(customer.get("name"), customer.get("address"))


def extract_items(line_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "name": item.get("description"),
            "quantity": item.get("quantity") or 0,
            "price": item.get("amount_total") or 0,
        }
        for item in line_items
    ]


class SettlementService:
    """
    Zamiana oplaconej sesji Stripe w zamowienie.

    Dwa wejscia (webhook i weryfikacja z przegladarki) wolaja reconcile() dla
    tej samej sesji, czesto rownolegle. Odczyt przed insertem jest tylko
    skrotem; o tym, kto wygral, decyduje unique na stripe_session_id.
    """

    def __init__(self, db: Session, gateway: StripeGateway, notifier: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.gateway = gateway
        self.notifier = notifier or NotificationService()

    def reconcile(self, session_id: str, account_id: str | None = None) -> str:
        existing = self.repo.get_by_session_id(session_id)
        if existing:
            logger.info(f"Order {existing.id} already exists for session {session_id}")
            return existing.id

        try:
            session = self.gateway.retrieve_session(session_id)
        except stripe.StripeError as e:
            logger.error(f"Could not retrieve session {session_id}: {e}")
            raise PaymentVerificationError("Payment verification failed") from e

        if session.get("payment_status") != "paid":
            logger.warning(
                f"Session {session_id} not paid (payment_status={session.get('payment_status')})"
            )
            raise PaymentNotCompletedError("Payment not completed")

        try:
            line_items = self.gateway.list_line_items(session_id)
        except stripe.StripeError as e:
            logger.error(f"Could not list line items for {session_id}: {e}")
            raise PaymentVerificationError("Payment verification failed") from e

        order = self._build_order(session, line_items, account_id)

        try:
            created = self.repo.create_order(order)
        except IntegrityError:
            # drugi wyscig przegral - zamowienie juz zapisane przez konkurenta
            self.repo.rollback()
            winner = self.repo.get_by_session_id(session_id)
            if winner is None:
                logger.error(f"Insert for session {session_id} violated a constraint and no order exists")
                raise PaymentVerificationError("Payment verification failed")
            logger.info(f"Concurrent settlement for {session_id}, using order {winner.id}")
            return winner.id
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Inserting order for session {session_id} failed: {e}")
            raise PaymentVerificationError("Payment verification failed") from e

        logger.info(f"Order {created.id} created from session {session_id}")

        self._send_confirmation(created)
        return created.id

    def _build_order(
        self,
        session: Dict[str, Any],
        line_items: List[Dict[str, Any]],
        account_id: str | None,
    ) -> OrderModel:
        customer = session.get("customer_details") or {}
        subtotal = session.get("amount_subtotal") or 0
        shipping = (session.get("shipping_cost") or {}).get("amount_total") or 0
        total = subtotal + shipping

        if session.get("amount_total") not in (None, total):
            # podatki/rabaty po stronie Stripe - w zamowieniu trzymamy subtotal + shipping
            logger.warning(
                f"Session {session['id']} amount_total={session.get('amount_total')} "
                f"differs from subtotal+shipping={total}"
            )

        return OrderModel(
            stripe_session_id=session["id"],
            stripe_payment_intent_id=session.get("payment_intent"),
            customer_email=customer.get("email"),
            customer_name=customer.get("name"),
            shipping_address=extract_shipping_address(session),
            items=extract_items(line_items),
            subtotal=subtotal,
            shipping=shipping,
            total=total,
            currency=session.get("currency") or "usd",
            status=OrderStatus.COMPLETED.value,
            # konto z checkoutu (client_reference_id) ma pierwszenstwo
            user_id=session.get("client_reference_id") or account_id,
        )

    def _send_confirmation(self, order: OrderModel) -> None:
        if not order.customer_email:
            logger.info(f"Order {order.id} has no customer email, confirmation skipped")
            return
        try:
            self.notifier.send_order_confirmation(order)
        except Exception as e:
            # zamowienie juz zapisane, mail jest best-effort
            logger.error(f"Confirmation email for order {order.id} failed: {e}")
