# storefront/services/order_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import NotFoundError, InvalidStatusTransitionError
from storefront.domain.order_status import OrderStatus, NOTIFY_STATUSES, can_transition
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien po rozliczeniu:
    historia klienta, widoki admina, zmiany statusu.
    Tworzenie zamowien jest w SettlementService.
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.notifier = notifier or NotificationService()

    def get_order(self, order_id: str) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def list_orders(self, status: str | None = None, search: str | None = None) -> list[OrderModel]:
        return self.repo.list_orders(status=status, search=search)

    def list_for_user(self, user_id: str) -> list[OrderModel]:
        return self.repo.list_for_user(user_id)

    def update_status(
        self,
        order_id: str,
        status: OrderStatus | str,
        tracking_number: str | None = None,
    ) -> OrderModel:
        """
        Use Case: zmiana statusu przez admina.
        Mail do klienta tylko przy shipped/delivered, best-effort.
        """
        new_status = OrderStatus(status)
        order = self.get_order(order_id)

        if not can_transition(order.status, new_status):
            raise InvalidStatusTransitionError(
                f"Cannot change order status from {order.status} to {new_status.value}"
            )

        tracking = (tracking_number or "").strip() or None
        if new_status != OrderStatus.SHIPPED:
            tracking = None

        updated = self.repo.update_status(order, new_status.value, tracking)
        logger.info(f"Order {order_id} status {new_status.value}")

        if new_status in NOTIFY_STATUSES:
            self._notify_status(updated)

        return updated

    def _notify_status(self, order: OrderModel) -> None:
        if not order.customer_email:
            logger.info(f"Order {order.id} has no customer email, status email skipped")
            return
        try:
            self.notifier.send_order_status(
                customer_email=order.customer_email,
                customer_name=order.customer_name,
                order_id=order.id,
                status=order.status,
                items=order.items or [],
                tracking_number=order.tracking_number,
            )
        except Exception as e:
            logger.error(f"Status email for order {order.id} failed: {e}")
