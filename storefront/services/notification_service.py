# storefront/services/notification_service.py
from typing import Any, Dict, List

from storefront.celery_worker import celery_app
from storefront.data.models.order import OrderModel
from storefront.utils.currency import format_minor
from storefront.utils.emailing import render_email, send_email_smtp
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_SUBJECTS = {
    "shipped": "Your order #{short_id} has been shipped!",
    "delivered": "Your order #{short_id} has been delivered!",
}


def short_order_id(order_id: str) -> str:
    return order_id[:8]


def order_confirmation_payload(order: OrderModel) -> Dict[str, Any]:
    """Wszystko co potrzebne do maila, juz sformatowane - task nie siega do bazy."""
    currency = order.currency
    return {
        "customer_email": order.customer_email,
        "customer_name": order.customer_name,
        "order_id": order.id,
        "items": [
            {
                "name": item.get("name"),
                "quantity": item.get("quantity"),
                "price": format_minor(item.get("price") or 0, currency),
            }
            for item in (order.items or [])
        ],
        "subtotal": format_minor(order.subtotal, currency),
        "shipping": format_minor(order.shipping, currency),
        "total": format_minor(order.total, currency),
        "shipping_address": order.shipping_address,
    }


def status_email_subject(status: str, order_id: str) -> str | None:
    template = STATUS_SUBJECTS.get(status)
    if template is None:
        return None
    return template.format(short_id=short_order_id(order_id))


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_confirmation(order: OrderModel):
        send_order_confirmation_task.delay(order_confirmation_payload(order))

    @staticmethod
    def send_order_status(
        customer_email: str,
        customer_name: str | None,
        order_id: str,
        status: str,
        items: List[Dict[str, Any]],
        tracking_number: str | None = None,
    ):
        send_order_status_task.delay({
            "customer_email": customer_email,
            "customer_name": customer_name,
            "order_id": order_id,
            "status": status,
            "items": [{"name": i.get("name"), "quantity": i.get("quantity")} for i in items],
            "tracking_number": tracking_number,
        })

    @staticmethod
    def send_contact_emails(admin_email: str, name: str, email: str, message: str):
        send_contact_emails_task.delay({
            "admin_email": admin_email,
            "name": name,
            "email": email,
            "message": message,
        })


@celery_app.task(name="storefront.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(payload: Dict[str, Any]):
    to_addr = payload.get("customer_email")
    if not to_addr:
        logger.info(f"[NOTIFICATION] Order {payload.get('order_id')} has no customer email, skipping")
        return {"order_id": payload.get("order_id"), "status": "skipped"}

    html = render_email("order_confirmation.html", **payload)
    subject = f"Order confirmed #{short_order_id(payload['order_id'])}"
    sent = send_email_smtp(to_addr, subject, html)
    return {"order_id": payload["order_id"], "status": "sent" if sent else "failed"}


@celery_app.task(name="storefront.services.notification_service.send_order_status_task")
def send_order_status_task(payload: Dict[str, Any]):
    subject = status_email_subject(payload["status"], payload["order_id"])
    if subject is None:
        logger.info(f"[NOTIFICATION] Status {payload['status']} does not require an email")
        return {"order_id": payload["order_id"], "status": "skipped"}

    html = render_email("order_status.html", **payload)
    sent = send_email_smtp(payload["customer_email"], subject, html)
    return {"order_id": payload["order_id"], "status": "sent" if sent else "failed"}


@celery_app.task(name="storefront.services.notification_service.send_contact_emails_task")
def send_contact_emails_task(payload: Dict[str, Any]):
    admin_html = render_email("contact_admin.html", **payload)
    send_email_smtp(
        payload["admin_email"],
        f"New Contact Form Submission from {payload['name']}",
        admin_html,
        reply_to=payload["email"],
    )

    ack_html = render_email("contact_ack.html", **payload)
    send_email_smtp(payload["email"], "We received your message!", ack_html)
    return {"status": "sent"}
