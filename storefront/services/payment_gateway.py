# storefront/services/payment_gateway.py
from typing import Any, Dict, List

import stripe

from storefront.domain.errors import WebhookSignatureError
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def to_plain(obj: Any) -> Any:
    """StripeObject -> zwykle dict/list, zeby serwisy nie zalezaly od SDK."""
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    if isinstance(obj, dict):
        return {k: to_plain(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_plain(v) for v in obj]
    return obj


class StripeGateway:
    """
    Cienka warstwa nad SDK Stripe. Bez retry - ponowienia robi sam Stripe
    (redelivery webhookow).
    """

    def __init__(self, api_key: str | None = None, webhook_secret: str | None = None):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret if webhook_secret is not None else settings.STRIPE_WEBHOOK_SECRET
        if self.api_key:
            stripe.api_key = self.api_key

    # webhook
    def construct_event(self, payload: bytes, signature: str | None) -> Dict[str, Any]:
        """
        Weryfikuje podpis i zwraca event jako dict.
        WebhookSignatureError - brak sekretu, brak lub zly podpis.
        ValueError - payload to nie JSON.
        """
        if not self.webhook_secret:
            raise WebhookSignatureError("Webhook secret not configured")
        if not signature:
            raise WebhookSignatureError("Missing stripe-signature header")
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError("Invalid signature") from e
        return to_plain(event)

    # checkout
    def retrieve_session(self, session_id: str) -> Dict[str, Any]:
        logger.info(f"Stripe GET checkout session {session_id}")
        return to_plain(stripe.checkout.Session.retrieve(session_id))

    def list_line_items(self, session_id: str) -> List[Dict[str, Any]]:
        logger.info(f"Stripe GET line items for {session_id}")
        items = stripe.checkout.Session.list_line_items(session_id, limit=100)
        return to_plain(items).get("data", [])

    def create_checkout_session(self, **params) -> Dict[str, Any]:
        return to_plain(stripe.checkout.Session.create(**params))

    # klienci
    def find_customer(self, email: str) -> Dict[str, Any] | None:
        found = to_plain(stripe.Customer.list(email=email, limit=1)).get("data", [])
        return found[0] if found else None

    def create_customer(self, **params) -> Dict[str, Any]:
        return to_plain(stripe.Customer.create(**params))

    def update_customer(self, customer_id: str, **params) -> Dict[str, Any]:
        return to_plain(stripe.Customer.modify(customer_id, **params))
