# storefront/services/checkout_service.py
import re
from typing import Any, Dict, List

import stripe

from storefront.domain.errors import UnknownProductError, InvalidCheckoutError, CheckoutSessionError
from storefront.domain.schemas import CheckoutItemIn, CustomerInfoIn
from storefront.services.payment_gateway import StripeGateway
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MAX_LINES = 50
MAX_QUANTITY = 100
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ALLOWED_COUNTRIES = [
    "AC", "AD", "AE", "AF", "AG", "AI", "AL", "AM", "AO", "AQ", "AR", "AT", "AU", "AW", "AX", "AZ",
    "BA", "BB", "BD", "BE", "BF", "BG", "BH", "BI", "BJ", "BL", "BM", "BN", "BO", "BQ", "BR", "BS",
    "BT", "BV", "BW", "BY", "BZ",
    "CA", "CD", "CF", "CG", "CH", "CI", "CK", "CL", "CM", "CN", "CO", "CR", "CV", "CW", "CY", "CZ",
    "DE", "DJ", "DK", "DM", "DO", "DZ",
    "EC", "EE", "EG", "EH", "ER", "ES", "ET",
    "FI", "FJ", "FK", "FO", "FR",
    "GA", "GB", "GD", "GE", "GF", "GG", "GH", "GI", "GL", "GM", "GN", "GP", "GQ", "GR", "GS", "GT",
    "GU", "GW", "GY",
    "HK", "HN", "HR", "HT", "HU",
    "ID", "IE", "IL", "IM", "IN", "IO", "IQ", "IS", "IT",
    "JE", "JM", "JO", "JP",
    "KE", "KG", "KH", "KI", "KM", "KN", "KR", "KW", "KY", "KZ",
    "LA", "LB", "LC", "LI", "LK", "LR", "LS", "LT", "LU", "LV", "LY",
    "MA", "MC", "MD", "ME", "MF", "MG", "MK", "ML", "MM", "MN", "MO", "MQ", "MR", "MS", "MT", "MU",
    "MV", "MW", "MX", "MY", "MZ",
    "NA", "NC", "NE", "NG", "NI", "NL", "NO", "NP", "NR", "NU", "NZ",
    "OM",
    "PA", "PE", "PF", "PG", "PH", "PK", "PL", "PM", "PN", "PR", "PS", "PT", "PY",
    "QA",
    "RE", "RO", "RS", "RU", "RW",
    "SA", "SB", "SC", "SE", "SG", "SH", "SI", "SJ", "SK", "SL", "SM", "SN", "SO", "SR", "SS", "ST",
    "SV", "SX", "SZ",
    "TA", "TC", "TD", "TF", "TG", "TH", "TJ", "TK", "TL", "TM", "TN", "TO", "TR", "TT", "TV", "TW", "TZ",
    "UA", "UG", "US", "UY", "UZ",
    "VA", "VC", "VE", "VG", "VN", "VU",
    "WF", "WS",
    "XK",
    "YE", "YT",
    "ZA", "ZM", "ZW",
]


def _clean(value: str | None, limit: int) -> str | None:
    if value is None:
        return None
    return value.strip()[:limit] or None


def _validate_email(email: str | None) -> str | None:
    email = _clean(email, 255)
    if email and not EMAIL_RE.match(email):
        raise InvalidCheckoutError("Invalid email format")
    return email


class CheckoutService:
    """
    Use Case: start platnosci. Koszyk -> sesja Stripe Checkout -> URL strony platnosci.
    """

    def __init__(self, gateway: StripeGateway, price_map: Dict[str, str] | None = None, frontend_url: str | None = None):
        self.gateway = gateway
        self.price_map = price_map if price_map is not None else settings.STRIPE_PRICE_MAP
        self.frontend_url = (frontend_url or settings.FRONTEND_URL).rstrip("/")

    def create_session(
        self,
        items: List[CheckoutItemIn],
        customer_info: CustomerInfoIn | None = None,
        customer_email: str | None = None,
        account_id: str | None = None,
    ) -> str:
        line_items = self.build_line_items(items)
        logger.info(f"Creating checkout session with {len(line_items)} line items")

        info = self._clean_customer_info(customer_info)
        email = (info or {}).get("email") or _validate_email(customer_email)

        params: Dict[str, Any] = {
            "line_items": line_items,
            "mode": "payment",
            "success_url": f"{self.frontend_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self.frontend_url}/cart",
            "shipping_address_collection": {"allowed_countries": ALLOWED_COUNTRIES},
            "phone_number_collection": {"enabled": True},
        }
        if account_id:
            # webhook przypisze zamowienie do konta
            params["client_reference_id"] = account_id

        try:
            customer_id = self._resolve_customer(email, info) if email else None
            if customer_id:
                params["customer"] = customer_id
            elif email:
                params["customer_email"] = email

            session = self.gateway.create_checkout_session(**params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed: {e}")
            raise CheckoutSessionError("Unable to start checkout") from e

        logger.info(f"Checkout session {session.get('id')} created")
        return session["url"]

    def build_line_items(self, items: List[CheckoutItemIn]) -> List[Dict[str, Any]]:
        if not items:
            raise InvalidCheckoutError("No items provided for checkout")
        if len(items) > MAX_LINES:
            raise InvalidCheckoutError(f"Too many items in cart (max {MAX_LINES})")

        line_items = []
        for idx, item in enumerate(items):
            price_id = self.price_map.get(item.product_id)
            if not price_id:
                raise UnknownProductError(item.product_id)
            if not 1 <= item.quantity <= MAX_QUANTITY:
                raise InvalidCheckoutError(
                    f"Invalid quantity at index {idx}: must be between 1 and {MAX_QUANTITY}"
                )
            line_items.append({"price": price_id, "quantity": item.quantity})
        return line_items

    def _clean_customer_info(self, info: CustomerInfoIn | None) -> Dict[str, Any] | None:
        if info is None:
            return None

        address = None
        if info.address is not None:
            a = info.address
            address = {
                "line1": _clean(a.line1, 200),
                "line2": _clean(a.line2, 200),
                "city": _clean(a.city, 100),
                "state": _clean(a.state, 50),
                "postal_code": _clean(a.postal_code, 20),
                "country": (_clean(a.country, 2) or "").upper() or None,
            }

        return {
            "email": _validate_email(info.email),
            "name": _clean(info.name, 200),
            "phone": _clean(info.phone, 30),
            "address": address,
        }

    def _resolve_customer(self, email: str, info: Dict[str, Any] | None) -> str | None:
        """
        Istniejacy klient Stripe z tym mailem (dane odswiezone z profilu)
        albo nowy, gdy mamy dane do prefill. Bez danych - tylko customer_email.
        """
        existing = self.gateway.find_customer(email)
        if existing:
            logger.info(f"Found existing Stripe customer {existing['id']}")
            if info:
                self._update_customer(existing["id"], info)
            return existing["id"]

        if not info:
            return None

        created = self.gateway.create_customer(email=email, **self._customer_fields(info))
        logger.info(f"Created Stripe customer {created['id']}")
        return created["id"]

    def _update_customer(self, customer_id: str, info: Dict[str, Any]) -> None:
        try:
            self.gateway.update_customer(customer_id, **self._customer_fields(info))
        except stripe.StripeError as e:
            # prefill to wygoda, nie blokujemy checkoutu
            logger.warning(f"Could not update Stripe customer {customer_id}: {e}")

    @staticmethod
    def _customer_fields(info: Dict[str, Any]) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if info.get("name"):
            fields["name"] = info["name"]
        if info.get("phone"):
            fields["phone"] = info["phone"]

        address = info.get("address") or {}
        if address.get("line1"):
            addr = {k: v for k, v in address.items() if v}
            addr.setdefault("country", "US")
            fields["address"] = addr
            fields["shipping"] = {
                "name": info.get("name") or "",
                "phone": info.get("phone") or "",
                "address": addr,
            }
        return fields
