from sqlalchemy import Column, Integer, String, DateTime, JSON
from datetime import datetime, timezone
import uuid

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # klucz idempotencji - jedna sesja Stripe = jedno zamowienie
    stripe_session_id = Column(String(255), nullable=False, unique=True)
    stripe_payment_intent_id = Column(String(255), nullable=True)

    customer_email = Column(String(255), nullable=True, index=True)
    customer_name = Column(String(255), nullable=True)
    shipping_address = Column(JSON, nullable=True)
    items = Column(JSON, nullable=False, default=list)

    # kwoty w groszach/centach
    subtotal = Column(Integer, nullable=False, default=0)
    shipping = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="usd")

    status = Column(String(20), nullable=False, default="completed")
    tracking_number = Column(String(255), nullable=True)
    user_id = Column(String(36), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
