# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus


# ---------------------------------------------------------------- cart

class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1)
    selected_color: str = Field("", max_length=50)


class CartQuantityIn(CartItemIn):
    """Schema dla zmiany ilosci; 0 usuwa linie."""

    quantity: int


class CartProductOut(BaseModel):
    id: str
    name: str
    price: Decimal
    image: str
    category: str


class CartLineOut(BaseModel):
    product: CartProductOut
    quantity: int
    selected_color: str


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_key: str
    items: List[CartLineOut]
    total_items: int
    subtotal: Decimal
    shipping: Decimal
    total: Decimal
    currency: str


# ---------------------------------------------------------------- checkout

class AddressIn(BaseModel):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class CustomerInfoIn(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[AddressIn] = None


class CheckoutItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., alias="productId")
    quantity: int
    selected_color: str = Field("", alias="selectedColor")

    @field_validator("selected_color", mode="before")
    @classmethod
    def trim_color(cls, v):
        return str(v or "").strip()[:50]


class CheckoutSessionIn(BaseModel):
    """Schema dla utworzenia sesji platnosci."""

    model_config = ConfigDict(populate_by_name=True)

    items: List[CheckoutItemIn]
    customer_info: Optional[CustomerInfoIn] = Field(None, alias="customerInfo")
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    cart_key: Optional[str] = Field(None, alias="cartKey", max_length=100)


class CheckoutSessionOut(BaseModel):
    url: str


class VerifyPaymentIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="sessionId")
    user_id: Optional[str] = Field(None, alias="userId")
    cart_key: Optional[str] = Field(None, alias="cartKey", max_length=100)


# ---------------------------------------------------------------- orders

class ShippingAddress(BaseModel):
    name: Optional[str] = None
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class OrderItem(BaseModel):
    name: Optional[str] = None
    quantity: int
    price: int


class OrderOut(BaseModel):
    """Schema dla zamowienia (response). Kwoty w jednostkach minor."""

    id: str
    stripe_session_id: str
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    items: List[OrderItem]
    subtotal: int
    shipping: int
    total: int
    currency: str
    status: str
    tracking_number: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    tracking_number: Optional[str] = Field(None, max_length=255)


# ---------------------------------------------------------------- catalog

class ProductSpec(BaseModel):
    label: str
    value: str


class MediaItem(BaseModel):
    type: str
    url: str


class ProductOut(BaseModel):
    """Produkt w ksztalcie do wyswietlenia."""

    id: str
    name: str
    description: str
    price: Decimal
    original_price: Optional[Decimal] = None
    image: str
    category: str
    colors: List[str]
    in_stock: bool
    featured: bool
    rating: float
    reviews: int
    specs: List[ProductSpec]
    media: List[MediaItem]


class ProductIn(BaseModel):
    """Schema dla tworzenia produktu (admin)."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    category: str = "essential"
    colors: List[str] = []
    in_stock: bool = True
    featured: bool = False
    rating: Decimal = Field(Decimal("0"), ge=0, le=5)
    reviews_count: int = Field(0, ge=0)
    specs: Optional[List[ProductSpec]] = None
    image_url: Optional[str] = None
    media: Optional[List[MediaItem]] = None


class ProductUpdate(BaseModel):
    """Schema dla czesciowej edycji produktu (admin)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[str] = None
    colors: Optional[List[str]] = None
    in_stock: Optional[bool] = None
    featured: Optional[bool] = None
    rating: Optional[Decimal] = Field(None, ge=0, le=5)
    reviews_count: Optional[int] = Field(None, ge=0)
    specs: Optional[List[ProductSpec]] = None
    image_url: Optional[str] = None
    media: Optional[List[MediaItem]] = None


# ---------------------------------------------------------------- users

class ProfileIn(BaseModel):
    full_name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    address_line1: Optional[str] = Field(None, max_length=200)
    address_line2: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=2)


class ProfileOut(ProfileIn):
    user_id: str
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AdminUserOut(BaseModel):
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    roles: List[str]
    email_confirmed: bool
    created_at: Optional[datetime] = None


class ResendVerificationIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


# ---------------------------------------------------------------- contact

class ContactIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$", max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactMessageOut(BaseModel):
    id: str
    name: str
    email: str
    message: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageReadUpdate(BaseModel):
    read: bool


# ---------------------------------------------------------------- analytics

class MonthlyRevenue(BaseModel):
    month: str
    revenue: int


class TopProduct(BaseModel):
    name: str
    units: int
    revenue: int


class AnalyticsOut(BaseModel):
    currency: str
    total_revenue: int
    orders_count: int
    customers_count: int
    average_order_value: int
    monthly_revenue: List[MonthlyRevenue]
    growth_percentage: Optional[float] = None
    status_counts: dict[str, int]
    top_products: List[TopProduct]
