# storefront/services/catalog_service.py
import json
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.cart import CartProduct
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductOut, ProductSpec, MediaItem, ProductIn, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PLACEHOLDER_IMAGE = "/placeholder.svg"
VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".m4v")
CENT = Decimal("0.01")


def normalize_price(value: Any) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_specs(raw: Any) -> List[ProductSpec]:
    """
    Specyfikacja produktu w jednej z postaci:
    lista {label, value}, ten sam JSON jako string, albo linie "Etykieta: wartosc".
    Niepoprawne wpisy sa pomijane.
    """
    if not raw:
        return []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            specs = []
            for line in raw.splitlines():
                label, sep, value = line.partition(":")
                if sep and label.strip() and value.strip():
                    specs.append(ProductSpec(label=label.strip(), value=value.strip()))
            return specs

    if not isinstance(raw, list):
        return []

    specs = []
    for entry in raw:
        if isinstance(entry, dict) and entry.get("label") and entry.get("value") is not None:
            specs.append(ProductSpec(label=str(entry["label"]), value=str(entry["value"])))
    return specs


def parse_media(raw: Any) -> List[MediaItem]:
    if not isinstance(raw, list):
        return []

    media = []
    for entry in raw:
        if isinstance(entry, str) and entry:
            kind = "video" if entry.lower().split("?")[0].endswith(VIDEO_EXTENSIONS) else "image"
            media.append(MediaItem(type=kind, url=entry))
        elif isinstance(entry, dict) and entry.get("url"):
            media.append(MediaItem(type=entry.get("type") or "image", url=entry["url"]))
    return media


def resolve_image(image_url: str | None, media: List[MediaItem]) -> str:
    if image_url:
        return image_url
    for item in media:
        if item.type == "image":
            return item.url
    return PLACEHOLDER_IMAGE


def to_display(product: ProductModel) -> ProductOut:
    media = parse_media(product.media)
    original = normalize_price(product.original_price) if product.original_price else None
    return ProductOut(
        id=product.id,
        name=product.name,
        description=product.description or "",
        price=normalize_price(product.price),
        original_price=original if original and original > 0 else None,
        image=resolve_image(product.image_url, media),
        category=product.category,
        colors=list(product.colors or []),
        in_stock=bool(product.in_stock),
        featured=bool(product.featured),
        rating=float(product.rating or 0),
        reviews=product.reviews_count or 0,
        specs=parse_specs(product.specs),
        media=media,
    )


def to_cart_product(product: ProductOut) -> CartProduct:
    return CartProduct(
        id=product.id,
        name=product.name,
        price=product.price,
        image=product.image,
        category=product.category,
    )


class CatalogService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    #query
    def list_products(self, category: str | None = None, featured: bool | None = None) -> List[ProductOut]:
        return [to_display(p) for p in self.repo.list_products(category=category, featured=featured)]

    def get_product(self, product_id: str) -> ProductOut:
        return to_display(self._get_model(product_id))

    #commands (admin)
    def create_product(self, payload: ProductIn) -> ProductOut:
        data = payload.model_dump(mode="json")
        product = ProductModel(**data)
        product.price = payload.price
        product.original_price = payload.original_price
        product.rating = payload.rating
        created = self.repo.save(product)
        logger.info(f"Product {created.id} created")
        return to_display(created)

    def update_product(self, product_id: str, payload: ProductUpdate) -> ProductOut:
        product = self._get_model(product_id)
        changes = payload.model_dump(mode="json", exclude_unset=True)
        for field, value in changes.items():
            setattr(product, field, value)
        # Numeric trzymamy jako Decimal, nie string z JSON
        for field in ("price", "original_price", "rating"):
            if field in changes:
                setattr(product, field, getattr(payload, field))
        updated = self.repo.save(product)
        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        return to_display(updated)

    def delete_product(self, product_id: str) -> None:
        self.repo.delete(self._get_model(product_id))
        logger.info(f"Product {product_id} deleted")

    def _get_model(self, product_id: str) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product
