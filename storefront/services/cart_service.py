# storefront/services/cart_service.py
from typing import Any, Dict

from storefront.domain.cart import CartStore, CartStorage, shipping_for
from storefront.domain.errors import NotFoundError
from storefront.domain.store_settings import StoreSettings
from storefront.services.catalog_service import CatalogService, to_cart_product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Koszyk po stronie serwera: CartStore + trwalosc w storage.
    commands (add, remove, set_quantity, clear) modyfikuja stan,
    query (get) tylko odczyt.
    """

    def __init__(self, cart_key: str, storage: CartStorage, catalog: CatalogService, store_settings: StoreSettings):
        self.cart_key = cart_key
        self.store = CartStore(storage)
        self.catalog = catalog
        self.store_settings = store_settings

    #query - odczyt
    def get_cart(self) -> Dict[str, Any]:
        subtotal = self.store.total_price()
        shipping = shipping_for(
            subtotal,
            self.store_settings.free_shipping_threshold,
            self.store_settings.shipping_flat_rate,
        )
        return {
            "cart_key": self.cart_key,
            "items": [line.model_dump() for line in self.store.lines],
            "total_items": self.store.total_items(),
            "subtotal": subtotal,
            "shipping": shipping,
            "total": subtotal + shipping,
            "currency": self.store_settings.currency,
        }

    #commands
    def add_product(self, product_id: str, color: str) -> Dict[str, Any]:
        # cena z katalogu w chwili dodania, potem juz z migawki
        product = self.catalog.get_product(product_id)
        if not product.in_stock:
            raise ValueError("Product is out of stock")
        if product.colors and color not in product.colors:
            raise ValueError(f"Color {color!r} not available for this product")

        self.store.add(to_cart_product(product), color)
        logger.info(f"Cart {self.cart_key}: added {product_id} ({color or '-'})")
        return self.get_cart()

    def set_quantity(self, product_id: str, color: str, quantity: int) -> Dict[str, Any]:
        if not any(
            line.product.id == product_id and line.selected_color == color
            for line in self.store.lines
        ):
            raise NotFoundError("Item not in cart")
        self.store.set_quantity(product_id, color, quantity)
        logger.info(f"Cart {self.cart_key}: {product_id} ({color or '-'}) quantity -> {quantity}")
        return self.get_cart()

    def remove_product(self, product_id: str, color: str) -> Dict[str, Any]:
        self.store.remove(product_id, color)
        logger.info(f"Cart {self.cart_key}: removed {product_id} ({color or '-'})")
        return self.get_cart()

    def clear(self) -> Dict[str, Any]:
        self.store.clear()
        logger.info(f"Cart {self.cart_key} cleared")
        return self.get_cart()
