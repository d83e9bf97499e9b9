# storefront/data/seed.py
import sys
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# id zgodne z DEFAULT_PRICE_MAP, inaczej checkout odrzuci produkt
PRODUCTS = [
    {
        "id": "c3b9b190-2c40-4585-9df4-3951a73da274",
        "name": "iTag Pro",
        "description": "Precision finder with a loud speaker and one-year battery.",
        "price": Decimal("49.99"),
        "original_price": Decimal("59.99"),
        "category": "premium",
        "colors": ["Black", "White", "Silver"],
        "featured": True,
        "rating": Decimal("4.8"),
        "reviews_count": 312,
        "specs": [
            {"label": "Range", "value": "120 m"},
            {"label": "Battery", "value": "12 months"},
        ],
    },
    {
        "id": "9b88372b-d53e-47e6-8a4f-c00c7551873c",
        "name": "iTag Mini",
        "description": "Keyring-sized tracker for everyday carry.",
        "price": Decimal("29.99"),
        "category": "essential",
        "colors": ["Black", "White"],
        "featured": True,
        "rating": Decimal("4.6"),
        "reviews_count": 205,
    },
    {
        "id": "582fa096-7c4e-4cc4-b816-f813c517b206",
        "name": "iTag Ultra",
        "description": "Rugged waterproof tracker with extended range.",
        "price": Decimal("69.99"),
        "category": "premium",
        "colors": ["Black", "Orange"],
        "rating": Decimal("4.9"),
        "reviews_count": 98,
    },
    {
        "id": "9241cf38-6d1b-4d86-b48b-8bb2f6ae6bfd",
        "name": "iTag Slim",
        "description": "Card-shaped tracker for wallets and passports.",
        "price": Decimal("34.99"),
        "category": "lifestyle",
        "colors": ["Black"],
        "rating": Decimal("4.5"),
        "reviews_count": 141,
    },
    {
        "id": "721c44b0-1b4a-4856-9581-9c569232105f",
        "name": "iTag Pet",
        "description": "Collar tracker for cats and dogs.",
        "price": Decimal("39.99"),
        "category": "lifestyle",
        "colors": ["Blue", "Pink", "Black"],
        "rating": Decimal("4.7"),
        "reviews_count": 176,
    },
    {
        "id": "b894ac5b-f1ae-4c79-9622-a7d792fc758c",
        "name": "iTag 4-Pack",
        "description": "Four iTag Mini trackers at a bundle price.",
        "price": Decimal("99.99"),
        "original_price": Decimal("119.96"),
        "category": "bundle",
        "colors": [],
        "featured": True,
        "rating": Decimal("4.8"),
        "reviews_count": 64,
    },
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # only seed if empty
        if db.query(ProductModel).first():
            logger.info("Catalog already seeded")
            return
        for data in PRODUCTS:
            db.add(ProductModel(**data))
        db.commit()
        logger.info(f"Seeded {len(PRODUCTS)} products")
    finally:
        db.close()


def grant_admin(user_id: str):
    db = SessionLocal()
    try:
        UserService(db).grant_admin(user_id)
    finally:
        db.close()


if __name__ == "__main__":
    seed()
    if len(sys.argv) > 1:
        grant_admin(sys.argv[1])
