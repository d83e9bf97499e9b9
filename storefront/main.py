# storefront/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from storefront.data.database import Base, engine
from storefront.api.routers import (
    admin,
    carts,
    checkout,
    contact,
    health,
    orders,
    products,
    profile,
    settings,
    webhooks,
)
from storefront.utils.logging import get_logger
from storefront.utils.settings import FRONTEND_URL

logger = get_logger(__name__)

# modele musza byc zarejestrowane w Base.metadata przed create_all
import storefront.data.models  # noqa: F401,E402

logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(webhooks.router)
    app.include_router(orders.router)
    app.include_router(profile.router)
    app.include_router(contact.router)
    app.include_router(settings.router)
    app.include_router(admin.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
