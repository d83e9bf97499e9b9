# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_cart_storage_factory
from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CartItemIn, CartQuantityIn, CartOut
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.settings_service import SettingsService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(cart_key: str, db: Session, storage_factory) -> CartService:
    return CartService(
        cart_key=cart_key,
        storage=storage_factory(cart_key),
        catalog=CatalogService(db),
        store_settings=SettingsService(db).load_store_settings(),
    )


@router.get("/{cart_key}", response_model=CartOut)
def get_cart(
    cart_key: str,
    db: Session = Depends(get_db),
    storage_factory=Depends(get_cart_storage_factory),
):
    return get_service(cart_key, db, storage_factory).get_cart()


@router.post("/{cart_key}/items", response_model=CartOut)
def add_item(
    cart_key: str,
    payload: CartItemIn,
    db: Session = Depends(get_db),
    storage_factory=Depends(get_cart_storage_factory),
):
    svc = get_service(cart_key, db, storage_factory)
    try:
        return svc.add_product(payload.product_id, payload.selected_color)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{cart_key}/items", response_model=CartOut)
def set_quantity(
    cart_key: str,
    payload: CartQuantityIn,
    db: Session = Depends(get_db),
    storage_factory=Depends(get_cart_storage_factory),
):
    svc = get_service(cart_key, db, storage_factory)
    try:
        return svc.set_quantity(payload.product_id, payload.selected_color, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{cart_key}/items/{product_id}", response_model=CartOut)
def remove_item(
    cart_key: str,
    product_id: str,
    selected_color: str = Query(""),
    db: Session = Depends(get_db),
    storage_factory=Depends(get_cart_storage_factory),
):
    return get_service(cart_key, db, storage_factory).remove_product(product_id, selected_color)


@router.delete("/{cart_key}", response_model=CartOut)
def clear_cart(
    cart_key: str,
    db: Session = Depends(get_db),
    storage_factory=Depends(get_cart_storage_factory),
):
    return get_service(cart_key, db, storage_factory).clear()
