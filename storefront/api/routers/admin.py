# storefront/api/routers/admin.py
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.api.deps import CurrentUser, get_auth_client, get_notifier, require_admin
from storefront.data.database import get_db
from storefront.domain.errors import AuthServiceError, NotFoundError
from storefront.domain.schemas import (
    AdminUserOut,
    AnalyticsOut,
    ContactMessageOut,
    MessageReadUpdate,
    OrderOut,
    OrderStatusUpdate,
    ProductIn,
    ProductOut,
    ProductUpdate,
    ResendVerificationIn,
)
from storefront.services.analytics_service import AnalyticsService
from storefront.services.auth_client import AuthClient
from storefront.services.catalog_service import CatalogService
from storefront.services.contact_service import ContactService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.settings_service import SettingsService
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


#produkty
@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    return CatalogService(db).create_product(payload)


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).update_product(product_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    try:
        CatalogService(db).delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


#zamowienia
@router.get("/orders", response_model=List[OrderOut])
def list_orders(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return OrderService(db).list_orders(status=status, search=search)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    try:
        return OrderService(db).get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/orders/{order_id}", response_model=OrderOut)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Zmiana statusu. shipped/delivered wysyla maila do klienta.
    """
    svc = OrderService(db, notifier)
    try:
        return svc.update_status(order_id, payload.status, payload.tracking_number)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


#uzytkownicy
@router.get("/users", response_model=List[AdminUserOut])
def list_users(db: Session = Depends(get_db), auth: AuthClient = Depends(get_auth_client)):
    try:
        return UserService(db, auth).list_users()
    except AuthServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/users/resend-verification")
def resend_verification(
    payload: ResendVerificationIn,
    db: Session = Depends(get_db),
    auth: AuthClient = Depends(get_auth_client),
):
    try:
        UserService(db, auth).resend_verification(payload.email)
    except AuthServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True}


@router.post("/users/{user_id}/ban")
def ban_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    auth: AuthClient = Depends(get_auth_client),
):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Cannot ban yourself")
    try:
        UserService(db, auth).ban_user(user_id)
    except AuthServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True}


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    auth: AuthClient = Depends(get_auth_client),
):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Cannot delete yourself")
    try:
        UserService(db, auth).delete_user(user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Deleting user {user_id} failed: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to delete user"})
    except AuthServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True}


#wiadomosci
@router.get("/messages", response_model=List[ContactMessageOut])
def list_messages(db: Session = Depends(get_db)):
    return ContactService(db).list_messages()


@router.patch("/messages/{message_id}", response_model=ContactMessageOut)
def mark_message(message_id: str, payload: MessageReadUpdate, db: Session = Depends(get_db)):
    try:
        return ContactService(db).mark_read(message_id, payload.read)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


#ustawienia
@router.get("/settings", response_model=Dict[str, Optional[str]])
def get_settings(db: Session = Depends(get_db)):
    return SettingsService(db).get_all()


@router.put("/settings", response_model=Dict[str, Optional[str]])
def update_settings(values: Dict[str, Optional[str]], db: Session = Depends(get_db)):
    try:
        return SettingsService(db).update(values)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


#analityka
@router.get("/analytics", response_model=AnalyticsOut)
def analytics(db: Session = Depends(get_db)):
    currency = SettingsService(db).load_store_settings().currency
    return AnalyticsService(db).dashboard(currency=currency)
