# storefront/api/routers/settings.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.store_settings import ContentSettings, StoreSettings
from storefront.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/public", response_model=StoreSettings)
def public_settings(db: Session = Depends(get_db)):
    return SettingsService(db).load_store_settings()


@router.get("/content", response_model=ContentSettings)
def content_settings(db: Session = Depends(get_db)):
    return SettingsService(db).load_content()
