# storefront/api/routers/contact.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_notifier
from storefront.data.database import get_db
from storefront.domain.schemas import ContactIn
from storefront.services.contact_service import ContactService
from storefront.services.notification_service import NotificationService

router = APIRouter(tags=["contact"])


@router.post("/contact", status_code=201)
def submit_contact(
    payload: ContactIn,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Formularz kontaktowy. Wiadomosc zapisana zawsze, maile best-effort.
    """
    message = ContactService(db, notifier).submit(payload)
    return {"success": True, "id": message.id}
