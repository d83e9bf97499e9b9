# storefront/services/contact_service.py
from sqlalchemy.orm import Session

from storefront.data.models.contact_message import ContactMessageModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ContactIn
from storefront.repos.message_repo import MessageRepo
from storefront.services.notification_service import NotificationService
from storefront.services.settings_service import SettingsService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ContactService:
    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.repo = MessageRepo(db)
        self.settings = SettingsService(db)
        self.notifier = notifier or NotificationService()

    def submit(self, payload: ContactIn) -> ContactMessageModel:
        message = self.repo.create(
            ContactMessageModel(name=payload.name, email=payload.email, message=payload.message)
        )
        logger.info(f"New contact message {message.id} from {payload.email}")

        admin_email = self.settings.load_store_settings().contact_email
        try:
            self.notifier.send_contact_emails(admin_email, payload.name, payload.email, payload.message)
        except Exception as e:
            logger.error(f"Contact emails for message {message.id} failed: {e}")
        return message

    def list_messages(self) -> list[ContactMessageModel]:
        return self.repo.list_messages()

    def mark_read(self, message_id: str, read: bool) -> ContactMessageModel:
        message = self.repo.get(message_id)
        if not message:
            raise NotFoundError("Message not found")
        return self.repo.set_read(message, read)
