# storefront/repos/message_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.contact_message import ContactMessageModel


class MessageRepo:
    def __init__(self, db: Session):
        self.db = db

    def create(self, message: ContactMessageModel) -> ContactMessageModel:
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def list_messages(self) -> list[ContactMessageModel]:
        return list(
            self.db.execute(
                select(ContactMessageModel).order_by(ContactMessageModel.created_at.desc())
            ).scalars().all()
        )

    def get(self, message_id: str) -> ContactMessageModel | None:
        return self.db.get(ContactMessageModel, message_id)

    def set_read(self, message: ContactMessageModel, read: bool) -> ContactMessageModel:
        message.read = read
        self.db.commit()
        self.db.refresh(message)
        return message
