from sqlalchemy import select, delete
from sqlalchemy.orm import Session
from storefront.data.models.user import ProfileModel, UserRoleModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> ProfileModel | None:
        return self.db.get(ProfileModel, user_id)

    def list_profiles(self) -> list[ProfileModel]:
        return list(
            self.db.execute(
                select(ProfileModel).order_by(ProfileModel.created_at.desc())
            ).scalars().all()
        )

    def save_profile(self, profile: ProfileModel) -> ProfileModel:
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def delete_profile(self, user_id: str) -> None:
        self.db.execute(delete(ProfileModel).where(ProfileModel.user_id == user_id))

    def get_roles(self, user_id: str) -> list[str]:
        return list(
            self.db.execute(
                select(UserRoleModel.role).where(UserRoleModel.user_id == user_id)
            ).scalars().all()
        )

    def has_role(self, user_id: str, role: str) -> bool:
        return role in self.get_roles(user_id)

    def add_role(self, user_id: str, role: str) -> None:
        if not self.has_role(user_id, role):
            self.db.add(UserRoleModel(user_id=user_id, role=role))
            self.db.commit()

    def delete_roles(self, user_id: str) -> None:
        self.db.execute(delete(UserRoleModel).where(UserRoleModel.user_id == user_id))

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
