from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.user import ProfileModel
from storefront.domain.errors import AuthServiceError
from storefront.domain.schemas import AdminUserOut, CustomerInfoIn, AddressIn, ProfileIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.auth_client import AuthClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ADMIN_ROLE = "admin"


class UserService:
    def __init__(self, db: Session, auth: AuthClient | None = None):
        self.repo = UserRepo(db)
        self.orders = OrderRepo(db)
        self.auth = auth or AuthClient()

    # profil klienta
    def get_profile(self, user_id: str, email: str | None = None) -> ProfileModel:
        profile = self.repo.get_profile(user_id)
        if profile:
            return profile
        return self.repo.save_profile(ProfileModel(user_id=user_id, email=email))

    def update_profile(self, user_id: str, payload: ProfileIn, email: str | None = None) -> ProfileModel:
        profile = self.get_profile(user_id, email)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)
        if email:
            profile.email = email
        return self.repo.save_profile(profile)

    def customer_info(self, user_id: str) -> CustomerInfoIn | None:
        """Dane z profilu do prefill checkoutu."""
        profile = self.repo.get_profile(user_id)
        if not profile:
            return None
        address = None
        if profile.address_line1:
            address = AddressIn(
                line1=profile.address_line1,
                line2=profile.address_line2,
                city=profile.city,
                state=profile.state,
                postal_code=profile.postal_code,
                country=profile.country,
            )
        return CustomerInfoIn(
            email=profile.email,
            name=profile.full_name,
            phone=profile.phone,
            address=address,
        )

    # role
    def is_admin(self, user_id: str) -> bool:
        return self.repo.has_role(user_id, ADMIN_ROLE)

    def grant_admin(self, user_id: str) -> None:
        self.repo.add_role(user_id, ADMIN_ROLE)
        logger.info(f"Admin role granted to {user_id}")

    # admin
    def list_users(self) -> List[AdminUserOut]:
        profiles = self.repo.list_profiles()
        wanted = {p.user_id for p in profiles}
        confirmed = {
            u["id"]: bool(u.get("email_confirmed_at"))
            for u in self.auth.list_users()
            if u.get("id") in wanted
        }
        logger.info(f"Auth status found for {len(confirmed)} of {len(wanted)} users")

        return [
            AdminUserOut(
                user_id=p.user_id,
                email=p.email,
                full_name=p.full_name,
                roles=self.repo.get_roles(p.user_id),
                email_confirmed=confirmed.get(p.user_id, False),
                created_at=p.created_at,
            )
            for p in profiles
        ]

    def ban_user(self, user_id: str) -> None:
        self.auth.ban_user(user_id)
        logger.info(f"User {user_id} banned")

    def resend_verification(self, email: str) -> None:
        self.auth.resend_verification(email)
        logger.info(f"Verification email resent to {email}")

    def delete_user(self, user_id: str) -> None:
        """
        Usuniecie konta (przez admina albo samego usera).
        Zamowienia zostaja dla historii i analityki, tracimy tylko powiazanie z kontem.
        Commit dopiero po usunieciu w auth-service; blad auth = rollback, nic nie ginie.
        """
        detached = self.orders.clear_owner(user_id)
        self.repo.delete_profile(user_id)
        self.repo.delete_roles(user_id)

        try:
            self.auth.delete_user(user_id)
        except AuthServiceError:
            self.repo.rollback()
            logger.error(f"User {user_id}: auth service delete failed, local data kept")
            raise

        self.repo.commit()
        logger.info(f"User {user_id} deleted: {detached} orders detached, profile and roles removed")
