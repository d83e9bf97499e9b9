# storefront/api/deps.py
from dataclasses import dataclass

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import AuthServiceError
from storefront.repos.cart_repo import RedisCartStorage
from storefront.repos.user_repo import UserRepo
from storefront.services.auth_client import AuthClient
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import StripeGateway
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: str
    email: str | None = None


def get_gateway() -> StripeGateway:
    return StripeGateway()


def get_notifier() -> NotificationService:
    return NotificationService()


def get_auth_client() -> AuthClient:
    return AuthClient()


def get_cart_storage_factory():
    """Zwraca fabryke storage per koszyk (podmieniana w testach)."""
    return RedisCartStorage


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    auth: AuthClient = Depends(get_auth_client),
) -> CurrentUser | None:
    if credentials is None:
        return None
    try:
        user = auth.get_user(credentials.credentials)
    except AuthServiceError:
        raise HTTPException(status_code=502, detail="Auth service unavailable")
    if not user:
        return None
    return CurrentUser(id=user["id"], email=user.get("email"))


def get_current_user(user: CurrentUser | None = Depends(get_optional_user)) -> CurrentUser:
    if user is None:
        raise HTTPException(status_code=401, detail="User not authenticated")
    return user


def require_admin(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if not UserRepo(db).has_role(user.id, "admin"):
        logger.warning(f"Admin check failed for user {user.id}")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
