# storefront/api/routers/profile.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.api.deps import CurrentUser, get_auth_client, get_current_user
from storefront.data.database import get_db
from storefront.domain.errors import AuthServiceError
from storefront.domain.schemas import ProfileIn, ProfileOut
from storefront.services.auth_client import AuthClient
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["profile"])


@router.get("/profile", response_model=ProfileOut)
def get_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).get_profile(user.id, user.email)


@router.put("/profile", response_model=ProfileOut)
def update_profile(
    payload: ProfileIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).update_profile(user.id, payload, user.email)


@router.delete("/account")
def delete_account(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth: AuthClient = Depends(get_auth_client),
):
    """
    Usuniecie wlasnego konta. Zamowienia zostaja, bez powiazania z userem.
    """
    try:
        UserService(db, auth).delete_user(user.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Account deletion for {user.id} failed: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to delete account"})
    except AuthServiceError as e:
        logger.error(f"Auth user {user.id} not deleted: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to delete account"})
    return {"success": True}
