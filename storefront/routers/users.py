# storefront/routers/users.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import get_current_user, require_auth, require_root_admin
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import (
    AdminGrant,
    AdminRead,
    RoleStatus,
    UserRead,
    UserUpdate,
)
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])
admins_router = APIRouter(
    prefix="/admin/admins",
    tags=["Admin Management"],
    dependencies=[Depends(require_root_admin)],
)

repo = UserRepository()
service = UserService(repo)


# -------- Self profile --------


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires valid Supabase JWT.
    """
    return service.get_me(current_user)


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Editable: `name`, `phone_number`. Email is owned by Supabase Auth.
    """
    return service.update_me(session, current_user, payload)


@router.get("/me/roles", response_model=RoleStatus)
def read_my_roles(current_user: User | None = Depends(get_current_user)):
    """
    Back-office flags for the header (guests get both false).
    """
    return service.roles(current_user)


# -------- Root admin endpoints --------


@admins_router.get("", response_model=list[AdminRead])
def list_admins(session: Session = Depends(get_session)):
    """
    List admins, root admins first.
    """
    return service.list_admins(session)


@admins_router.post(
    "",
    response_model=AdminRead,
    status_code=status.HTTP_201_CREATED,
)
def grant_admin(
    payload: AdminGrant,
    session: Session = Depends(get_session),
):
    """
    Promote an existing account (by email) to admin.
    """
    return service.grant_admin(session, payload.email)


@admins_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_admin(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Demote an admin back to a regular user. Root admins cannot be removed.
    """
    service.revoke_admin(session, user_id)
    return None
