# storefront/services/user_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import AdminRead, RoleStatus, UserUpdate


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - profile edits (email is owned by Supabase Auth, never changed here)
      - role checks for the back-office
      - root-admin management of the admin list
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Self profile -----

    def get_me(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits (name, phone_number).
        """
        changes = payload.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is not None:
            current_user.name = changes["name"]
        if "phone_number" in changes:
            current_user.phone_number = changes["phone_number"]

        return self.repo.update(session, current_user)

    def roles(self, current_user: User | None) -> RoleStatus:
        """Guests are neither admin nor root admin."""
        if current_user is None:
            return RoleStatus(is_admin=False, is_root_admin=False)
        is_admin = current_user.role == "admin"
        return RoleStatus(
            is_admin=is_admin,
            is_root_admin=is_admin and current_user.is_root_admin,
        )

    # ----- Admin management (root admin only) -----

    @staticmethod
    def _to_admin_read(user: User) -> AdminRead:
        return AdminRead(
            user_id=user.id,
            email=user.email,
            name=user.name,
            is_root_admin=user.is_root_admin,
        )

    def list_admins(self, session: Session) -> list[AdminRead]:
        return [self._to_admin_read(u) for u in self.repo.list_admins(session)]

    def grant_admin(self, session: Session, email: str) -> AdminRead:
        """
        Promote an existing account to admin.

        The account must already exist (the person signed up once).
        """
        user = self.repo.get_by_email(session, email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found. They must sign up first.",
            )
        if user.role == "admin":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User is already an admin",
            )

        user.role = "admin"
        user.is_root_admin = False
        return self._to_admin_read(self.repo.update(session, user))

    def revoke_admin(self, session: Session, user_id: uuid.UUID) -> None:
        user = self.repo.get_by_id(session, user_id)
        if not user or user.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Admin not found",
            )
        if user.is_root_admin:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Root administrators cannot be removed",
            )

        user.role = "user"
        self.repo.update(session, user)
