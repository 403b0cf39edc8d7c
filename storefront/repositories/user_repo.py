# storefront/repositories/user_repo.py
import uuid

from sqlmodel import Session, col, func, select

from storefront.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by email (case-insensitive), or None if not found."""
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        return session.exec(stmt).first()

    def list_admins(self, session: Session) -> list[User]:
        """Admins, root admins first, then by creation date."""
        stmt = (
            select(User)
            .where(User.role == "admin")
            .order_by(
                col(User.is_root_admin).desc(),
                col(User.created_at).desc(),
            )
        )
        return list(session.exec(stmt).all())

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
