# storefront/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# auto_error=False: a missing header means a guest shopper, not an error.
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a Supabase access token and return its claims.

    Signature and `exp` are checked; `aud` is not, Supabase issues
    different audiences per project setting.

    Raises:
        HTTPException(401): bad signature, malformed or expired token.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise _unauthorized("Invalid or expired token")


def _identity_from_claims(claims: dict[str, Any]) -> tuple[uuid.UUID, str]:
    sub = claims.get("sub")
    email = claims.get("email")
    if not sub or not email:
        raise _unauthorized("Token missing sub/email")
    try:
        return uuid.UUID(sub), email
    except ValueError:
        raise _unauthorized("Invalid sub in token")


def _provision_user(session: Session, user_id: uuid.UUID, email: str) -> User:
    """
    First request from a new Supabase account: create the profile row.
    Everyone starts as a shopper; admin rights are granted separately.
    """
    user = User(
        id=user_id,
        email=email,
        name=email.split("@", 1)[0],
        role="user",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Provisioned profile for %s", email)
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the signed-in shopper, or None for guests.

    Catalog routes accept guests; cart, wishlist and checkout routes
    wrap this with `require_auth`.
    """
    if credentials is None:
        return None

    claims = decode_access_token(credentials.credentials)
    user_id, email = _identity_from_claims(claims)

    user = session.get(User, user_id)
    if user is None:
        user = _provision_user(session, user_id, email)
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """401 for guests so the client can send them to the login page."""
    if user is None:
        raise _unauthorized("Authentication required")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def require_root_admin(user: User = Depends(require_admin)) -> User:
    """
    Only root administrators can grant or revoke admin access.
    """
    if not user.is_root_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only root administrators can manage admin users",
        )
    return user
