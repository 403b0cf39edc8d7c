# storefront/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import (
    WishlistAdd,
    WishlistProductRead,
    WishlistStatus,
)
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

wishlist_repo = WishlistRepository()
product_repo = ProductRepository()
service = WishlistService(wishlist_repo, product_repo)


@router.get("", response_model=list[WishlistProductRead])
def get_my_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.list_items(session, current_user.id)


@router.post(
    "",
    response_model=WishlistStatus,
    status_code=status.HTTP_201_CREATED,
)
def add_to_wishlist(
    payload: WishlistAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Save a product to the wishlist.

    - 404 if the product does not exist.
    - 409 if it is already saved.
    """
    return service.add(session, current_user.id, payload.product_id)


@router.get("/{product_id}", response_model=WishlistStatus)
def wishlist_status(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Whether the product is in the current user's wishlist (heart icon)."""
    return service.status_of(session, current_user.id, product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.remove(session, current_user.id, product_id)
    return None
