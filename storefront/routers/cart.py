# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from storefront.services.cart_service import CartService

# Guests can browse the catalog; the cart needs an account.
router = APIRouter(prefix="/cart", tags=["Cart"])

service = CartService(CartRepository(), ProductRepository())


@router.get("", response_model=CartSummary)
def view_cart(
    session: Session = Depends(get_session),
    shopper: User = Depends(require_auth),
):
    """Lines priced at today's selling price, plus quantity and subtotal."""
    return service.get_cart_summary(session, shopper.id)


@router.post("", response_model=CartSummary)
def add_item(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_auth),
):
    """
    Add units of a product. Adding a product already in the cart raises
    that line's quantity; 400 if the shelf cannot cover it.
    """
    return service.add_to_cart(session, shopper.id, payload)


@router.patch("/{product_id}", response_model=CartSummary)
def set_item_quantity(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_auth),
):
    return service.update_quantity(session, shopper.id, product_id, payload)


@router.delete("/{product_id}", response_model=CartSummary)
def remove_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_auth),
):
    return service.remove_item(session, shopper.id, product_id)


@router.delete("", response_model=CartSummary)
def empty_cart(
    session: Session = Depends(get_session),
    shopper: User = Depends(require_auth),
):
    return service.clear_cart(session, shopper.id)
