# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_auth, require_admin
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.coupon_repo import CouponRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    CheckoutCreate,
    CheckoutQuote,
    OrderRead,
    OrderStatus,
    OrderWithItemsRead,
    OrderStatusUpdate,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])
checkout_router = APIRouter(prefix="/checkout", tags=["Checkout"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
coupon_repo = CouponRepository()
service = OrderService(order_repo, cart_repo, product_repo, coupon_repo)


# -------- Checkout --------


@checkout_router.get("/quote", response_model=CheckoutQuote)
def get_quote(
    coupon_code: str | None = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Price the current cart: subtotal, shipping, coupon discount, total.

    - With `coupon_code` the coupon is validated and applied;
      a rejection is a 400 with detail {"code", "message"}.
    - Without it the plain total is returned (coupon removed).
    """
    return service.get_quote(session, current_user.id, coupon_code)


@router.post(
    "/checkout",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: CheckoutCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create an order from the current user's cart.

    Stock decrement, coupon redemption and cart clearing happen in the
    same transaction as the order insert.
    """
    return service.create_order_from_cart(session, current_user.id, payload)


# -------- User-facing endpoints --------


@router.get(
    "/me",
    response_model=list[OrderWithItemsRead],
)
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders (newest first, with items).
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderWithItemsRead,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all orders (admin only), optionally by status.
    """
    return service.list_all_orders(session, status_filter, skip, limit)


@router.get(
    "/{order_id}",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get any order with items (admin only).
    """
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

      pending    -> processing, cancelled

      processing -> shipped, cancelled

      shipped    -> delivered, cancelled

      delivered / cancelled -> (no change)

    """
    return service.update_status(session, order_id, payload)
