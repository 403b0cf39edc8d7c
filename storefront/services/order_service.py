# storefront/services/order_service.py
import logging
import secrets
import string
import time
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.models.cart import CartItem
from storefront.models.coupon import Coupon, CouponUsage
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.coupon_repo import CouponRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    CheckoutCreate,
    CheckoutQuote,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from storefront.services.coupon_service import coupon_http_error
from storefront.services.pricing import (
    CouponError,
    CouponRejection,
    PriceBreakdown,
    normalize_code,
    price_cart,
)

logger = logging.getLogger(__name__)

settings = get_settings()

ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits

# Allowed admin transitions; delivered and cancelled are terminal
STATUS_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered", "cancelled"},
    "delivered": set(),
    "cancelled": set(),
}


def generate_order_number() -> str:
    """
    ORD-<epoch millis>-<9 upper-case alphanumerics>
    """
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


class OrderService:
    """
    Business logic for checkout and orders.

    Responsibilities:
      - Price the cart (subtotal, shipping, coupon discount)
      - Create order from cart in one transaction
      - Decrement stock and redeem the coupon atomically
      - Clear cart after success
      - Enforce status transitions (admin)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        coupon_repo: CouponRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.coupon_repo = coupon_repo

    # -------- Pricing --------

    def _price(
        self,
        session: Session,
        lines: list[tuple[float, int]],
        coupon_code: str | None,
    ) -> tuple[PriceBreakdown, Coupon | None]:
        """
        Price the given lines, validating the coupon (if any) against
        the current subtotal. Coupon rejections become a 400.
        """
        coupon: Coupon | None = None
        if coupon_code is not None:
            coupon = self.coupon_repo.get_active_by_code(
                session, normalize_code(coupon_code)
            )

        try:
            breakdown = price_cart(
                lines,
                threshold=settings.FREE_SHIPPING_THRESHOLD,
                fee=settings.SHIPPING_FEE,
                coupon=coupon,
                coupon_code=coupon_code,
            )
        except CouponError as exc:
            raise coupon_http_error(exc)

        return breakdown, coupon

    def get_quote(
        self,
        session: Session,
        user_id: uuid.UUID,
        coupon_code: str | None = None,
    ) -> CheckoutQuote:
        """
        Price preview for the checkout page.

        With a code the coupon is applied; without one the plain total is
        returned, so removing a coupon restores the original numbers.
        """
        if coupon_code is not None:
            coupon_code = coupon_code.strip() or None

        rows = self.cart_repo.list_with_products(session, user_id)
        lines = [(product.unit_price, item.quantity) for item, product in rows]
        breakdown, coupon = self._price(session, lines, coupon_code)

        return CheckoutQuote(
            subtotal=breakdown.subtotal,
            shipping_amount=breakdown.shipping_amount,
            discount_amount=breakdown.discount_amount,
            total_amount=breakdown.total_amount,
            coupon_code=coupon.code if coupon else None,
            free_shipping_threshold=settings.FREE_SHIPPING_THRESHOLD,
        )

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CheckoutCreate,
    ) -> OrderWithItemsRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart items; error if empty.
          2. Ensure every product exists & is active.
          3. Price the cart; re-validate the coupon against the subtotal.
          4. Create Order row (status='pending').
          5. Create OrderItem rows (price & name snapshot).
          6. Decrement stock (conditional; 409 when short).
          7. Redeem the coupon (conditional increment + usage row).
          8. Clear cart.
          9. Commit once and return full order.

        Any failure rolls the whole sequence back; the cart stays intact.
        """
        try:
            order, order_items = self._place_order(session, user_id, payload)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info(
            "Order %s placed by user %s (total %.2f)",
            order.order_number,
            user_id,
            order.total_amount,
        )
        return self._build_order_with_items_dto(order, order_items)

    def _place_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CheckoutCreate,
    ) -> tuple[Order, list[OrderItem]]:
        # 1) Load cart
        cart_items: list[CartItem] = self.cart_repo.list_for_user(session, user_id)
        if not cart_items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # 2) Validate each cart item vs product
        product_map: dict[uuid.UUID, Product] = self.product_repo.get_many(
            session, [ci.product_id for ci in cart_items]
        )
        errors: list[dict[str, str]] = []

        for ci in cart_items:
            product = product_map.get(ci.product_id)
            if not product:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": "Product not found",
                    }
                )
            elif not product.is_active:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": "Product is inactive",
                    }
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        # 3) Price, re-checking the coupon at submit time
        lines = [
            (product_map[ci.product_id].unit_price, ci.quantity) for ci in cart_items
        ]
        breakdown, coupon = self._price(session, lines, payload.coupon_code)

        # 4) Create the Order
        order = Order(
            order_number=generate_order_number(),
            user_id=user_id,
            status="pending",
            subtotal=breakdown.subtotal,
            shipping_amount=breakdown.shipping_amount,
            discount_amount=breakdown.discount_amount,
            total_amount=breakdown.total_amount,
            coupon_id=coupon.id if coupon else None,
            full_name=payload.full_name,
            email=str(payload.email),
            phone=payload.phone,
            address=payload.address,
            city=payload.city,
            state=payload.state,
            pincode=payload.pincode,
            notes=payload.notes,
        )
        order = self.order_repo.create_order(session, order)

        # 5) Create OrderItem rows
        order_items = [
            OrderItem(
                order_id=order.id,
                product_id=ci.product_id,
                product_name=product_map[ci.product_id].name,
                quantity=ci.quantity,
                price=product_map[ci.product_id].unit_price,
            )
            for ci in cart_items
        ]
        order_items = self.order_repo.create_items(session, order_items)

        # 6) Decrement stock
        for ci in cart_items:
            if not self.order_repo.decrement_stock(session, ci.product_id, ci.quantity):
                product = product_map[ci.product_id]
                session.refresh(product)
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=(
                        f"Insufficient stock for {product.name}. "
                        f"Available: {product.stock_quantity}, "
                        f"Requested: {ci.quantity}"
                    ),
                )

        # 7) Redeem coupon
        if coupon is not None:
            if not self.coupon_repo.increment_usage(session, coupon.id):
                raise coupon_http_error(
                    CouponError(
                        CouponRejection.USAGE_LIMIT_REACHED,
                        "This coupon has reached its usage limit",
                    )
                )
            self.coupon_repo.record_usage(
                session,
                CouponUsage(
                    coupon_id=coupon.id,
                    user_id=user_id,
                    order_id=order.id,
                    discount_amount=breakdown.discount_amount,
                ),
            )

        # 8) Clear cart
        self.cart_repo.delete_all_for_user(session, user_id)

        return order, order_items

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderWithItemsRead]:
        """
        Order history for the given user, newest first, with items.
        """
        orders = self.order_repo.list_for_user(session, user_id, skip, limit)
        items = self.order_repo.items_by_order(session, [o.id for o in orders])
        return [
            self._build_order_with_items_dto(order, items[order.id])
            for order in orders
        ]

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        Get a single order for the user, including items.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_for_user(session, order_id, user_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        status_filter: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List all orders (admin only), optionally filtered by status.
        """
        orders = self.order_repo.list_all(session, status_filter, skip, limit)
        return orders  # type: ignore[return-value]

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update with state machine:

          pending    -> processing, cancelled
          processing -> shipped, cancelled
          shipped    -> delivered, cancelled
          delivered  -> (no change)
          cancelled  -> (no change)

        Same status is a no-op; any other transition raises 400.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        current = order.status
        new = payload.status

        if current == new:
            return order  # type: ignore[return-value]

        if new not in STATUS_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        order.status = new
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.save_order(session, order)
        session.commit()
        session.refresh(order)
        return order  # type: ignore[return-value]

    # -------- Helper DTO builder --------

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        item_dtos = [
            OrderItemRead(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                product_name=it.product_name,
                quantity=it.quantity,
                price=it.price,
                line_total=round(it.quantity * it.price, 2),
            )
            for it in items
        ]

        return OrderWithItemsRead(
            **OrderRead.model_validate(order).model_dump(),
            items=item_dtos,
        )
