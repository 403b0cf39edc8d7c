# storefront/services/cart_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemRead,
    CartSummary,
)
from storefront.services.pricing import compute_subtotal


def _line_read(item: CartItem, product: Product) -> CartItemRead:
    unit_price = product.unit_price
    return CartItemRead(
        id=item.id,
        product_id=item.product_id,
        product_name=product.name,
        hero_image_url=product.hero_image_url,
        quantity=item.quantity,
        unit_price=unit_price,
        mrp=product.mrp,
        line_total=round(item.quantity * unit_price, 2),
        stock_quantity=product.stock_quantity,
        created_at=item.created_at,
    )


def _stock_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class CartService:
    """
    Shopping cart for a signed-in buyer.

    Lines are priced from the live product row on every read, so the cart
    always shows current prices; the order snapshots them at checkout.
    Every mutation answers with the re-fetched summary.
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    def _sellable_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is inactive",
            )
        return product

    def _require_line(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID, detail: str
    ) -> CartItem:
        item = self.cart_repo.get_item(session, user_id, product_id)
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
        return item

    def get_cart_summary(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        lines = [
            _line_read(item, product)
            for item, product in self.cart_repo.list_with_products(session, user_id)
        ]
        return CartSummary(
            items=lines,
            total_quantity=sum(line.quantity for line in lines),
            subtotal=compute_subtotal((line.unit_price, line.quantity) for line in lines),
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add `payload.quantity` units, merging into an existing line.
        The merged quantity may not exceed what is on the shelf.
        """
        product = self._sellable_product(session, payload.product_id)
        if payload.quantity > product.stock_quantity:
            raise _stock_error("Not enough stock available")

        item = self.cart_repo.get_item(session, user_id, product.id)
        if item is None:
            self.cart_repo.create(
                session,
                CartItem(
                    user_id=user_id,
                    product_id=product.id,
                    quantity=payload.quantity,
                ),
            )
        else:
            merged = item.quantity + payload.quantity
            if merged > product.stock_quantity:
                raise _stock_error("Not enough stock to increase quantity")
            item.quantity = merged
            item.updated_at = datetime.now(timezone.utc)
            self.cart_repo.update(session, item)

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        product = self._sellable_product(session, product_id)
        item = self._require_line(session, user_id, product_id, "Item not in cart")
        if payload.quantity > product.stock_quantity:
            raise _stock_error("Not enough stock available")

        item.quantity = payload.quantity
        item.updated_at = datetime.now(timezone.utc)
        self.cart_repo.update(session, item)
        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartSummary:
        item = self._require_line(session, user_id, product_id, "Item not found in cart")
        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        self.cart_repo.clear_user_cart(session, user_id)
        return CartSummary(items=[], total_quantity=0, subtotal=0.0)
