# storefront/repositories/cart_repo.py
import uuid

from sqlmodel import Session, col, delete, select

from storefront.models.cart import CartItem
from storefront.models.product import Product


class CartRepository:

    # Get items for a user, oldest first, joined with their product
    def list_with_products(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[tuple[CartItem, Product]]:
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(col(CartItem.created_at).asc())
        )
        return list(session.exec(stmt).all())

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(col(CartItem.created_at).asc())
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        self.delete_all_for_user(session, user_id)
        session.commit()

    def delete_all_for_user(self, session: Session, user_id: uuid.UUID) -> None:
        """
        Delete every cart row for a user without committing
        (used inside the checkout transaction).
        """
        session.exec(delete(CartItem).where(CartItem.user_id == user_id))
