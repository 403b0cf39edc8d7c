# storefront/repositories/wishlist_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.product import Product
from storefront.models.wishlist import WishlistItem


class WishlistRepository:

    def list_products(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .join(WishlistItem, WishlistItem.product_id == Product.id)
            .where(WishlistItem.user_id == user_id)
            .order_by(col(WishlistItem.created_at).desc())
        )
        return list(session.exec(stmt).all())

    def get_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.user_id == user_id,
            WishlistItem.product_id == product_id,
        )
        return session.exec(stmt).first()

    def create(self, session: Session, item: WishlistItem) -> WishlistItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: WishlistItem) -> None:
        session.delete(item)
        session.commit()
