# storefront/services/wishlist_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.wishlist import WishlistItem
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import WishlistProductRead, WishlistStatus


class WishlistService:
    def __init__(
        self,
        wishlist_repo: WishlistRepository,
        product_repo: ProductRepository,
    ):
        self.wishlist_repo = wishlist_repo
        self.product_repo = product_repo

    def list_items(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[WishlistProductRead]:
        """
        Wishlisted products, newest first.

        image_url is the first gallery image, falling back to the hero image.
        """
        products = self.wishlist_repo.list_products(session, user_id)
        first_images = self.product_repo.first_images(
            session, [p.id for p in products]
        )

        return [
            WishlistProductRead(
                product_id=p.id,
                name=p.name,
                slug=p.slug,
                brand=p.brand,
                age_range=p.age_range,
                mrp=p.mrp,
                discount_price=p.discount_price,
                unit_price=p.unit_price,
                stock_quantity=p.stock_quantity,
                image_url=first_images.get(p.id) or p.hero_image_url,
            )
            for p in products
        ]

    def add(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistStatus:
        if not self.product_repo.get_by_id(session, product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        if self.wishlist_repo.get_item(session, user_id, product_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product already in wishlist",
            )

        self.wishlist_repo.create(
            session, WishlistItem(user_id=user_id, product_id=product_id)
        )
        return WishlistStatus(product_id=product_id, in_wishlist=True)

    def remove(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> None:
        item = self.wishlist_repo.get_item(session, user_id, product_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not in wishlist",
            )
        self.wishlist_repo.delete(session, item)

    def status_of(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistStatus:
        item = self.wishlist_repo.get_item(session, user_id, product_id)
        return WishlistStatus(product_id=product_id, in_wishlist=item is not None)
