# storefront/repositories/product_repo.py
import uuid

from sqlalchemy import func, or_
from sqlmodel import Session, col, delete, select

from storefront.models.cart import CartItem
from storefront.models.order import OrderItem
from storefront.models.product import (
    Classification,
    Product,
    ProductClassification,
    ProductImage,
)
from storefront.models.wishlist import WishlistItem

# MRP bands used by the "shop by price" tiles: [low, high)
PRICE_BANDS: dict[str, tuple[float, float | None]] = {
    "0-500": (0, 500),
    "500-1000": (500, 1000),
    "1000-2000": (1000, 2000),
    "2000-5000": (2000, 5000),
    "5000+": (5000, None),
}


class ProductRepository:
    """
    Data access layer for Product, ProductImage and collections.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def get_many(
        self,
        session: Session,
        product_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, Product]:
        if not product_ids:
            return {}
        stmt = select(Product).where(col(Product.id).in_(product_ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def search(
        self,
        session: Session,
        *,
        search: str | None = None,
        category: str | None = None,
        age_range: str | None = None,
        price_band: str | None = None,
        sort: str = "name",
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
    ) -> list[Product]:
        """
        Catalog browser query: search, filters and sort in one statement.
        """
        stmt = select(Product)

        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712

        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.brand).ilike(pattern),
                    col(Product.sku_code).ilike(pattern),
                )
            )

        if category:
            stmt = stmt.where(
                func.lower(Product.category) == category.strip().lower()
            )

        if age_range:
            stmt = stmt.where(Product.age_range == age_range)

        if price_band:
            low, high = PRICE_BANDS[price_band]
            stmt = stmt.where(Product.mrp >= low)
            if high is not None:
                stmt = stmt.where(Product.mrp < high)

        if sort == "price-low":
            stmt = stmt.order_by(col(Product.mrp).asc(), col(Product.name).asc())
        elif sort == "price-high":
            stmt = stmt.order_by(col(Product.mrp).desc(), col(Product.name).asc())
        elif sort == "newest":
            stmt = stmt.order_by(col(Product.created_at).desc())
        else:
            stmt = stmt.order_by(col(Product.name).asc())

        stmt = stmt.offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def newest_active(self, session: Session, limit: int) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.is_active == True)  # noqa: E712
            .order_by(col(Product.created_at).desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def category_counts(self, session: Session) -> list[tuple[str, int]]:
        stmt = (
            select(Product.category, func.count(Product.id))
            .where(
                Product.is_active == True,  # noqa: E712
                col(Product.category).is_not(None),
            )
            .group_by(Product.category)
            .order_by(Product.category)
        )
        return list(session.exec(stmt).all())

    def age_range_counts(self, session: Session) -> dict[str, int]:
        stmt = (
            select(Product.age_range, func.count(Product.id))
            .where(
                Product.is_active == True,  # noqa: E712
                col(Product.age_range).is_not(None),
            )
            .group_by(Product.age_range)
        )
        return {age: int(count) for age, count in session.exec(stmt).all()}

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def is_ordered(self, session: Session, product_id: uuid.UUID) -> bool:
        stmt = select(OrderItem.id).where(OrderItem.product_id == product_id).limit(1)
        return session.exec(stmt).first() is not None

    def delete(self, session: Session, product: Product) -> None:
        """
        Delete a product together with its gallery rows, collection links
        and the cart / wishlist rows pointing at it, in one commit.
        """
        for model in (ProductImage, ProductClassification, CartItem, WishlistItem):
            session.exec(delete(model).where(model.product_id == product.id))
        session.delete(product)
        session.commit()

    # ----- Product images -----

    def list_images_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductImage]:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.display_order)
        )
        return list(session.exec(stmt).all())

    def first_images(
        self,
        session: Session,
        product_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, str]:
        """
        Map product_id -> URL of its first gallery image (lowest display_order).
        """
        if not product_ids:
            return {}
        stmt = (
            select(ProductImage)
            .where(col(ProductImage.product_id).in_(product_ids))
            .order_by(ProductImage.display_order)
        )
        first: dict[uuid.UUID, str] = {}
        for image in session.exec(stmt).all():
            first.setdefault(image.product_id, image.image_url)
        return first

    def get_image_by_id(
        self,
        session: Session,
        image_id: uuid.UUID,
    ) -> ProductImage | None:
        return session.get(ProductImage, image_id)

    def create_image(
        self,
        session: Session,
        image: ProductImage,
    ) -> ProductImage:
        session.add(image)
        session.commit()
        session.refresh(image)
        return image

    def delete_image(
        self,
        session: Session,
        image: ProductImage,
    ) -> None:
        session.delete(image)
        session.commit()

    # ----- Collections -----

    def list_classifications(self, session: Session) -> list[Classification]:
        stmt = select(Classification).order_by(Classification.name)
        return list(session.exec(stmt).all())

    def get_classification_by_slug(
        self,
        session: Session,
        slug: str,
    ) -> Classification | None:
        stmt = select(Classification).where(Classification.slug == slug)
        return session.exec(stmt).first()

    def get_classifications(
        self,
        session: Session,
        ids: list[uuid.UUID],
    ) -> list[Classification]:
        if not ids:
            return []
        stmt = select(Classification).where(col(Classification.id).in_(ids))
        return list(session.exec(stmt).all())

    def create_classification(
        self,
        session: Session,
        classification: Classification,
    ) -> Classification:
        session.add(classification)
        session.commit()
        session.refresh(classification)
        return classification

    def list_in_classification(
        self,
        session: Session,
        classification_id: uuid.UUID,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .join(
                ProductClassification,
                ProductClassification.product_id == Product.id,
            )
            .where(
                ProductClassification.classification_id == classification_id,
                Product.is_active == True,  # noqa: E712
            )
            .order_by(Product.name)
        )
        return list(session.exec(stmt).all())

    def set_classifications(
        self,
        session: Session,
        product_id: uuid.UUID,
        classification_ids: list[uuid.UUID],
    ) -> None:
        session.exec(
            delete(ProductClassification).where(
                ProductClassification.product_id == product_id
            )
        )
        session.add_all(
            ProductClassification(product_id=product_id, classification_id=cid)
            for cid in classification_ids
        )
        session.commit()
