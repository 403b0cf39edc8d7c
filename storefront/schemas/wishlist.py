# storefront/schemas/wishlist.py
import uuid

from sqlmodel import SQLModel


class WishlistAdd(SQLModel):
    product_id: uuid.UUID


class WishlistProductRead(SQLModel):
    """
    Wishlist entry flattened with the product it points to.
    """

    product_id: uuid.UUID
    name: str
    slug: str
    brand: str | None
    age_range: str | None
    mrp: float
    discount_price: float | None
    unit_price: float
    stock_quantity: int
    image_url: str | None


class WishlistStatus(SQLModel):
    product_id: uuid.UUID
    in_wishlist: bool
