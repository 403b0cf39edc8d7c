# storefront/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry for a toy SKU.

    Pricing:
      - mrp: maximum retail price (list price)
      - discount_price: optional selling price below MRP
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Material description shown on the storefront",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    sku_code: str | None = Field(default=None, max_length=50, index=True)
    barcode: str | None = Field(default=None, max_length=50)

    # Names are copied from the lookup rows so search and listings
    # need no join.
    brand_id: uuid.UUID | None = Field(default=None, foreign_key="brands.id")
    brand: str | None = Field(default=None, max_length=100, index=True)
    sub_brand_id: uuid.UUID | None = Field(default=None, foreign_key="subbrands.id")
    sub_brand: str | None = Field(default=None, max_length=100)

    category: str | None = Field(
        default=None,
        max_length=100,
        index=True,
        description="Super category, e.g. 'Board Games'",
    )

    # One of the storefront age bands, e.g. "3-5 Years"
    age_range: str | None = Field(default=None, max_length=20, index=True)

    description: str | None = None

    mrp: float = Field(
        gt=0,
        description="Maximum retail price (INR)",
    )

    discount_price: float | None = Field(
        default=None,
        gt=0,
        description="Optional discounted selling price (INR)",
    )

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="Units currently in stock",
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    hero_image_url: str | None = Field(
        default=None,
        description="Main image URL in Supabase Storage",
    )

    video_url: str | None = Field(
        default=None,
        description="Demo video URL in the product-videos bucket",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @property
    def unit_price(self) -> float:
        """Selling price: discount_price when it undercuts MRP, else MRP."""
        if self.discount_price is not None and self.discount_price < self.mrp:
            return self.discount_price
        return self.mrp


class ProductImage(SQLModel, table=True):
    """
    Additional gallery images for a product.
    """

    __tablename__ = "product_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    image_url: str = Field(
        description="Public URL stored in Supabase Storage",
    )

    display_order: int = Field(
        default=0,
        ge=0,
        description="Ordering index within the gallery",
    )


class Classification(SQLModel, table=True):
    """
    Curated collection of products (e.g. "School Essentials").
    """

    __tablename__ = "classifications"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100)
    slug: str = Field(max_length=120, unique=True, index=True)
    description: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProductClassification(SQLModel, table=True):
    """
    Link table between products and classifications.
    """

    __tablename__ = "product_classifications"
    __table_args__ = (
        UniqueConstraint("product_id", "classification_id"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    classification_id: uuid.UUID = Field(
        foreign_key="classifications.id",
        index=True,
    )
