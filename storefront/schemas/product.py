# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

AGE_RANGES: tuple[str, ...] = (
    "0-2 Years",
    "3-5 Years",
    "6-8 Years",
    "9-12 Years",
    "13+ Years",
)

AgeRange = Literal["0-2 Years", "3-5 Years", "6-8 Years", "9-12 Years", "13+ Years"]


def _strip_or_none(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


class ProductCreate(SQLModel):
    """
    Payload for creating a product (admin inventory panel).

    - slug is optional: if omitted, generated from `name`.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    slug: str | None = None
    sku_code: str | None = Field(default=None, max_length=50)
    barcode: str | None = Field(default=None, max_length=50)
    brand_id: uuid.UUID | None = None
    sub_brand_id: uuid.UUID | None = None
    category: str | None = Field(default=None, max_length=100)
    age_range: AgeRange | None = None
    description: str | None = None
    mrp: float = Field(gt=0)
    discount_price: float | None = Field(default=None, gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v

    @field_validator("sku_code", "barcode", "category")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        return _strip_or_none(v)

    @model_validator(mode="after")
    def discount_below_mrp(self) -> "ProductCreate":
        if self.discount_price is not None and self.discount_price >= self.mrp:
            raise ValueError("discount_price must be lower than mrp")
        return self


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    slug: str | None = None
    sku_code: str | None = Field(default=None, max_length=50)
    barcode: str | None = Field(default=None, max_length=50)
    brand_id: uuid.UUID | None = None
    sub_brand_id: uuid.UUID | None = None
    category: str | None = Field(default=None, max_length=100)
    age_range: AgeRange | None = None
    description: str | None = None
    mrp: float | None = Field(default=None, gt=0)
    discount_price: float | None = Field(default=None, gt=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    hero_image_url: str | None = None  # allow manual override if needed

    @field_validator("name", "slug")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class StockUpdate(SQLModel):
    """
    Admin payload to overwrite the stock count of a product.
    """

    model_config = ConfigDict(extra="forbid")

    stock_quantity: int = Field(ge=0)


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    slug: str
    sku_code: str | None
    barcode: str | None
    brand_id: uuid.UUID | None
    brand: str | None
    sub_brand_id: uuid.UUID | None
    sub_brand: str | None
    category: str | None
    age_range: str | None
    description: str | None
    mrp: float
    discount_price: float | None
    unit_price: float
    stock_quantity: int
    is_active: bool
    hero_image_url: str | None
    video_url: str | None
    created_at: datetime


class ProductImageRead(SQLModel):
    """
    Read model for gallery images.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    image_url: str
    display_order: int


class CategoryCount(SQLModel):
    category: str
    product_count: int


class AgeGroupCount(SQLModel):
    age_range: str
    product_count: int


class ClassificationCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    slug: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ClassificationRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None


class ProductClassificationsUpdate(SQLModel):
    """
    Replace the full set of collections a product belongs to.
    """

    model_config = ConfigDict(extra="forbid")

    classification_ids: list[uuid.UUID]
