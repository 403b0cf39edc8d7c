# storefront/schemas/cart.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int = Field(gt=0)


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, priced from the live product row.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    hero_image_url: str | None = None
    quantity: int
    unit_price: float
    mrp: float
    line_total: float
    stock_quantity: int
    created_at: datetime


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    subtotal: float
