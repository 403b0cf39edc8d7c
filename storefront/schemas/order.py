# storefront/schemas/order.py
import re
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.user import clean_phone

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]

_PINCODE_RE = re.compile(r"^\d{6}$")


class CheckoutCreate(SQLModel):
    """
    Payload for placing an order from the current cart.

    This is the single validation boundary for the checkout form;
    the service only ever sees a fully validated object.

    User provides:
      - contact details and shipping address
      - optional notes
      - optional coupon code (re-validated at submit time)

    Backend derives:
      - user_id from token
      - status = 'pending'
      - subtotal / shipping / discount / total from the cart
      - items from cart
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str
    address: str = Field(min_length=10, max_length=500)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    pincode: str
    notes: str | None = Field(default=None, max_length=500)
    coupon_code: str | None = None

    @field_validator("full_name", "address", "city", "state", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return clean_phone(v)

    @field_validator("pincode")
    @classmethod
    def validate_pincode(cls, v: str) -> str:
        v = v.strip()
        if not _PINCODE_RE.match(v):
            raise ValueError("Pincode must be 6 digits")
        return v

    @field_validator("notes", "coupon_code")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class CheckoutQuote(SQLModel):
    """
    Price breakdown for the current cart, optionally with a coupon.
    """

    subtotal: float
    shipping_amount: float
    discount_amount: float
    total_amount: float
    coupon_code: str | None = None
    free_shipping_threshold: float


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    order_number: str
    user_id: uuid.UUID
    status: OrderStatus
    subtotal: float
    shipping_amount: float
    discount_amount: float
    total_amount: float
    coupon_id: uuid.UUID | None
    full_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    notes: str | None
    created_at: datetime
    updated_at: datetime


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str | None
    quantity: int
    price: float
    line_total: float


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
