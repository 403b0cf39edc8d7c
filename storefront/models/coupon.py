# storefront/models/coupon.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Coupon(SQLModel, table=True):
    """
    Discount coupon managed from the admin panel.

    Rules enforced at apply/checkout time:
      - active, inside [valid_from, valid_until]
      - current_uses below max_uses (if capped)
      - subtotal >= min_purchase_amount (if set)
      - percentage discounts capped by max_discount_amount (if set)
    """

    __tablename__ = "coupons"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    code: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Upper-case coupon code",
    )

    # percentage | fixed
    discount_type: str = Field(default="percentage")
    discount_value: float = Field(gt=0)

    max_uses: int | None = Field(default=None, ge=1)
    current_uses: int = Field(default=0, ge=0)

    valid_from: datetime
    valid_until: datetime

    min_purchase_amount: float | None = Field(default=None, ge=0)
    max_discount_amount: float | None = Field(default=None, gt=0)

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class CouponUsage(SQLModel, table=True):
    """
    One redemption of a coupon, written when the order is placed.
    """

    __tablename__ = "coupon_usage"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    coupon_id: uuid.UUID = Field(foreign_key="coupons.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)

    discount_amount: float = Field(ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
