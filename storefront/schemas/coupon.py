# storefront/schemas/coupon.py
import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

DiscountType = Literal["percentage", "fixed"]


def _assume_utc(v: datetime | None) -> datetime | None:
    # Admin forms may send local-looking timestamps without an offset
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class CouponCreate(SQLModel):
    """
    Admin payload to create a coupon.

    - code is stored upper-case
    - percentage values are limited to 100
    - valid_until must be after valid_from
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(min_length=1, max_length=50)
    discount_type: DiscountType = "percentage"
    discount_value: float = Field(gt=0)
    max_uses: int | None = Field(default=None, ge=1)
    valid_from: datetime
    valid_until: datetime
    min_purchase_amount: float | None = Field(default=None, ge=0)
    max_discount_amount: float | None = Field(default=None, gt=0)
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v

    @field_validator("valid_from", "valid_until")
    @classmethod
    def default_to_utc(cls, v: datetime) -> datetime:
        return _assume_utc(v)

    @model_validator(mode="after")
    def check_rules(self) -> "CouponCreate":
        if self.valid_until <= self.valid_from:
            raise ValueError("valid_until must be after valid_from")
        if self.discount_type == "percentage" and self.discount_value > 100:
            raise ValueError("percentage discount cannot exceed 100")
        return self


class CouponUpdate(SQLModel):
    """
    Partial update; cross-field rules are re-checked in the service
    against the merged coupon.
    """

    model_config = ConfigDict(extra="forbid")

    code: str | None = Field(default=None, max_length=50)
    discount_type: DiscountType | None = None
    discount_value: float | None = Field(default=None, gt=0)
    max_uses: int | None = Field(default=None, ge=1)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    min_purchase_amount: float | None = Field(default=None, ge=0)
    max_discount_amount: float | None = Field(default=None, gt=0)
    is_active: bool | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v

    @field_validator("valid_from", "valid_until")
    @classmethod
    def default_to_utc(cls, v: datetime | None) -> datetime | None:
        return _assume_utc(v)


class CouponRead(SQLModel):
    id: uuid.UUID
    code: str
    discount_type: DiscountType
    discount_value: float
    max_uses: int | None
    current_uses: int
    valid_from: datetime
    valid_until: datetime
    min_purchase_amount: float | None
    max_discount_amount: float | None
    is_active: bool
    created_at: datetime
