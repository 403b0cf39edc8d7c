# storefront/services/pricing.py
"""
Pure pricing rules shared by the cart, the checkout quote and order creation.

No database or HTTP here: everything takes plain values so it can be
reused (and unit-tested) from any service.
"""
import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from storefront.models.coupon import Coupon


class CouponRejection(str, enum.Enum):
    NOT_FOUND = "not_found"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    MIN_PURCHASE_NOT_MET = "min_purchase_not_met"


class CouponError(Exception):
    """
    Raised when a coupon cannot be applied to the given subtotal.
    """

    def __init__(self, reason: CouponRejection, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: float
    shipping_amount: float
    discount_amount: float

    @property
    def total_amount(self) -> float:
        return round(self.subtotal + self.shipping_amount - self.discount_amount, 2)


def normalize_code(code: str) -> str:
    return code.strip().upper()


def compute_subtotal(lines: Iterable[tuple[float, int]]) -> float:
    """Sum of unit_price * quantity over (unit_price, quantity) pairs."""
    return round(sum(price * qty for price, qty in lines), 2)


def compute_shipping(subtotal: float, threshold: float, fee: float) -> float:
    """
    Flat fee, waived once the subtotal is strictly above the threshold.
    An empty cart ships nothing.
    """
    if subtotal <= 0:
        return 0.0
    return 0.0 if subtotal > threshold else fee


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_coupon(
    coupon: Coupon | None,
    subtotal: float,
    now: datetime | None = None,
) -> None:
    """
    Check a looked-up coupon against the current subtotal.

    `coupon` is None when no active coupon matched the code.

    Raises:
        CouponError: with a distinct reason per rejection case.
    """
    if coupon is None or not coupon.is_active:
        raise CouponError(CouponRejection.NOT_FOUND, "Invalid coupon code")

    now = as_utc(now or datetime.now(timezone.utc))

    if now < as_utc(coupon.valid_from):
        raise CouponError(
            CouponRejection.NOT_YET_VALID,
            "This coupon is not yet valid",
        )
    if now > as_utc(coupon.valid_until):
        raise CouponError(CouponRejection.EXPIRED, "This coupon has expired")

    if coupon.max_uses is not None and coupon.current_uses >= coupon.max_uses:
        raise CouponError(
            CouponRejection.USAGE_LIMIT_REACHED,
            "This coupon has reached its usage limit",
        )

    if coupon.min_purchase_amount and subtotal < coupon.min_purchase_amount:
        raise CouponError(
            CouponRejection.MIN_PURCHASE_NOT_MET,
            f"Minimum purchase amount of ₹{coupon.min_purchase_amount:g} required",
        )


def compute_discount(coupon: Coupon, subtotal: float) -> float:
    """
    percentage -> subtotal * value / 100, capped by max_discount_amount
    fixed      -> value

    Either way the discount never exceeds the subtotal.
    """
    if coupon.discount_type == "percentage":
        discount = subtotal * coupon.discount_value / 100
        if coupon.max_discount_amount and discount > coupon.max_discount_amount:
            discount = coupon.max_discount_amount
    else:
        discount = coupon.discount_value

    return round(min(discount, subtotal), 2)


def price_cart(
    lines: Iterable[tuple[float, int]],
    *,
    threshold: float,
    fee: float,
    coupon: Coupon | None = None,
    coupon_code: str | None = None,
    now: datetime | None = None,
) -> PriceBreakdown:
    """
    Price a cart given its (unit_price, quantity) lines.

    When `coupon_code` is given the matching `coupon` (or None when the
    lookup found nothing) is validated and its discount applied.
    """
    subtotal = compute_subtotal(lines)
    shipping = compute_shipping(subtotal, threshold, fee)

    discount = 0.0
    if coupon_code is not None:
        validate_coupon(coupon, subtotal, now)
        discount = compute_discount(coupon, subtotal)

    return PriceBreakdown(
        subtotal=subtotal,
        shipping_amount=shipping,
        discount_amount=discount,
    )
