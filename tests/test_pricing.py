# tests/test_pricing.py
from datetime import datetime, timedelta, timezone

import pytest

from storefront.models.coupon import Coupon
from storefront.models.product import Product
from storefront.services.pricing import (
    CouponError,
    CouponRejection,
    compute_discount,
    compute_shipping,
    compute_subtotal,
    normalize_code,
    price_cart,
    validate_coupon,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def coupon(**fields) -> Coupon:
    fields.setdefault("code", "SAVE10")
    fields.setdefault("discount_type", "percentage")
    fields.setdefault("discount_value", 10)
    fields.setdefault("valid_from", NOW - timedelta(days=1))
    fields.setdefault("valid_until", NOW + timedelta(days=1))
    fields.setdefault("current_uses", 0)
    fields.setdefault("is_active", True)
    return Coupon(**fields)


def test_unit_price_prefers_lower_discount_price():
    assert Product(name="Kite", slug="kite", mrp=500, discount_price=399).unit_price == 399
    assert Product(name="Kite", slug="kite", mrp=500).unit_price == 500


def test_unit_price_ignores_discount_not_below_mrp():
    product = Product(name="Kite", slug="kite", mrp=500, discount_price=650)
    assert product.unit_price == 500


def test_subtotal_sums_lines():
    assert compute_subtotal([(400, 2), (99.5, 1)]) == 899.5
    assert compute_subtotal([]) == 0


@pytest.mark.parametrize(
    "subtotal, expected",
    [(0, 0), (120, 50), (500, 50), (500.01, 0), (1200, 0)],
)
def test_shipping_waived_strictly_above_threshold(subtotal, expected):
    assert compute_shipping(subtotal, threshold=500, fee=50) == expected


def test_normalize_code():
    assert normalize_code("  save10 ") == "SAVE10"


def test_percentage_discount_capped_by_max_discount():
    c = coupon(discount_value=20, max_discount_amount=150)
    assert compute_discount(c, 1000) == 150
    assert compute_discount(c, 500) == 100


def test_fixed_discount_never_exceeds_subtotal():
    c = coupon(discount_type="fixed", discount_value=300)
    assert compute_discount(c, 1000) == 300
    assert compute_discount(c, 120) == 120


def test_missing_coupon_is_not_found():
    with pytest.raises(CouponError) as exc:
        validate_coupon(None, 800, NOW)
    assert exc.value.reason is CouponRejection.NOT_FOUND
    assert exc.value.message == "Invalid coupon code"


def test_inactive_coupon_is_not_found():
    with pytest.raises(CouponError) as exc:
        validate_coupon(coupon(is_active=False), 800, NOW)
    assert exc.value.reason is CouponRejection.NOT_FOUND


def test_coupon_not_yet_valid():
    c = coupon(valid_from=NOW + timedelta(hours=1))
    with pytest.raises(CouponError) as exc:
        validate_coupon(c, 800, NOW)
    assert exc.value.reason is CouponRejection.NOT_YET_VALID


def test_expired_coupon():
    c = coupon(valid_until=NOW - timedelta(seconds=1))
    with pytest.raises(CouponError) as exc:
        validate_coupon(c, 800, NOW)
    assert exc.value.reason is CouponRejection.EXPIRED


def test_usage_limit_reached():
    c = coupon(max_uses=3, current_uses=3)
    with pytest.raises(CouponError) as exc:
        validate_coupon(c, 800, NOW)
    assert exc.value.reason is CouponRejection.USAGE_LIMIT_REACHED


def test_minimum_purchase_not_met():
    c = coupon(min_purchase_amount=1000)
    with pytest.raises(CouponError) as exc:
        validate_coupon(c, 800, NOW)
    assert exc.value.reason is CouponRejection.MIN_PURCHASE_NOT_MET
    assert exc.value.message == "Minimum purchase amount of ₹1000 required"


def test_naive_validity_window_is_treated_as_utc():
    c = coupon(
        valid_from=datetime(2025, 5, 1),
        valid_until=datetime(2025, 7, 1),
    )
    validate_coupon(c, 800, NOW)


def test_price_cart_with_coupon():
    breakdown = price_cart(
        [(400, 2)],
        threshold=500,
        fee=50,
        coupon=coupon(),
        coupon_code="SAVE10",
        now=NOW,
    )
    assert breakdown.subtotal == 800
    assert breakdown.shipping_amount == 0
    assert breakdown.discount_amount == 80
    assert breakdown.total_amount == 720


def test_removing_coupon_restores_original_total():
    lines = [(150, 2)]
    before = price_cart(lines, threshold=500, fee=50)
    applied = price_cart(
        lines,
        threshold=500,
        fee=50,
        coupon=coupon(discount_type="fixed", discount_value=25),
        coupon_code="FLAT25",
        now=NOW,
    )
    after = price_cart(lines, threshold=500, fee=50)

    assert before.total_amount == 350
    assert applied.total_amount == 325
    assert after == before


def test_price_cart_rejects_unknown_code():
    with pytest.raises(CouponError):
        price_cart([(100, 1)], threshold=500, fee=50, coupon_code="NOPE", now=NOW)
