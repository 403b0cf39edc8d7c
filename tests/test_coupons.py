# tests/test_coupons.py
import uuid

from storefront.repositories.coupon_repo import CouponRepository

API = "/api/v1"

VALID_WINDOW = {
    "valid_from": "2025-01-01T00:00:00Z",
    "valid_until": "2030-01-01T00:00:00Z",
}


def test_coupon_admin_requires_admin(client, login, customer):
    login(customer)
    assert client.get(f"{API}/coupons").status_code == 403


def test_create_upper_cases_and_rejects_duplicates(client, login, admin):
    login(admin)
    res = client.post(
        f"{API}/coupons",
        json={"code": " diwali20 ", "discount_value": 20, **VALID_WINDOW},
    )
    assert res.status_code == 201, res.text
    assert res.json()["code"] == "DIWALI20"
    assert res.json()["current_uses"] == 0

    res = client.post(
        f"{API}/coupons",
        json={"code": "DIWALI20", "discount_value": 5, **VALID_WINDOW},
    )
    assert res.status_code == 409


def test_create_validation(client, login, admin):
    login(admin)
    too_much = {"code": "HUGE", "discount_value": 120, **VALID_WINDOW}
    assert client.post(f"{API}/coupons", json=too_much).status_code == 422

    backwards = {
        "code": "BACK",
        "discount_value": 10,
        "valid_from": "2030-01-01T00:00:00Z",
        "valid_until": "2025-01-01T00:00:00Z",
    }
    assert client.post(f"{API}/coupons", json=backwards).status_code == 422

    fixed = {"code": "FLAT200", "discount_type": "fixed", "discount_value": 200, **VALID_WINDOW}
    assert client.post(f"{API}/coupons", json=fixed).status_code == 201


def test_update_checks_merged_values(client, login, admin, make_coupon):
    login(admin)
    coupon = make_coupon(code="SAVE10")

    res = client.patch(f"{API}/coupons/{coupon.id}", json={"discount_value": 150})
    assert res.status_code == 400

    res = client.patch(
        f"{API}/coupons/{coupon.id}",
        json={"discount_type": "fixed", "discount_value": 150, "max_uses": 100},
    )
    assert res.status_code == 200
    assert res.json()["discount_value"] == 150
    assert res.json()["max_uses"] == 100

    res = client.patch(
        f"{API}/coupons/{coupon.id}",
        json={"valid_until": "2000-01-01T00:00:00Z"},
    )
    assert res.status_code == 400


def test_update_code_conflict(client, login, admin, make_coupon):
    login(admin)
    make_coupon(code="FIRST")
    second = make_coupon(code="SECOND")
    res = client.patch(f"{API}/coupons/{second.id}", json={"code": "first"})
    assert res.status_code == 409


def test_delete(client, login, admin, make_coupon):
    login(admin)
    unused = make_coupon(code="UNUSED")
    redeemed = make_coupon(code="USED", current_uses=2)

    assert client.delete(f"{API}/coupons/{unused.id}").status_code == 204
    assert client.delete(f"{API}/coupons/{redeemed.id}").status_code == 409
    assert client.delete(f"{API}/coupons/{uuid.uuid4()}").status_code == 404
    assert [c["code"] for c in client.get(f"{API}/coupons").json()] == ["USED"]


def test_create_accepts_mixed_offset_timestamps(client, login, admin):
    login(admin)
    res = client.post(
        f"{API}/coupons",
        json={
            "code": "MIXED",
            "discount_value": 10,
            "valid_from": "2025-01-01T00:00:00Z",
            "valid_until": "2027-01-01T00:00:00",
        },
    )
    assert res.status_code == 201, res.text

    backwards = {
        "code": "MIXEDBACK",
        "discount_value": 10,
        "valid_from": "2027-01-01T00:00:00",
        "valid_until": "2025-01-01T00:00:00+05:30",
    }
    assert client.post(f"{API}/coupons", json=backwards).status_code == 422


def test_increment_usage_stops_at_max_uses(session, make_coupon):
    repo = CouponRepository()
    capped = make_coupon(code="CAPPED", max_uses=2, current_uses=2)
    open_ended = make_coupon(code="OPEN", current_uses=7)

    assert repo.increment_usage(session, capped.id) is False
    assert repo.increment_usage(session, open_ended.id) is True
    session.commit()

    session.expire_all()
    assert repo.get_by_id(session, capped.id).current_uses == 2
    assert repo.get_by_id(session, open_ended.id).current_uses == 8
