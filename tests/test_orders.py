# tests/test_orders.py
import uuid

import pytest

from storefront.models.order import Order, OrderItem

API = "/api/v1"


@pytest.fixture
def make_order(session, make_product):
    def _make(user, status="pending", total=450.0):
        product = make_product()
        order = Order(
            order_number=f"ORD-1700000000000-{uuid.uuid4().hex[:9].upper()}",
            user_id=user.id,
            status=status,
            subtotal=400.0,
            shipping_amount=50.0,
            discount_amount=0.0,
            total_amount=total,
            full_name="Asha Rao",
            email=user.email,
            phone="9876543210",
            address="12 MG Road, Indiranagar",
            city="Bengaluru",
            state="Karnataka",
            pincode="560038",
        )
        session.add(order)
        session.flush()
        session.add(
            OrderItem(
                order_id=order.id,
                product_id=product.id,
                product_name=product.name,
                quantity=1,
                price=400.0,
            )
        )
        session.commit()
        session.refresh(order)
        return order

    return _make


def test_my_orders_only_shows_own(client, login, make_user, make_order):
    me, other = make_user(), make_user()
    mine = make_order(me)
    theirs = make_order(other)

    login(me)
    res = client.get(f"{API}/orders/me")
    assert res.status_code == 200
    body = res.json()
    assert [o["id"] for o in body] == [str(mine.id)]
    assert body[0]["items"][0]["line_total"] == 400.0

    assert client.get(f"{API}/orders/me/{mine.id}").status_code == 200
    assert client.get(f"{API}/orders/me/{theirs.id}").status_code == 404


def test_admin_lists_and_filters(client, login, admin, customer, make_order):
    make_order(customer, status="pending")
    shipped = make_order(customer, status="shipped")

    login(customer)
    assert client.get(f"{API}/orders").status_code == 403

    login(admin)
    assert len(client.get(f"{API}/orders").json()) == 2
    res = client.get(f"{API}/orders", params={"status": "shipped"})
    assert [o["id"] for o in res.json()] == [str(shipped.id)]
    assert client.get(f"{API}/orders", params={"status": "lost"}).status_code == 422

    res = client.get(f"{API}/orders/{shipped.id}")
    assert res.json()["items"][0]["product_name"] == "Stacking Rings"


@pytest.mark.parametrize(
    "path",
    [
        ["processing", "shipped", "delivered"],
        ["cancelled"],
        ["processing", "cancelled"],
        ["processing", "shipped", "cancelled"],
    ],
)
def test_allowed_status_paths(client, login, admin, customer, make_order, path):
    order = make_order(customer)
    login(admin)
    for new_status in path:
        res = client.patch(f"{API}/orders/{order.id}/status", json={"status": new_status})
        assert res.status_code == 200, res.text
        assert res.json()["status"] == new_status


@pytest.mark.parametrize(
    "current, new",
    [
        ("pending", "shipped"),
        ("pending", "delivered"),
        ("processing", "pending"),
        ("delivered", "cancelled"),
        ("cancelled", "processing"),
    ],
)
def test_rejected_transitions(client, login, admin, customer, make_order, current, new):
    order = make_order(customer, status=current)
    login(admin)
    res = client.patch(f"{API}/orders/{order.id}/status", json={"status": new})
    assert res.status_code == 400
    assert res.json()["detail"] == f"Invalid status transition: {current} -> {new}"


def test_same_status_is_noop(client, login, admin, customer, make_order):
    order = make_order(customer, status="processing")
    login(admin)
    res = client.patch(f"{API}/orders/{order.id}/status", json={"status": "processing"})
    assert res.status_code == 200
    assert res.json()["status"] == "processing"


def test_unknown_order(client, login, admin):
    login(admin)
    res = client.patch(f"{API}/orders/{uuid.uuid4()}/status", json={"status": "shipped"})
    assert res.status_code == 404
