# tests/test_stats.py
from storefront.models.order import Order, OrderItem

API = "/api/v1"


def add_order(session, user, product, quantity, status="pending"):
    total = product.mrp * quantity
    order = Order(
        order_number=f"ORD-1700000000000-{status[:3].upper()}{quantity:06d}",
        user_id=user.id,
        status=status,
        subtotal=total,
        shipping_amount=0.0,
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
            quantity=quantity,
            price=product.mrp,
        )
    )
    session.commit()
    return order


def test_dashboard_stats(client, session, login, admin, customer, make_product):
    cars = make_product(name="Toy Car", mrp=200, stock_quantity=3)
    kite = make_product(name="Kite", mrp=100, stock_quantity=50)
    make_product(name="Spinner", mrp=50, stock_quantity=0)

    add_order(session, customer, cars, 3)
    add_order(session, customer, kite, 1)
    add_order(session, customer, kite, 9, status="cancelled")

    login(admin)
    res = client.get(f"{API}/admin/stats")
    assert res.status_code == 200
    stats = res.json()

    assert stats["total_customers"] == 1
    assert stats["total_products"] == 3
    assert stats["total_orders"] == 3
    assert stats["total_revenue"] == 700.0
    assert [p["name"] for p in stats["low_stock"]] == ["Spinner", "Toy Car"]
    assert stats["top_products"][0] == {
        "product_id": str(cars.id),
        "name": "Toy Car",
        "total_quantity": 3,
        "total_revenue": 600.0,
    }
    assert len(stats["latest_orders"]) == 3


def test_stats_admin_only(client, login, customer):
    login(customer)
    assert client.get(f"{API}/admin/stats").status_code == 403
