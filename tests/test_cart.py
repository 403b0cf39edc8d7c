# tests/test_cart.py
import uuid

API = "/api/v1"


def test_cart_requires_login(client):
    assert client.get(f"{API}/cart").status_code == 401


def test_add_merges_into_existing_line(client, login, customer, make_product):
    login(customer)
    product = make_product(mrp=500, discount_price=450, stock_quantity=5)

    client.post(f"{API}/cart", json={"product_id": str(product.id), "quantity": 2})
    res = client.post(
        f"{API}/cart", json={"product_id": str(product.id), "quantity": 1}
    )

    assert res.status_code == 200
    body = res.json()
    assert len(body["items"]) == 1
    line = body["items"][0]
    assert line["quantity"] == 3
    assert line["unit_price"] == 450.0
    assert line["mrp"] == 500.0
    assert line["line_total"] == 1350.0
    assert line["stock_quantity"] == 5
    assert body["total_quantity"] == 3
    assert body["subtotal"] == 1350.0


def test_cannot_exceed_stock(client, login, customer, make_product):
    login(customer)
    product = make_product(stock_quantity=2)

    res = client.post(
        f"{API}/cart", json={"product_id": str(product.id), "quantity": 3}
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Not enough stock available"

    client.post(f"{API}/cart", json={"product_id": str(product.id), "quantity": 2})
    res = client.post(
        f"{API}/cart", json={"product_id": str(product.id), "quantity": 1}
    )
    assert res.status_code == 400


def test_inactive_or_missing_product(client, login, customer, make_product):
    login(customer)
    hidden = make_product(is_active=False)

    res = client.post(f"{API}/cart", json={"product_id": str(hidden.id)})
    assert res.status_code == 400

    res = client.post(f"{API}/cart", json={"product_id": str(uuid.uuid4())})
    assert res.status_code == 404


def test_update_remove_and_clear(client, login, customer, make_product):
    login(customer)
    blocks = make_product(name="Blocks", mrp=200, stock_quantity=10)
    kite = make_product(name="Kite", mrp=150, stock_quantity=10)
    client.post(f"{API}/cart", json={"product_id": str(blocks.id)})
    client.post(f"{API}/cart", json={"product_id": str(kite.id)})

    res = client.patch(f"{API}/cart/{blocks.id}", json={"quantity": 4})
    assert res.status_code == 200
    assert res.json()["subtotal"] == 950.0

    assert client.patch(f"{API}/cart/{blocks.id}", json={"quantity": 0}).status_code == 422
    assert client.patch(f"{API}/cart/{blocks.id}", json={"quantity": 11}).status_code == 400

    res = client.delete(f"{API}/cart/{kite.id}")
    assert [i["product_name"] for i in res.json()["items"]] == ["Blocks"]

    assert client.delete(f"{API}/cart/{kite.id}").status_code == 404

    res = client.delete(f"{API}/cart")
    assert res.json() == {"items": [], "total_quantity": 0, "subtotal": 0.0}


def test_cart_is_per_user(client, login, make_user, make_product):
    product = make_product()
    first, second = make_user(), make_user()

    login(first)
    client.post(f"{API}/cart", json={"product_id": str(product.id), "quantity": 2})

    login(second)
    assert client.get(f"{API}/cart").json()["items"] == []


def test_cart_reflects_current_price(client, session, login, customer, make_product):
    login(customer)
    product = make_product(mrp=300)
    client.post(f"{API}/cart", json={"product_id": str(product.id), "quantity": 2})

    product.discount_price = 250
    session.add(product)
    session.commit()

    assert client.get(f"{API}/cart").json()["subtotal"] == 500.0
