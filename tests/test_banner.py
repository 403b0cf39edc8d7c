# tests/test_banner.py
API = "/api/v1"


def test_no_banner_yet(client):
    res = client.get(f"{API}/banner")
    assert res.status_code == 200
    assert res.json() is None


def test_admin_creates_then_updates_banner(client, login, admin):
    login(admin)
    res = client.put(
        f"{API}/admin/banner",
        json={
            "text": "Free shipping on orders above ₹500",
            "button_text": "Shop now",
            "button_link": "/products",
            "bg_color": "#ff6b35",
        },
    )
    assert res.status_code == 200, res.text
    first = res.json()
    assert first["bg_color"] == "#FF6B35"

    res = client.put(
        f"{API}/admin/banner",
        json={"text": "Diwali sale is live", "button_text": "  ", "is_active": True},
    )
    assert res.json()["id"] == first["id"]
    assert res.json()["button_text"] is None

    login(None)
    assert client.get(f"{API}/banner").json()["text"] == "Diwali sale is live"


def test_inactive_banner_hidden_from_storefront(client, login, admin):
    login(admin)
    client.put(f"{API}/admin/banner", json={"text": "Hidden", "is_active": False})
    assert client.get(f"{API}/admin/banner").json()["text"] == "Hidden"

    login(None)
    assert client.get(f"{API}/banner").json() is None


def test_banner_validation_and_guard(client, login, customer, admin):
    login(customer)
    assert client.put(f"{API}/admin/banner", json={"text": "x"}).status_code == 403

    login(admin)
    res = client.put(f"{API}/admin/banner", json={"text": "x", "text_color": "white"})
    assert res.status_code == 422
