# tests/test_catalog.py
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from storefront.models.product import Classification, ProductClassification, ProductImage
from storefront.routers import products as products_router
from storefront.services import product_service
from storefront.services.product_service import slugify

API = "/api/v1"
STORAGE_PUBLIC_PREFIX = (
    "https://test-project.supabase.co/storage/v1/object/public/product-images/"
)
VIDEO_PUBLIC_PREFIX = STORAGE_PUBLIC_PREFIX.replace("product-images", "product-videos")


def names(res):
    return [p["name"] for p in res.json()]


def test_slugify():
    assert slugify("  Hot Wheels 5-Car Pack! ") == "hot-wheels-5-car-pack"
    assert slugify("!!!") == "product"


def test_search_matches_name_brand_and_sku(client, make_product):
    make_product(name="Racing Car", brand="Hot Wheels", sku_code="HW-001")
    make_product(name="Barbie Dreamhouse", brand="Mattel", sku_code="MT-778")
    make_product(name="Jigsaw Puzzle", brand="Funskool", sku_code="FS-100")

    assert names(client.get(f"{API}/products", params={"search": "racing"})) == [
        "Racing Car"
    ]
    assert names(client.get(f"{API}/products", params={"search": "MATTEL"})) == [
        "Barbie Dreamhouse"
    ]
    assert names(client.get(f"{API}/products", params={"search": "fs-1"})) == [
        "Jigsaw Puzzle"
    ]


def test_filters_category_age_and_price_band(client, make_product):
    make_product(name="Rattle", mrp=299, category="Infant Toys", age_range="0-2 Years")
    make_product(name="Teether", mrp=500, category="Infant Toys", age_range="0-2 Years")
    make_product(name="Chess", mrp=899, category="Board Games", age_range="6-8 Years")
    make_product(name="Drone", mrp=7999, category="RC Toys", age_range="13+ Years")

    res = client.get(f"{API}/products", params={"category": "infant toys"})
    assert names(res) == ["Rattle", "Teether"]

    res = client.get(f"{API}/products", params={"age_range": "6-8 Years"})
    assert names(res) == ["Chess"]

    # Lower bound inclusive, upper bound exclusive
    assert names(client.get(f"{API}/products", params={"price": "0-500"})) == ["Rattle"]
    res = client.get(f"{API}/products", params={"price": "500-1000"})
    assert names(res) == ["Chess", "Teether"]
    assert names(client.get(f"{API}/products", params={"price": "5000+"})) == ["Drone"]

    res = client.get(f"{API}/products", params={"price": "all", "category": "all"})
    assert len(res.json()) == 4


def test_sort_options(client, make_product):
    make_product(name="B", mrp=300)
    make_product(name="A", mrp=900)
    make_product(name="C", mrp=100)

    assert names(client.get(f"{API}/products")) == ["A", "B", "C"]
    assert names(client.get(f"{API}/products", params={"sort": "price-low"})) == [
        "C",
        "B",
        "A",
    ]
    assert names(client.get(f"{API}/products", params={"sort": "price-high"})) == [
        "A",
        "B",
        "C",
    ]


def test_unknown_band_or_sort_is_rejected(client):
    assert client.get(f"{API}/products", params={"price": "1-2"}).status_code == 400
    assert client.get(f"{API}/products", params={"sort": "popular"}).status_code == 400


def test_inactive_products_hidden_by_default(client, make_product):
    make_product(name="Visible")
    make_product(name="Hidden", is_active=False)

    assert names(client.get(f"{API}/products")) == ["Visible"]
    res = client.get(f"{API}/products", params={"only_active": False})
    assert sorted(names(res)) == ["Hidden", "Visible"]


def test_product_read_exposes_unit_price(client, make_product):
    product = make_product(mrp=1000, discount_price=799)
    res = client.get(f"{API}/products/{product.id}")
    assert res.status_code == 200
    assert res.json()["unit_price"] == 799.0

    assert client.get(f"{API}/products/{uuid.uuid4()}").status_code == 404


def test_home_sections(client, make_product):
    for i in range(6):
        make_product(name=f"Toy {i}", category="Puzzles", age_range="3-5 Years")
    make_product(name="Kite", category="Outdoor", age_range="9-12 Years")

    assert len(client.get(f"{API}/products/featured").json()) == 4
    assert len(client.get(f"{API}/products/trending").json()) == 7

    categories = client.get(f"{API}/products/categories").json()
    assert categories == [
        {"category": "Outdoor", "product_count": 1},
        {"category": "Puzzles", "product_count": 6},
    ]

    ages = {a["age_range"]: a["product_count"] for a in client.get(
        f"{API}/products/age-groups"
    ).json()}
    assert ages == {
        "0-2 Years": 0,
        "3-5 Years": 6,
        "6-8 Years": 0,
        "9-12 Years": 1,
        "13+ Years": 0,
    }


def test_collections(client, session, make_product):
    school = Classification(name="School Essentials", slug="school-essentials")
    session.add(school)
    session.commit()
    crayons = make_product(name="Crayons")
    make_product(name="Drone")
    session.add(ProductClassification(product_id=crayons.id, classification_id=school.id))
    session.commit()

    res = client.get(f"{API}/collections")
    assert [c["slug"] for c in res.json()] == ["school-essentials"]

    res = client.get(f"{API}/collections/school-essentials/products")
    assert names(res) == ["Crayons"]

    assert client.get(f"{API}/collections/nope/products").status_code == 404


# -------- Admin inventory --------


def test_admin_guard(client, login, customer):
    payload = {"name": "Kite", "mrp": 199}
    assert client.post(f"{API}/products", json=payload).status_code == 401
    login(customer)
    assert client.post(f"{API}/products", json=payload).status_code == 403


def test_create_update_and_stock(client, login, admin):
    login(admin)
    res = client.post(
        f"{API}/products",
        json={
            "name": "Magnetic Tiles",
            "mrp": 1499,
            "discount_price": 1299,
            "stock_quantity": 12,
            "age_range": "3-5 Years",
            "category": " Construction ",
        },
    )
    assert res.status_code == 201, res.text
    created = res.json()
    assert created["slug"] == "magnetic-tiles"
    assert created["category"] == "Construction"

    dup = client.post(f"{API}/products", json={"name": "Magnetic Tiles", "mrp": 999})
    assert dup.json()["slug"] == "magnetic-tiles-2"

    res = client.patch(f"{API}/products/{created['id']}", json={"discount_price": 1600})
    assert res.status_code == 400

    res = client.patch(f"{API}/products/{created['id']}", json={"discount_price": None})
    assert res.json()["unit_price"] == 1499.0

    res = client.patch(f"{API}/products/{created['id']}/stock", json={"stock_quantity": 3})
    assert res.json()["stock_quantity"] == 3
    res = client.patch(f"{API}/products/{created['id']}/stock", json={"stock_quantity": -1})
    assert res.status_code == 422


def test_create_rejects_discount_above_mrp(client, login, admin):
    login(admin)
    res = client.post(
        f"{API}/products", json={"name": "Kite", "mrp": 100, "discount_price": 120}
    )
    assert res.status_code == 422


def test_images_and_delete(client, login, admin, make_product, storage_calls):
    login(admin)
    product = make_product()

    res = client.post(
        f"{API}/products/{product.id}/hero-image",
        files={"file": ("hero.png", b"png-bytes", "image/png")},
    )
    assert res.status_code == 200
    assert res.json()["hero_image_url"].endswith(f"products/{product.id}/hero.png")

    res = client.post(
        f"{API}/products/{product.id}/gallery",
        files=[
            ("files", ("a.jpg", b"a", "image/jpeg")),
            ("files", ("b.webp", b"b", "image/webp")),
        ],
    )
    assert res.status_code == 200
    gallery = res.json()
    assert [img["display_order"] for img in gallery] == [0, 1]

    res = client.post(
        f"{API}/products/{product.id}/gallery",
        files=[("files", ("c.gif", b"c", "image/gif"))],
    )
    assert res.status_code == 400

    res = client.delete(f"{API}/products/{product.id}/gallery/{gallery[0]['id']}")
    assert res.status_code == 200
    assert len(client.get(f"{API}/products/{product.id}/images").json()) == 1

    assert client.delete(f"{API}/products/{product.id}").status_code == 204
    assert client.get(f"{API}/products/{product.id}").status_code == 404
    # hero + both gallery images
    assert len(storage_calls["deleted"]) == 3


def test_set_product_collections(client, session, login, admin, make_product):
    login(admin)
    product = make_product(name="Crayons")

    res = client.post(f"{API}/collections", json={"name": "School Essentials"})
    assert res.status_code == 201
    collection = res.json()
    assert collection["slug"] == "school-essentials"

    res = client.put(
        f"{API}/products/{product.id}/collections",
        json={"classification_ids": [collection["id"]]},
    )
    assert res.status_code == 200
    assert names(client.get(f"{API}/collections/school-essentials/products")) == [
        "Crayons"
    ]

    res = client.put(
        f"{API}/products/{product.id}/collections",
        json={"classification_ids": [str(uuid.uuid4())]},
    )
    assert res.status_code == 400


def test_delete_removes_rows_before_storage(
    client, session, login, admin, make_product, storage_calls, monkeypatch
):
    login(admin)
    product = make_product(
        hero_image_url=STORAGE_PUBLIC_PREFIX + "products/p/hero.png",
        video_url=VIDEO_PUBLIC_PREFIX + "p/demo.mp4",
    )
    session.add(
        ProductImage(
            product_id=product.id,
            image_url=STORAGE_PUBLIC_PREFIX + "products/p/gallery/1.png",
            display_order=0,
        )
    )
    session.commit()

    def failing_delete(session, product):
        raise SQLAlchemyError("connection lost")

    with monkeypatch.context() as m:
        m.setattr(products_router.repo, "delete", failing_delete)
        res = client.delete(f"{API}/products/{product.id}")
    assert res.status_code == 500
    assert storage_calls["deleted"] == []
    assert client.get(f"{API}/products/{product.id}").status_code == 200

    assert client.delete(f"{API}/products/{product.id}").status_code == 204
    assert sorted(storage_calls["deleted"]) == sorted(
        [
            STORAGE_PUBLIC_PREFIX + "products/p/hero.png",
            STORAGE_PUBLIC_PREFIX + "products/p/gallery/1.png",
            VIDEO_PUBLIC_PREFIX + "p/demo.mp4",
        ]
    )
    remaining = session.exec(
        select(ProductImage).where(ProductImage.product_id == product.id)
    ).all()
    assert remaining == []


def test_video_upload_replace_and_remove(
    client, login, admin, make_product, storage_calls, monkeypatch
):
    login(admin)
    product = make_product()

    res = client.post(
        f"{API}/products/{product.id}/video",
        files={"file": ("demo.mp4", b"mp4-bytes", "video/mp4")},
    )
    assert res.status_code == 200, res.text
    first_url = res.json()["video_url"]
    assert first_url.startswith(VIDEO_PUBLIC_PREFIX + f"{product.id}/")
    assert first_url.endswith(".mp4")
    assert storage_calls["uploaded"][-1][1] == "video/mp4"

    res = client.post(
        f"{API}/products/{product.id}/video",
        files={"file": ("demo.webm", b"webm", "video/webm")},
    )
    assert res.status_code == 200
    assert res.json()["video_url"].endswith(".webm")
    assert storage_calls["deleted"] == [first_url]

    res = client.post(
        f"{API}/products/{product.id}/video",
        files={"file": ("demo.avi", b"avi", "video/x-msvideo")},
    )
    assert res.status_code == 400

    monkeypatch.setattr(product_service, "MAX_VIDEO_BYTES", 4)
    res = client.post(
        f"{API}/products/{product.id}/video",
        files={"file": ("big.mp4", b"12345", "video/mp4")},
    )
    assert res.status_code == 413

    second_url = client.get(f"{API}/products/{product.id}").json()["video_url"]
    res = client.delete(f"{API}/products/{product.id}/video")
    assert res.status_code == 200
    assert res.json()["video_url"] is None
    assert storage_calls["deleted"][-1] == second_url
    assert client.delete(f"{API}/products/{product.id}/video").status_code == 404


def test_video_upload_is_admin_only(client, login, customer, make_product):
    product = make_product()
    login(customer)
    res = client.post(
        f"{API}/products/{product.id}/video",
        files={"file": ("demo.mp4", b"mp4", "video/mp4")},
    )
    assert res.status_code == 403
