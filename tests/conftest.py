# tests/conftest.py
import os

# Settings are read at import time; give the app a throwaway config.
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlmodel.pool import StaticPool

from storefront.core.auth import get_current_user
from storefront.database import get_session
from storefront.main import app
from storefront.models.coupon import Coupon
from storefront.models.product import Product
from storefront.models.user import User
from storefront.services import product_service

STORAGE_PUBLIC_PREFIX = (
    "https://test-project.supabase.co/storage/v1/object/public/product-images/"
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def acting_user():
    # Mutable slot read by the get_current_user override
    return {"user": None}


@pytest.fixture
def client(session, acting_user):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_current_user] = lambda: acting_user["user"]
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(acting_user):
    def _login(user: User | None) -> None:
        acting_user["user"] = user

    return _login


@pytest.fixture
def storage_calls(monkeypatch):
    """
    Replace Supabase Storage with an in-memory recorder.
    """
    calls = {"uploaded": [], "deleted": []}

    def fake_upload(
        path: str,
        file_bytes: bytes,
        content_type: str,
        bucket: str = "product-images",
    ) -> str:
        calls["uploaded"].append((path, content_type, len(file_bytes)))
        return STORAGE_PUBLIC_PREFIX.replace("product-images", bucket) + path

    def fake_delete(url: str) -> None:
        calls["deleted"].append(url)

    monkeypatch.setattr(product_service, "upload_to_storage", fake_upload)
    monkeypatch.setattr(product_service, "delete_public_url", fake_delete)
    return calls


# ----- factories -----


@pytest.fixture
def make_user(session):
    def _make(
        email: str | None = None,
        role: str = "user",
        is_root_admin: bool = False,
    ) -> User:
        email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
        user = User(
            id=uuid.uuid4(),
            email=email,
            name=email.split("@")[0],
            role=role,
            is_root_admin=is_root_admin,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def customer(make_user):
    return make_user("asha@example.com")


@pytest.fixture
def admin(make_user):
    return make_user("ops@example.com", role="admin")


@pytest.fixture
def root_admin(make_user):
    return make_user("owner@example.com", role="admin", is_root_admin=True)


@pytest.fixture
def make_product(session):
    def _make(
        name: str = "Stacking Rings",
        mrp: float = 400.0,
        discount_price: float | None = None,
        stock_quantity: int = 10,
        **fields,
    ) -> Product:
        product = Product(
            name=name,
            slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
            mrp=mrp,
            discount_price=discount_price,
            stock_quantity=stock_quantity,
            **fields,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_coupon(session):
    def _make(
        code: str = "SAVE10",
        discount_type: str = "percentage",
        discount_value: float = 10,
        **fields,
    ) -> Coupon:
        now = datetime.now(timezone.utc)
        fields.setdefault("valid_from", now - timedelta(days=1))
        fields.setdefault("valid_until", now + timedelta(days=30))
        coupon = Coupon(
            code=code,
            discount_type=discount_type,
            discount_value=discount_value,
            **fields,
        )
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    return _make


@pytest.fixture
def shipping_details():
    return {
        "full_name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "+91 98765-43210",
        "address": "12 MG Road, Indiranagar",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560038",
    }
