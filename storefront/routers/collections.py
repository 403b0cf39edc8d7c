# storefront/routers/collections.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.brand_repo import BrandRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    ClassificationCreate,
    ClassificationRead,
    ProductRead,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/collections", tags=["Collections"])

repo = ProductRepository()
service = ProductService(repo, BrandRepository())


@router.get("", response_model=list[ClassificationRead])
def list_collections(session: Session = Depends(get_session)):
    """Curated collections (e.g. school essentials)."""
    return service.list_collections(session)


@router.get("/{slug}/products", response_model=list[ProductRead])
def list_collection_products(
    slug: str,
    session: Session = Depends(get_session),
):
    """Active products in a collection, by collection slug."""
    return service.collection_products(session, slug)


@router.post(
    "",
    response_model=ClassificationRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_collection(
    payload: ClassificationCreate,
    session: Session = Depends(get_session),
):
    return service.create_collection(session, payload)
