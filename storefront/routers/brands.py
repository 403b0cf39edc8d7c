# storefront/routers/brands.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.brand_repo import BrandRepository
from storefront.schemas.brand import BrandCreate, BrandRead, SubBrandRead
from storefront.services.brand_service import BrandService

# Pick lists for the inventory panel: admin only
router = APIRouter(
    prefix="/brands",
    tags=["Brands"],
    dependencies=[Depends(require_admin)],
)

repo = BrandRepository()
service = BrandService(repo)


@router.get("", response_model=list[BrandRead])
def list_brands(session: Session = Depends(get_session)):
    """All brands, alphabetical."""
    return service.list_brands(session)


@router.post("", response_model=BrandRead, status_code=status.HTTP_201_CREATED)
def create_brand(
    payload: BrandCreate,
    session: Session = Depends(get_session),
):
    return service.create_brand(session, payload)


@router.get("/{brand_id}/subbrands", response_model=list[SubBrandRead])
def list_subbrands(
    brand_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Sub-brands of one brand, alphabetical. Feeds the second select
    once a brand is picked.
    """
    return service.list_subbrands(session, brand_id)


@router.post(
    "/{brand_id}/subbrands",
    response_model=SubBrandRead,
    status_code=status.HTTP_201_CREATED,
)
def create_subbrand(
    brand_id: uuid.UUID,
    payload: BrandCreate,
    session: Session = Depends(get_session),
):
    return service.create_subbrand(session, brand_id, payload)
