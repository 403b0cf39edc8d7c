# storefront/services/brand_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.brand import Brand, SubBrand
from storefront.repositories.brand_repo import BrandRepository
from storefront.schemas.brand import BrandCreate


class BrandService:
    """
    Brand / sub-brand pick lists for the inventory panel.
    Names are unique case-insensitively (sub-brands within their brand).
    """

    def __init__(self, repo: BrandRepository):
        self.repo = repo

    def list_brands(self, session: Session) -> list[Brand]:
        return self.repo.list_brands(session)

    def _get_brand(self, session: Session, brand_id: uuid.UUID) -> Brand:
        brand = self.repo.get_brand(session, brand_id)
        if brand is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Brand not found",
            )
        return brand

    def list_subbrands(self, session: Session, brand_id: uuid.UUID) -> list[SubBrand]:
        self._get_brand(session, brand_id)
        return self.repo.list_subbrands(session, brand_id)

    def create_brand(self, session: Session, payload: BrandCreate) -> Brand:
        if self.repo.get_brand_by_name(session, payload.name):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Brand already exists",
            )
        return self.repo.create(session, Brand(name=payload.name))

    def create_subbrand(
        self,
        session: Session,
        brand_id: uuid.UUID,
        payload: BrandCreate,
    ) -> SubBrand:
        brand = self._get_brand(session, brand_id)
        if self.repo.get_subbrand_by_name(session, brand.id, payload.name):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Sub-brand already exists for this brand",
            )
        return self.repo.create(session, SubBrand(brand_id=brand.id, name=payload.name))
