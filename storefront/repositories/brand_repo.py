# storefront/repositories/brand_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, col, select

from storefront.models.brand import Brand, SubBrand


class BrandRepository:
    """
    Brand and sub-brand lookup tables used by the inventory panel.
    """

    def list_brands(self, session: Session) -> list[Brand]:
        stmt = select(Brand).order_by(col(Brand.name).asc())
        return list(session.exec(stmt).all())

    def get_brand(self, session: Session, brand_id: uuid.UUID) -> Brand | None:
        return session.get(Brand, brand_id)

    def get_brand_by_name(self, session: Session, name: str) -> Brand | None:
        stmt = select(Brand).where(func.lower(Brand.name) == name.lower())
        return session.exec(stmt).first()

    def list_subbrands(self, session: Session, brand_id: uuid.UUID) -> list[SubBrand]:
        stmt = (
            select(SubBrand)
            .where(SubBrand.brand_id == brand_id)
            .order_by(col(SubBrand.name).asc())
        )
        return list(session.exec(stmt).all())

    def get_subbrand(self, session: Session, subbrand_id: uuid.UUID) -> SubBrand | None:
        return session.get(SubBrand, subbrand_id)

    def get_subbrand_by_name(
        self, session: Session, brand_id: uuid.UUID, name: str
    ) -> SubBrand | None:
        stmt = select(SubBrand).where(
            SubBrand.brand_id == brand_id,
            func.lower(SubBrand.name) == name.lower(),
        )
        return session.exec(stmt).first()

    def create(self, session: Session, row: Brand | SubBrand) -> Brand | SubBrand:
        session.add(row)
        session.commit()
        session.refresh(row)
        return row
