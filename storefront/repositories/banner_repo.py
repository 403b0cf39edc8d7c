# storefront/repositories/banner_repo.py
from sqlmodel import Session, col, select

from storefront.models.banner import AnnouncementBanner


class BannerRepository:

    def get_latest(
        self,
        session: Session,
        only_active: bool = False,
    ) -> AnnouncementBanner | None:
        stmt = select(AnnouncementBanner)
        if only_active:
            stmt = stmt.where(AnnouncementBanner.is_active == True)  # noqa: E712
        stmt = stmt.order_by(col(AnnouncementBanner.created_at).desc()).limit(1)
        return session.exec(stmt).first()

    def save(
        self,
        session: Session,
        banner: AnnouncementBanner,
    ) -> AnnouncementBanner:
        session.add(banner)
        session.commit()
        session.refresh(banner)
        return banner
