# storefront/services/banner_service.py
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.models.banner import AnnouncementBanner
from storefront.repositories.banner_repo import BannerRepository
from storefront.schemas.banner import BannerUpdate


class BannerService:
    """
    Single announcement strip: the newest row is the banner.
    """

    def __init__(self, repo: BannerRepository):
        self.repo = repo

    def get_public(self, session: Session) -> AnnouncementBanner | None:
        return self.repo.get_latest(session, only_active=True)

    def get_admin(self, session: Session) -> AnnouncementBanner | None:
        return self.repo.get_latest(session)

    def upsert(self, session: Session, payload: BannerUpdate) -> AnnouncementBanner:
        """
        Update the current banner in place, or create the first one.
        """
        banner = self.repo.get_latest(session)
        if banner is None:
            banner = AnnouncementBanner(**payload.model_dump())
        else:
            for field, value in payload.model_dump().items():
                setattr(banner, field, value)
            banner.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, banner)
