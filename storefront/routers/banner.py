# storefront/routers/banner.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.banner_repo import BannerRepository
from storefront.schemas.banner import BannerRead, BannerUpdate
from storefront.services.banner_service import BannerService

router = APIRouter(tags=["Banner"])

repo = BannerRepository()
service = BannerService(repo)


@router.get("/banner", response_model=BannerRead | None)
def get_banner(session: Session = Depends(get_session)):
    """
    Active announcement banner, or null when none is switched on.
    """
    return service.get_public(session)


@router.get(
    "/admin/banner",
    response_model=BannerRead | None,
    dependencies=[Depends(require_admin)],
)
def get_banner_admin(session: Session = Depends(get_session)):
    """Current banner including an inactive one (admin editor)."""
    return service.get_admin(session)


@router.put(
    "/admin/banner",
    response_model=BannerRead,
    dependencies=[Depends(require_admin)],
)
def update_banner(
    payload: BannerUpdate,
    session: Session = Depends(get_session),
):
    """
    Update the banner in place, creating it the first time (admin only).
    """
    return service.upsert(session, payload)
