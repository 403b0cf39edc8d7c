# storefront/routers/admin_stats.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.stats import AdminDashboardStats
from storefront.services.stats_service import StatsService

router = APIRouter(prefix="/admin/stats", tags=["Admin Stats"])

repo = StatsRepository()
service = StatsService(repo)


@router.get(
    "",
    response_model=AdminDashboardStats,
    dependencies=[Depends(require_admin)],
)
def get_admin_dashboard_stats(
    session: Session = Depends(get_session),
):
    """
    Aggregated statistics for the admin dashboard:
    totals, revenue (non-cancelled orders), low stock alerts,
    top-selling products and the latest orders.

    Only accessible to users with role='admin'.
    """
    return service.get_admin_dashboard_stats(session=session)
