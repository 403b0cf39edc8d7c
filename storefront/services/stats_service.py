# storefront/services/stats_service.py
from sqlmodel import Session

from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.stats import (
    AdminDashboardStats,
    LatestOrderSummary,
    LowStockProduct,
    TopProduct,
)

LOW_STOCK_THRESHOLD = 5


class StatsService:
    """
    Builds the admin dashboard payload from repository aggregates.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_admin_dashboard_stats(
        self,
        session: Session,
        top_n_products: int = 5,
        latest_n_orders: int = 5,
    ) -> AdminDashboardStats:
        low_stock = [
            LowStockProduct(
                product_id=p.id,
                name=p.name,
                stock_quantity=p.stock_quantity,
            )
            for p in self.repo.low_stock(session, threshold=LOW_STOCK_THRESHOLD)
        ]

        top_products = [
            TopProduct(
                product_id=product_id,
                name=name,
                total_quantity=int(units or 0),
                total_revenue=round(float(revenue or 0.0), 2),
            )
            for product_id, name, units, revenue in self.repo.top_products(
                session, limit=top_n_products
            )
        ]

        latest_orders = [
            LatestOrderSummary.model_validate(order)
            for order in self.repo.latest_orders(session, limit=latest_n_orders)
        ]

        return AdminDashboardStats(
            total_customers=self.repo.count_customers(session),
            total_products=self.repo.count_products(session),
            total_orders=self.repo.count_orders(session),
            total_revenue=round(self.repo.total_revenue(session), 2),
            low_stock=low_stock,
            top_products=top_products,
            latest_orders=latest_orders,
        )
