# storefront/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, SQLModel, col, select

from storefront.models.user import User
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product

# Revenue and best sellers ignore cancelled orders
COUNTED_ORDER = Order.status != "cancelled"


class StatsRepository:
    """
    Read-only aggregates behind the admin dashboard.
    """

    def _count(self, session: Session, model: type[SQLModel], *where) -> int:
        stmt = select(func.count()).select_from(model)
        if where:
            stmt = stmt.where(*where)
        return int(session.exec(stmt).one() or 0)

    def count_customers(self, session: Session) -> int:
        return self._count(session, User, User.role == "user")

    def count_products(self, session: Session) -> int:
        return self._count(session, Product)

    def count_orders(self, session: Session) -> int:
        return self._count(session, Order)

    def total_revenue(self, session: Session) -> float:
        stmt = select(func.coalesce(func.sum(Order.total_amount), 0.0)).where(
            COUNTED_ORDER
        )
        return float(session.exec(stmt).one() or 0.0)

    def low_stock(
        self,
        session: Session,
        threshold: int,
        limit: int = 10,
    ) -> list[Product]:
        """
        Active products at or below `threshold`, emptiest shelf first.
        """
        stmt = (
            select(Product)
            .where(
                Product.is_active == True,  # noqa: E712
                Product.stock_quantity <= threshold,
            )
            .order_by(col(Product.stock_quantity).asc(), col(Product.name).asc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def top_products(self, session: Session, limit: int = 5) -> list[tuple]:
        """
        (product_id, name, units sold, revenue) rows, best sellers first.
        Revenue uses the price snapshot on each order line.
        """
        units = func.sum(OrderItem.quantity)
        revenue = func.sum(OrderItem.quantity * OrderItem.price)

        stmt = (
            select(OrderItem.product_id, Product.name, units, revenue)
            .join(Order, col(Order.id) == OrderItem.order_id)
            .join(Product, col(Product.id) == OrderItem.product_id)
            .where(COUNTED_ORDER)
            .group_by(OrderItem.product_id, Product.name)
            .order_by(units.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def latest_orders(self, session: Session, limit: int = 5) -> list[Order]:
        stmt = select(Order).order_by(col(Order.created_at).desc()).limit(limit)
        return list(session.exec(stmt).all())
