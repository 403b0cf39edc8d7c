# storefront/repositories/order_repo.py
import uuid
from collections import defaultdict

from sqlmodel import Session, col, select, update
from sqlmodel.sql.expression import SelectOfScalar

from storefront.models.order import Order, OrderItem
from storefront.models.product import Product


class OrderRepository:
    """
    Orders, their lines, and the stock movement checkout causes.

    Nothing here commits: placing an order spans several tables and the
    service owns the transaction.
    """

    @staticmethod
    def _newest_first(
        stmt: SelectOfScalar[Order], skip: int, limit: int
    ) -> SelectOfScalar[Order]:
        return stmt.order_by(col(Order.created_at).desc()).offset(skip).limit(limit)

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order).where(Order.user_id == user_id)
        return list(session.exec(self._newest_first(stmt, skip, limit)).all())

    def list_all(
        self,
        session: Session,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order)
        if status:
            stmt = stmt.where(Order.status == status)
        return list(session.exec(self._newest_first(stmt, skip, limit)).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_for_user(
        self,
        session: Session,
        order_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Order | None:
        """Order lookup scoped to its owner; other users' ids look missing."""
        stmt = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order

    def save_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order

    # ---- Lines ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        return list(session.exec(stmt).all())

    def items_by_order(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, list[OrderItem]]:
        """
        Lines for several orders in one query, keyed by order id.
        """
        grouped: dict[uuid.UUID, list[OrderItem]] = defaultdict(list)
        if not order_ids:
            return grouped
        stmt = select(OrderItem).where(col(OrderItem.order_id).in_(order_ids))
        for item in session.exec(stmt).all():
            grouped[item.order_id].append(item)
        return grouped

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        return items

    # ---- Stock ----

    def decrement_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        quantity: int,
    ) -> bool:
        """
        Take `quantity` units off the shelf only if they are all there.
        Returns False (and changes nothing) when stock is short.
        """
        stmt = (
            update(Product)
            .where(
                col(Product.id) == product_id,
                col(Product.stock_quantity) >= quantity,
            )
            .values(stock_quantity=col(Product.stock_quantity) - quantity)
        )
        return session.exec(stmt).rowcount == 1
