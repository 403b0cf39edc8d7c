# storefront/repositories/coupon_repo.py
import uuid

from sqlmodel import Session, col, or_, select, update

from storefront.models.coupon import Coupon, CouponUsage


class CouponRepository:
    """
    Data access layer for coupons and their redemptions.

    `increment_usage` and `record_usage` do not commit; they run inside
    the checkout transaction.
    """

    def list(self, session: Session) -> list[Coupon]:
        stmt = select(Coupon).order_by(col(Coupon.created_at).desc())
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, coupon_id: uuid.UUID) -> Coupon | None:
        return session.get(Coupon, coupon_id)

    def get_by_code(self, session: Session, code: str) -> Coupon | None:
        stmt = select(Coupon).where(Coupon.code == code)
        return session.exec(stmt).first()

    def get_active_by_code(self, session: Session, code: str) -> Coupon | None:
        stmt = select(Coupon).where(
            Coupon.code == code,
            Coupon.is_active == True,  # noqa: E712
        )
        return session.exec(stmt).first()

    def create(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    def update(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    def delete(self, session: Session, coupon: Coupon) -> None:
        session.delete(coupon)
        session.commit()

    def increment_usage(self, session: Session, coupon_id: uuid.UUID) -> bool:
        """
        Atomically bump current_uses while it is still below max_uses.

        Returns False when the cap was reached by a concurrent redemption.
        """
        stmt = (
            update(Coupon)
            .where(
                Coupon.id == coupon_id,
                or_(
                    col(Coupon.max_uses).is_(None),
                    col(Coupon.current_uses) < col(Coupon.max_uses),
                ),
            )
            .values(current_uses=col(Coupon.current_uses) + 1)
        )
        result = session.exec(stmt)
        return result.rowcount == 1

    def record_usage(self, session: Session, usage: CouponUsage) -> CouponUsage:
        session.add(usage)
        session.flush()
        return usage

