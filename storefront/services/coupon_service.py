# storefront/services/coupon_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.coupon import Coupon
from storefront.repositories.coupon_repo import CouponRepository
from storefront.schemas.coupon import CouponCreate, CouponUpdate
from storefront.services.pricing import CouponError, as_utc


# Columns that cannot be cleared through a partial update
REQUIRED_FIELDS = {
    "code",
    "discount_type",
    "discount_value",
    "valid_from",
    "valid_until",
    "is_active",
}


def coupon_http_error(exc: CouponError) -> HTTPException:
    """
    Map a coupon rejection to the 400 the storefront shows inline
    next to the coupon field.
    """
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": exc.reason.value, "message": exc.message},
    )


class CouponService:
    """
    Admin-side coupon management.

    Applying a coupon to a cart lives in OrderService (quote & checkout).
    """

    def __init__(self, repo: CouponRepository):
        self.repo = repo

    def list_coupons(self, session: Session) -> list[Coupon]:
        return self.repo.list(session)

    def get_coupon(self, session: Session, coupon_id: uuid.UUID) -> Coupon:
        coupon = self.repo.get_by_id(session, coupon_id)
        if not coupon:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Coupon not found",
            )
        return coupon

    def create_coupon(self, session: Session, payload: CouponCreate) -> Coupon:
        if self.repo.get_by_code(session, payload.code):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Coupon code already exists",
            )
        coupon = Coupon(**payload.model_dump(), current_uses=0)
        return self.repo.create(session, coupon)

    def update_coupon(
        self,
        session: Session,
        coupon_id: uuid.UUID,
        payload: CouponUpdate,
    ) -> Coupon:
        """
        Partial update. Rules spanning several fields are checked
        against the merged values.
        """
        coupon = self.get_coupon(session, coupon_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }

        new_code = changes.get("code")
        if new_code is not None and new_code != coupon.code:
            if self.repo.get_by_code(session, new_code):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Coupon code already exists",
                )

        valid_from = changes.get("valid_from", coupon.valid_from)
        valid_until = changes.get("valid_until", coupon.valid_until)
        if as_utc(valid_until) <= as_utc(valid_from):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="valid_until must be after valid_from",
            )

        discount_type = changes.get("discount_type", coupon.discount_type)
        discount_value = changes.get("discount_value", coupon.discount_value)
        if discount_type == "percentage" and discount_value > 100:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="percentage discount cannot exceed 100",
            )

        for field, value in changes.items():
            setattr(coupon, field, value)

        return self.repo.update(session, coupon)

    def delete_coupon(self, session: Session, coupon_id: uuid.UUID) -> None:
        coupon = self.get_coupon(session, coupon_id)
        if coupon.current_uses > 0:
            # Orders and usage rows still point at it
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Coupon has been redeemed; deactivate it instead",
            )
        self.repo.delete(session, coupon)

