# storefront/routers/coupons.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.coupon_repo import CouponRepository
from storefront.schemas.coupon import CouponCreate, CouponRead, CouponUpdate
from storefront.services.coupon_service import CouponService

router = APIRouter(
    prefix="/coupons",
    tags=["Coupons"],
    dependencies=[Depends(require_admin)],
)

repo = CouponRepository()
service = CouponService(repo)


@router.get("", response_model=list[CouponRead])
def list_coupons(session: Session = Depends(get_session)):
    """
    List all coupons, newest first (admin only).
    """
    return service.list_coupons(session)


@router.post(
    "",
    response_model=CouponRead,
    status_code=status.HTTP_201_CREATED,
)
def create_coupon(
    payload: CouponCreate,
    session: Session = Depends(get_session),
):
    """
    Create a coupon (admin only). Codes are stored upper-case and unique.
    """
    return service.create_coupon(session, payload)


@router.patch("/{coupon_id}", response_model=CouponRead)
def update_coupon(
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    session: Session = Depends(get_session),
):
    return service.update_coupon(session, coupon_id, payload)


@router.delete("/{coupon_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_coupon(
    coupon_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_coupon(session, coupon_id)
    return None
