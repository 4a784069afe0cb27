"""CouponRedemption repository for data access.

The write methods here do not commit. The ledger service runs them inside a
single transaction and commits or rolls back both writes together.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Session

from marketplace.models.coupon import Coupon
from marketplace.models.coupon_redemption import CouponRedemption


class CouponRedemptionRepository:
    """Repository for CouponRedemption model and the coupon usage counter."""

    def __init__(self, db: Session):
        self.db = db

    def claim_usage(self, coupon_id: UUID) -> str | None:
        """Increment ``used_count`` only while the coupon is under its cap.

        Runs as one conditional UPDATE so the cap is checked against the row
        at write time, never against an earlier read.

        Returns:
            The code of the claimed coupon, or None if the coupon is missing
            or already at ``max_uses``.
        """
        stmt = (
            update(Coupon)
            .where(
                Coupon.id == coupon_id,
                or_(Coupon.max_uses.is_(None), Coupon.used_count < Coupon.max_uses),
            )
            .values(used_count=Coupon.used_count + 1)
            .returning(Coupon.code)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add(
        self,
        coupon_id: UUID,
        coupon_code: str,
        user_id: str,
        order_id: str,
        discount_applied: Decimal,
    ) -> CouponRedemption:
        """Stage a redemption row in the current transaction."""
        redemption = CouponRedemption(
            coupon_id=coupon_id,
            coupon_code=coupon_code,
            user_id=user_id,
            order_id=order_id,
            discount_applied=discount_applied,
        )
        self.db.add(redemption)
        self.db.flush()
        return redemption

    def get_by_coupon_id(
        self,
        coupon_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> list[CouponRedemption]:
        """Get redemptions of a coupon, newest first."""
        return (
            self.db.query(CouponRedemption)
            .filter(CouponRedemption.coupon_id == coupon_id)
            .order_by(CouponRedemption.used_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_coupon_id(self, coupon_id: UUID) -> int:
        """Count redemptions of a coupon."""
        return (
            self.db.query(func.count(CouponRedemption.id))
            .filter(CouponRedemption.coupon_id == coupon_id)
            .scalar()
            or 0
        )
