"""Coupon repository for data access."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from marketplace.core.sorting import apply_order_by
from marketplace.models.coupon import Coupon
from marketplace.schemas.coupon import CouponCreate, CouponUpdate


NULLABLE_FIELDS = frozenset({"min_order_value", "max_uses"})


def normalize_code(code: str) -> str:
    """Canonical form of a coupon code, used for storage and every lookup."""
    return (code or "").strip().upper()


class CouponRepository:
    """Repository for Coupon model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        store_id: UUID | None = None,
        order_by: str | None = None,
    ) -> list[Coupon]:
        """Get all coupons with optional store filter."""
        query = self.db.query(Coupon)

        if store_id:
            query = query.filter(Coupon.store_id == store_id)

        query = apply_order_by(query, Coupon, order_by)
        return query.offset(skip).limit(limit).all()

    def count(self, store_id: UUID | None = None) -> int:
        """Count coupons with optional store filter."""
        query = self.db.query(func.count(Coupon.id))
        if store_id:
            query = query.filter(Coupon.store_id == store_id)
        return query.scalar() or 0

    def get_active(self, now: datetime, store_id: UUID | None = None) -> list[Coupon]:
        """Get enabled coupons whose validity window contains ``now``.

        With a store, returns that store's coupons plus global ones;
        without one, only global coupons.
        """
        query = self.db.query(Coupon).filter(
            Coupon.is_active == True,  # noqa: E712
            Coupon.valid_from <= now,
            Coupon.valid_until >= now,
        )

        if store_id:
            query = query.filter(or_(Coupon.store_id == store_id, Coupon.store_id.is_(None)))
        else:
            query = query.filter(Coupon.store_id.is_(None))

        return query.order_by(Coupon.created_at.desc(), Coupon.id.desc()).all()

    def get_by_id(self, coupon_id: UUID) -> Coupon | None:
        """Get a coupon by ID."""
        return self.db.query(Coupon).filter(Coupon.id == coupon_id).first()

    def get_by_code(self, code: str) -> Coupon | None:
        """Get a coupon by code, case-insensitively."""
        return self.db.query(Coupon).filter(Coupon.code == normalize_code(code)).first()

    def code_exists(self, code: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another coupon already uses this code."""
        query = self.db.query(Coupon.id).filter(Coupon.code == normalize_code(code))
        if exclude_id:
            query = query.filter(Coupon.id != exclude_id)
        return query.first() is not None

    def create(self, data: CouponCreate) -> Coupon:
        """Create a new coupon."""
        coupon = Coupon(
            code=normalize_code(data.code),
            coupon_type=data.coupon_type.value,
            value=data.value,
            min_order_value=data.min_order_value,
            max_uses=data.max_uses,
            valid_from=data.valid_from,
            valid_until=data.valid_until,
            store_id=data.store_id,
            is_active=True,
            used_count=0,
        )
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def update(self, coupon_id: UUID, data: CouponUpdate) -> Coupon | None:
        """Update a coupon by ID with the fields explicitly set on ``data``."""
        coupon = self.get_by_id(coupon_id)
        if not coupon:
            return None

        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("code") is not None:
            update_data["code"] = normalize_code(update_data["code"])
        if update_data.get("coupon_type") is not None:
            update_data["coupon_type"] = update_data["coupon_type"].value

        for key, value in update_data.items():
            # Only the optional limits can be cleared back to null
            if value is None and key not in NULLABLE_FIELDS:
                continue
            setattr(coupon, key, value)

        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def delete(self, coupon_id: UUID) -> bool:
        """Delete a coupon by ID."""
        coupon = self.get_by_id(coupon_id)
        if not coupon:
            return False

        self.db.delete(coupon)
        self.db.commit()
        return True
