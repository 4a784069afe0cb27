"""Coupon registry service: creation, update and removal of coupon definitions."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.models.coupon import Coupon, CouponErrorCode
from marketplace.models.shared import as_utc
from marketplace.repositories.coupon_repository import CouponRepository, normalize_code
from marketplace.repositories.store_repository import StoreRepository
from marketplace.schemas.coupon import CouponCreate, CouponUpdate
from marketplace.services.coupon_errors import CouponError

logger = logging.getLogger(__name__)


def _check_date_range(valid_from: datetime, valid_until: datetime) -> None:
    if as_utc(valid_from) >= as_utc(valid_until):
        raise CouponError(
            CouponErrorCode.INVALID_DATE_RANGE,
            "valid_from must be earlier than valid_until",
        )


class CouponRegistry:
    """Owns coupon definitions and their uniqueness and store invariants."""

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.store_repo = StoreRepository(db)

    def create(self, data: CouponCreate) -> Coupon:
        """Create a coupon definition.

        Raises:
            CouponError: ``duplicate_code`` if the normalized code is taken,
                ``store_not_found`` for an unknown store, or
                ``invalid_date_range`` when the window is empty.
        """
        code = normalize_code(data.code)
        if self.coupon_repo.code_exists(code):
            raise CouponError(CouponErrorCode.DUPLICATE_CODE, f"Coupon code '{code}' already exists")

        if data.store_id is not None and not self.store_repo.exists(data.store_id):
            raise CouponError(CouponErrorCode.STORE_NOT_FOUND, f"Store {data.store_id} not found")

        _check_date_range(data.valid_from, data.valid_until)

        try:
            coupon = self.coupon_repo.create(data)
        except IntegrityError:
            # Lost a race with a concurrent create on the unique code index
            self.db.rollback()
            raise CouponError(
                CouponErrorCode.DUPLICATE_CODE, f"Coupon code '{code}' already exists"
            ) from None
        logger.info("Created coupon %s (%s)", coupon.code, coupon.id)
        return coupon

    def update(self, coupon_id: UUID, data: CouponUpdate) -> Coupon:
        """Apply a partial update to a coupon.

        The date range is checked against the merged result, so moving only
        one end of the window is still validated.
        """
        coupon = self.get_by_id(coupon_id)

        if data.code is not None and self.coupon_repo.code_exists(data.code, exclude_id=coupon_id):
            raise CouponError(
                CouponErrorCode.DUPLICATE_CODE,
                f"Coupon code '{normalize_code(data.code)}' already exists",
            )

        valid_from = data.valid_from or coupon.valid_from
        valid_until = data.valid_until or coupon.valid_until
        _check_date_range(valid_from, valid_until)  # type: ignore[arg-type]

        try:
            updated = self.coupon_repo.update(coupon_id, data)
        except IntegrityError:
            self.db.rollback()
            raise CouponError(
                CouponErrorCode.DUPLICATE_CODE,
                f"Coupon code '{normalize_code(data.code or '')}' already exists",
            ) from None
        if not updated:
            raise CouponError(CouponErrorCode.NOT_FOUND, f"Coupon {coupon_id} not found")
        logger.info("Updated coupon %s (%s)", updated.code, updated.id)
        return updated

    def delete(self, coupon_id: UUID) -> None:
        """Remove a coupon definition. Its redemption history is kept."""
        if not self.coupon_repo.delete(coupon_id):
            raise CouponError(CouponErrorCode.NOT_FOUND, f"Coupon {coupon_id} not found")
        logger.info("Deleted coupon %s", coupon_id)

    def get_by_id(self, coupon_id: UUID) -> Coupon:
        coupon = self.coupon_repo.get_by_id(coupon_id)
        if not coupon:
            raise CouponError(CouponErrorCode.NOT_FOUND, f"Coupon {coupon_id} not found")
        return coupon

    def get_by_code(self, code: str) -> Coupon:
        coupon = self.coupon_repo.get_by_code(code)
        if not coupon:
            raise CouponError(
                CouponErrorCode.NOT_FOUND, f"Coupon '{normalize_code(code)}' not found"
            )
        return coupon
