"""Read-side coupon queries: listings, active coupons, store coupons and usage history."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.models.coupon import Coupon, CouponErrorCode
from marketplace.models.coupon_redemption import CouponRedemption
from marketplace.models.shared import as_utc, utc_now
from marketplace.repositories.coupon_redemption_repository import CouponRedemptionRepository
from marketplace.repositories.coupon_repository import CouponRepository
from marketplace.repositories.store_repository import StoreRepository
from marketplace.schemas.coupon import CouponCreate
from marketplace.services.coupon_errors import CouponError
from marketplace.services.coupon_registry import CouponRegistry


class CouponQueryService:
    """Listing and lookup operations layered over the registry and ledger."""

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.redemption_repo = CouponRedemptionRepository(db)
        self.store_repo = StoreRepository(db)

    def list_coupons(
        self,
        skip: int = 0,
        limit: int = 100,
        store_id: UUID | None = None,
        order_by: str | None = None,
    ) -> list[Coupon]:
        return self.coupon_repo.get_all(skip=skip, limit=limit, store_id=store_id, order_by=order_by)

    def count_coupons(self, store_id: UUID | None = None) -> int:
        return self.coupon_repo.count(store_id)

    def get_active_coupons(
        self,
        store_id: UUID | None = None,
        now: datetime | None = None,
    ) -> list[Coupon]:
        """Coupons currently usable: the store's own plus global ones, or only
        global ones when no store is given.

        Coupons that reached their usage cap are still listed; the validator
        reports them as exhausted.
        """
        return self.coupon_repo.get_active(as_utc(now or utc_now()), store_id)

    def get_store_coupons(
        self,
        store_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Coupon]:
        self._require_store(store_id)
        return self.coupon_repo.get_all(skip=skip, limit=limit, store_id=store_id)

    def create_store_coupon(self, store_id: UUID, data: CouponCreate) -> Coupon:
        """Create a coupon scoped to ``store_id``, overriding any store on ``data``."""
        self._require_store(store_id)
        return CouponRegistry(self.db).create(data.model_copy(update={"store_id": store_id}))

    def get_usage(self, coupon_id: UUID, skip: int = 0, limit: int = 100) -> list[CouponRedemption]:
        """Redemption history of a coupon, newest first.

        Works for deleted coupons too, since history is kept for audit.
        """
        return self.redemption_repo.get_by_coupon_id(coupon_id, skip=skip, limit=limit)

    def count_usage(self, coupon_id: UUID) -> int:
        return self.redemption_repo.count_by_coupon_id(coupon_id)

    def _require_store(self, store_id: UUID) -> None:
        if not self.store_repo.exists(store_id):
            raise CouponError(CouponErrorCode.STORE_NOT_FOUND, f"Store {store_id} not found")
