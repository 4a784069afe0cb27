"""Tests for the Coupon model, derived state and coupon schemas."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from marketplace.models.coupon import (
    Coupon,
    CouponErrorCode,
    CouponState,
    CouponType,
    derive_coupon_state,
)
from marketplace.schemas.coupon import CouponCreate, CouponResponse, CouponUpdate


def _coupon_like(now, **overrides):
    fields = {
        "is_active": True,
        "valid_from": now - timedelta(days=1),
        "valid_until": now + timedelta(days=1),
        "max_uses": None,
        "used_count": 0,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestCouponEnums:
    def test_coupon_type_values(self):
        assert CouponType.PERCENTAGE.value == "percentage"
        assert CouponType.FIXED.value == "fixed"
        assert CouponType.FREE_DELIVERY.value == "free_delivery"

    def test_error_code_values(self):
        assert {c.value for c in CouponErrorCode} == {
            "not_found",
            "inactive",
            "not_yet_valid",
            "expired",
            "store_mismatch",
            "below_minimum_order",
            "usage_exceeded",
            "duplicate_code",
            "invalid_date_range",
            "store_not_found",
        }


class TestCouponModel:
    def test_defaults(self, db_session, now):
        """Test Coupon model default values."""
        coupon = Coupon(
            code="DEFAULTS",
            coupon_type="fixed",
            value=Decimal("5.00"),
            valid_from=now,
            valid_until=now + timedelta(days=1),
        )
        db_session.add(coupon)
        db_session.commit()
        db_session.refresh(coupon)

        assert coupon.id is not None
        assert coupon.used_count == 0
        assert coupon.is_active is True
        assert coupon.max_uses is None
        assert coupon.min_order_value is None
        assert coupon.store_id is None
        assert coupon.created_at is not None
        assert coupon.updated_at is not None


class TestDeriveCouponState:
    def test_active(self, now):
        assert derive_coupon_state(_coupon_like(now), now) == CouponState.ACTIVE

    def test_pending(self, now):
        coupon = _coupon_like(now, valid_from=now + timedelta(hours=1))
        assert derive_coupon_state(coupon, now) == CouponState.PENDING

    def test_expired(self, now):
        coupon = _coupon_like(
            now, valid_from=now - timedelta(days=3), valid_until=now - timedelta(days=1)
        )
        assert derive_coupon_state(coupon, now) == CouponState.EXPIRED

    def test_exhausted(self, now):
        coupon = _coupon_like(now, max_uses=2, used_count=2)
        assert derive_coupon_state(coupon, now) == CouponState.EXHAUSTED

    def test_disabled_overrides_everything(self, now):
        coupon = _coupon_like(
            now,
            is_active=False,
            valid_until=now - timedelta(hours=1),
            max_uses=1,
            used_count=1,
        )
        assert derive_coupon_state(coupon, now) == CouponState.DISABLED

    def test_expired_overrides_exhausted(self, now):
        coupon = _coupon_like(
            now,
            valid_from=now - timedelta(days=3),
            valid_until=now - timedelta(days=1),
            max_uses=1,
            used_count=1,
        )
        assert derive_coupon_state(coupon, now) == CouponState.EXPIRED

    def test_window_bounds_are_inclusive(self, now):
        assert derive_coupon_state(_coupon_like(now, valid_from=now), now) == CouponState.ACTIVE
        assert derive_coupon_state(_coupon_like(now, valid_until=now), now) == CouponState.ACTIVE

    def test_naive_datetimes_are_treated_as_utc(self, now):
        naive_now = now.replace(tzinfo=None)
        coupon = _coupon_like(
            now,
            valid_from=naive_now - timedelta(minutes=5),
            valid_until=naive_now + timedelta(minutes=5),
        )
        assert derive_coupon_state(coupon, now) == CouponState.ACTIVE


class TestCouponSchemas:
    def _create_fields(self, now, **overrides):
        fields = {
            "code": "SCHEMA1",
            "coupon_type": "percentage",
            "value": "10",
            "valid_from": now,
            "valid_until": now + timedelta(days=1),
        }
        fields.update(overrides)
        return fields

    def test_create_accepts_minimal_fields(self, now):
        data = CouponCreate(**self._create_fields(now))
        assert data.coupon_type is CouponType.PERCENTAGE
        assert data.value == Decimal("10")
        assert data.store_id is None

    @pytest.mark.parametrize("code", ["AB", "X" * 21, "  ab ", "   "])
    def test_create_rejects_bad_code_length(self, now, code):
        with pytest.raises(ValidationError):
            CouponCreate(**self._create_fields(now, code=code))

    def test_create_strips_code_before_length_check(self, now):
        assert CouponCreate(**self._create_fields(now, code="  abc ")).code == "abc"

    def test_update_rejects_short_code_after_strip(self):
        with pytest.raises(ValidationError):
            CouponUpdate(code=" ab ")

    def test_create_rejects_unknown_type(self, now):
        with pytest.raises(ValidationError):
            CouponCreate(**self._create_fields(now, coupon_type="bogo"))

    def test_create_rejects_non_positive_value(self, now):
        with pytest.raises(ValidationError):
            CouponCreate(**self._create_fields(now, value="0"))

    def test_create_rejects_zero_max_uses(self, now):
        with pytest.raises(ValidationError):
            CouponCreate(**self._create_fields(now, max_uses=0))

    def test_create_normalizes_dates_to_utc(self, now):
        plus_two = timezone(timedelta(hours=2))
        local = datetime(2030, 1, 1, 12, 0, tzinfo=plus_two)
        data = CouponCreate(
            **self._create_fields(now, valid_from=local, valid_until=local + timedelta(days=1))
        )
        assert data.valid_from == datetime(2030, 1, 1, 10, 0, tzinfo=UTC)
        assert data.valid_from.tzinfo == UTC

    def test_update_tracks_explicit_fields(self):
        data = CouponUpdate(max_uses=None, is_active=False)
        assert data.model_dump(exclude_unset=True) == {"max_uses": None, "is_active": False}

    def test_response_includes_state(self, make_coupon):
        coupon = make_coupon(max_uses=1)
        response = CouponResponse.model_validate(coupon)
        assert response.state == CouponState.ACTIVE
        assert response.model_dump()["state"] == CouponState.ACTIVE
