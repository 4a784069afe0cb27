"""Coupon, validation and redemption schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    computed_field,
    field_validator,
)

from marketplace.models.coupon import CouponErrorCode, CouponState, CouponType, derive_coupon_state
from marketplace.models.shared import as_utc

# Whitespace is stripped before the length is checked
CouponCode = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=20)]


class CouponCreate(BaseModel):
    code: CouponCode
    coupon_type: CouponType
    value: Decimal = Field(ge=Decimal("0.01"))
    min_order_value: Decimal | None = Field(default=None, ge=0)
    max_uses: int | None = Field(default=None, ge=1)
    valid_from: datetime
    valid_until: datetime
    store_id: UUID | None = None

    @field_validator("valid_from", "valid_until")
    @classmethod
    def _ensure_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)


class CouponUpdate(BaseModel):
    code: CouponCode | None = None
    coupon_type: CouponType | None = None
    value: Decimal | None = Field(default=None, ge=Decimal("0.01"))
    min_order_value: Decimal | None = Field(default=None, ge=0)
    max_uses: int | None = Field(default=None, ge=1)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    is_active: bool | None = None

    @field_validator("valid_from", "valid_until")
    @classmethod
    def _ensure_timezone(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None


class CouponResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    coupon_type: str
    value: Decimal
    min_order_value: Decimal | None = None
    max_uses: int | None = None
    used_count: int
    valid_from: datetime
    valid_until: datetime
    store_id: UUID | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def state(self) -> CouponState:
        return derive_coupon_state(self)


class ValidateCouponRequest(BaseModel):
    code: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]
    order_value: Decimal = Field(ge=Decimal("0.01"))
    store_id: UUID | None = None


class ValidationResult(BaseModel):
    """Outcome of a read-only coupon check.

    Rule failures are reported through ``error`` rather than raised, so
    checkout can show why a code does not apply.
    """

    valid: bool
    discount: Decimal = Decimal("0.00")
    coupon: CouponResponse | None = None
    error: CouponErrorCode | None = None
    message: str | None = None


class RedeemCouponRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    order_id: str = Field(min_length=1, max_length=64)
    discount_applied: Decimal = Field(ge=0)


class CouponRedemptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    coupon_id: UUID
    coupon_code: str
    user_id: str
    order_id: str
    discount_applied: Decimal
    used_at: datetime
