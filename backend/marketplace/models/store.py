"""Store model.

Stores are owned by the store subsystem; coupons only need to know a store
exists and which one an order belongs to.
"""

from sqlalchemy import Column, DateTime, String, func

from marketplace.core.database import Base
from marketplace.models.shared import UUIDType, generate_uuid


class Store(Base):
    """Marketplace store referenced by store-scoped coupons."""

    __tablename__ = "stores"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    owner_id = Column(UUIDType, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
