"""Store repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.models.store import Store
from marketplace.schemas.store import StoreCreate


class StoreRepository:
    """Repository for Store model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, store_id: UUID) -> Store | None:
        """Get a store by ID."""
        return self.db.query(Store).filter(Store.id == store_id).first()

    def exists(self, store_id: UUID) -> bool:
        """Check whether a store with the given ID exists."""
        return self.db.query(Store.id).filter(Store.id == store_id).first() is not None

    def create(self, data: StoreCreate) -> Store:
        """Create a new store."""
        store = Store(name=data.name, owner_id=data.owner_id)
        self.db.add(store)
        self.db.commit()
        self.db.refresh(store)
        return store
