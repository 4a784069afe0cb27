"""Store schemas."""

from uuid import UUID

from pydantic import BaseModel, Field


class StoreCreate(BaseModel):
    name: str = Field(max_length=255)
    owner_id: UUID | None = None
