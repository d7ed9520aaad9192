"""Pydantic schemas for gifts.

Requests accept the camelCase names the web client sends (personId, giftId,
giftWrapped) as well as the snake_case field names.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GiftRead(BaseModel):
    """Gift response."""

    id: UUID
    person_id: UUID
    description: str
    purchased: bool
    gift_wrapped: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class GiftCreateItem(BaseModel):
    person_id: UUID = Field(alias="personId")
    description: str

    model_config = ConfigDict(populate_by_name=True)


class GiftBatchCreate(BaseModel):
    """Onboarding step two: first gift ideas for any of the user's people."""

    gifts: list[GiftCreateItem]


class GiftBatchResponse(BaseModel):
    gifts: list[GiftRead]


class GiftUpsert(BaseModel):
    """Create a gift (no gift_id) or edit its description (with gift_id)."""

    person_id: UUID | None = Field(default=None, alias="personId")
    description: str | None = None
    gift_id: UUID | None = Field(default=None, alias="giftId")

    model_config = ConfigDict(populate_by_name=True)


class GiftStatusUpdate(BaseModel):
    """Sparse flag update. Omitted or null flags are left unchanged."""

    gift_id: UUID | None = Field(default=None, alias="giftId")
    purchased: bool | None = None
    gift_wrapped: bool | None = Field(default=None, alias="giftWrapped")

    model_config = ConfigDict(populate_by_name=True)


class GiftResponse(BaseModel):
    gift: GiftRead
