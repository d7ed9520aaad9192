"""Pydantic schemas for people."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gifter.schemas.gift import GiftRead


class PersonRead(BaseModel):
    """Person with nested gifts, as shown on the dashboard."""

    id: UUID
    name: str
    order: int
    created_at: datetime
    gifts: list[GiftRead] = []

    model_config = {"from_attributes": True}


class PeopleListResponse(BaseModel):
    people: list[PersonRead]


class PeopleReplace(BaseModel):
    """Onboarding: the full list of names, in display order."""

    people: list[str]


class PersonAppend(BaseModel):
    name: str


class PeopleReorder(BaseModel):
    """Every person id of the user, in the desired order."""

    person_ids: list[UUID] = Field(alias="personIds")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str
