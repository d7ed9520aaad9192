"""Gifts router - gift ideas and purchased / wrapped status."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gifter.core.deps import get_current_session, get_db, require_csrf_header
from gifter.schemas.auth import UserSession
from gifter.schemas.gift import (
    GiftBatchCreate,
    GiftBatchResponse,
    GiftRead,
    GiftResponse,
    GiftStatusUpdate,
    GiftUpsert,
)
from gifter.schemas.person import MessageResponse
from gifter.services import gift_service
from gifter.services.errors import ValidationError

router = APIRouter(
    prefix="/gifts",
    tags=["Gifts"],
    dependencies=[Depends(require_csrf_header)],
)


@router.post("", response_model=GiftBatchResponse, status_code=201)
def create_gifts(
    data: GiftBatchCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Onboarding step two: create several gifts at once.

    One person that is not the user's rejects the whole batch.
    """
    gifts = gift_service.create_gifts(
        db,
        session.user_id,
        [(item.person_id, item.description) for item in data.gifts],
    )
    return GiftBatchResponse(gifts=[GiftRead.model_validate(g) for g in gifts])


@router.put("", response_model=GiftResponse)
def upsert_gift(
    data: GiftUpsert,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Create a gift, or edit the description when gift_id is given."""
    gift = gift_service.upsert_gift(
        db,
        session.user_id,
        person_id=data.person_id,
        description=data.description,
        gift_id=data.gift_id,
    )
    return GiftResponse(gift=GiftRead.model_validate(gift))


@router.patch("", response_model=GiftResponse)
def update_gift_status(
    data: GiftStatusUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Set purchased and/or gift_wrapped."""
    if data.gift_id is None:
        raise ValidationError("Gift ID is required")
    gift = gift_service.update_gift_status(
        db,
        session.user_id,
        data.gift_id,
        purchased=data.purchased,
        gift_wrapped=data.gift_wrapped,
    )
    return GiftResponse(gift=GiftRead.model_validate(gift))


@router.delete("", response_model=MessageResponse)
def delete_gift_by_query(
    gift_id: UUID | None = None,
    gift_id_alias: UUID | None = Query(default=None, alias="giftId"),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Delete a gift named by ?gift_id= (or ?giftId=)."""
    target = gift_id or gift_id_alias
    if target is None:
        raise ValidationError("Gift ID is required")
    gift_service.delete_gift(db, session.user_id, target)
    return MessageResponse(message="Gift deleted")


@router.delete("/{gift_id}", response_model=MessageResponse)
def delete_gift(
    gift_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    gift_service.delete_gift(db, session.user_id, gift_id)
    return MessageResponse(message="Gift deleted")
