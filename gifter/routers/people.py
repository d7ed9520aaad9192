"""People router - a user's gift recipients and their order."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gifter.core.deps import get_current_session, get_db, require_csrf_header
from gifter.schemas.auth import UserSession
from gifter.schemas.person import (
    MessageResponse,
    PeopleListResponse,
    PeopleReorder,
    PeopleReplace,
    PersonAppend,
    PersonRead,
)
from gifter.services import person_service

router = APIRouter(prefix="/people", tags=["People"])


def _people_response(people) -> PeopleListResponse:
    return PeopleListResponse(people=[PersonRead.model_validate(p) for p in people])


@router.get("", response_model=PeopleListResponse)
def list_people(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """List people in display order with their gifts."""
    return _people_response(person_service.list_people(db, session.user_id))


@router.post(
    "",
    response_model=PeopleListResponse,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def replace_people(
    data: PeopleReplace,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Onboarding step one: replace the whole list.

    Existing people and all of their gifts are deleted first.
    """
    people = person_service.replace_people(db, session.user_id, data.people)
    return _people_response(people)


@router.post(
    "/append",
    response_model=PersonRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def append_person(
    data: PersonAppend,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Add one person at the end of the list."""
    person = person_service.append_person(db, session.user_id, data.name)
    return PersonRead.model_validate(person)


@router.post(
    "/reorder",
    response_model=MessageResponse,
    dependencies=[Depends(require_csrf_header)],
)
def reorder_people(
    data: PeopleReorder,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Reorder people.

    person_ids must contain every person id of the user exactly once.
    """
    person_service.reorder_people(db, session.user_id, data.person_ids)
    return MessageResponse(message="Order updated")


@router.delete(
    "/{person_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_csrf_header)],
)
def delete_person(
    person_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Delete a person and their gifts."""
    person_service.delete_person(db, session.user_id, person_id)
    return MessageResponse(message="Person deleted")
