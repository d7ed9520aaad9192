"""Person service - a user's gift recipients and their display order.

All reads and writes are scoped to the requesting user. Multi-row writes take
the per-user lock and run in one transaction.
"""

import logging
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, selectinload

from gifter.core.structured_logging import build_log_context
from gifter.db.models import Gift, Person
from gifter.services.errors import ValidationError
from gifter.services.ownership import (
    lock_owner,
    owned_person_ids,
    owned_person_ids_query,
    raise_not_owned,
)
from gifter.services.unit_of_work import atomic
from gifter.utils.normalization import normalize_name

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


def _clean_name(name: str | None) -> str:
    cleaned = normalize_name(name)
    if not cleaned:
        raise ValidationError("Person name is required")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValidationError(f"Person name must be at most {MAX_NAME_LENGTH} characters")
    return cleaned


def list_people(db: Session, user_id: UUID) -> list[Person]:
    """List the user's people in display order, gifts included."""
    return list(
        db.execute(
            select(Person)
            .options(selectinload(Person.gifts))
            .where(Person.user_id == user_id)
            .order_by(Person.order, Person.created_at, Person.id)
        ).scalars()
    )


def replace_people(db: Session, user_id: UUID, names: Sequence[str]) -> list[Person]:
    """
    Replace the user's whole list (onboarding).

    Deletes every existing person and their gifts, then creates one person per
    name with order = position. Last call wins.
    """
    if not names:
        raise ValidationError("People array is required")
    cleaned = [_clean_name(name) for name in names]

    with atomic(db):
        lock_owner(db, user_id)
        db.execute(
            delete(Gift)
            .where(Gift.person_id.in_(owned_person_ids_query(user_id)))
            .execution_options(synchronize_session=False)
        )
        db.execute(
            delete(Person)
            .where(Person.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        people = [
            Person(user_id=user_id, name=name, order=index)
            for index, name in enumerate(cleaned)
        ]
        db.add_all(people)

    logger.info(
        "people_replaced count=%d",
        len(people),
        extra=build_log_context(user_id=user_id),
    )
    return people


def append_person(db: Session, user_id: UUID, name: str) -> Person:
    """Add one person after the current last one (order 0 on an empty list)."""
    cleaned = _clean_name(name)

    with atomic(db):
        lock_owner(db, user_id)
        max_order = db.execute(
            select(func.max(Person.order)).where(Person.user_id == user_id)
        ).scalar()
        person = Person(
            user_id=user_id,
            name=cleaned,
            order=0 if max_order is None else max_order + 1,
        )
        db.add(person)

    logger.info(
        "person_appended",
        extra=build_log_context(user_id=user_id, person_id=person.id),
    )
    return person


def reorder_people(db: Session, user_id: UUID, ordered_ids: Iterable[UUID]) -> list[Person]:
    """
    Reorder people by providing every person id in the desired order.

    The ids must be exactly the user's person ids, each once. Partial lists,
    foreign ids and duplicates are rejected and nothing changes.
    """
    ordered = list(ordered_ids)
    if len(set(ordered)) != len(ordered):
        raise ValidationError("person_ids must not contain duplicates")

    with atomic(db):
        lock_owner(db, user_id)
        if set(ordered) != owned_person_ids(db, user_id):
            raise ValidationError("person_ids must include every person exactly once")
        for index, person_id in enumerate(ordered):
            db.execute(
                update(Person)
                .where(Person.id == person_id, Person.user_id == user_id)
                .values(order=index)
                .execution_options(synchronize_session=False)
            )

    logger.info(
        "people_reordered count=%d",
        len(ordered),
        extra=build_log_context(user_id=user_id),
    )
    return list_people(db, user_id)


def delete_person(db: Session, user_id: UUID, person_id: UUID) -> None:
    """Delete one of the user's people together with their gifts."""
    owned = select(Person.id).where(Person.id == person_id, Person.user_id == user_id)

    with atomic(db):
        db.execute(
            delete(Gift)
            .where(Gift.person_id.in_(owned))
            .execution_options(synchronize_session=False)
        )
        result = db.execute(
            delete(Person)
            .where(Person.id == person_id, Person.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise_not_owned(db, Person, person_id, user_id)

    logger.info(
        "person_deleted",
        extra=build_log_context(user_id=user_id, person_id=person_id),
    )
