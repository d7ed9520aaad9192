"""Ownership guard: resolve people and gifts only through User -> Person -> Gift.

Every lookup filters on the requesting user, so "exists but belongs to someone
else" and "does not exist" both come back as NotFoundOrForbidden. The reason is
only distinguished in debug logs.
"""

import logging
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, contains_eager

from gifter.core.structured_logging import build_log_context
from gifter.db.models import Gift, Person, User
from gifter.services.errors import NotFoundOrForbidden

logger = logging.getLogger(__name__)


def owned_person_ids_query(user_id: UUID) -> Select:
    """Subquery of the user's person ids, for conditional UPDATE/DELETE filters."""
    return select(Person.id).where(Person.user_id == user_id)


def owned_person_ids(db: Session, user_id: UUID) -> set[UUID]:
    return set(db.execute(owned_person_ids_query(user_id)).scalars())


def get_owned_person(db: Session, user_id: UUID, person_id: UUID) -> Person:
    """Return the person if it belongs to user_id, else raise NotFoundOrForbidden."""
    person = db.execute(
        select(Person).where(Person.id == person_id, Person.user_id == user_id)
    ).scalar_one_or_none()
    if person is None:
        _log_miss(db, Person, person_id, user_id)
        raise NotFoundOrForbidden("Person")
    return person


def get_owned_gift(db: Session, user_id: UUID, gift_id: UUID) -> Gift:
    """Return the gift (with its person loaded) if the chain resolves to user_id."""
    gift = db.execute(
        select(Gift)
        .join(Gift.person)
        .options(contains_eager(Gift.person))
        .where(Gift.id == gift_id, Person.user_id == user_id)
    ).scalar_one_or_none()
    if gift is None:
        _log_miss(db, Gift, gift_id, user_id)
        raise NotFoundOrForbidden("Gift")
    return gift


def lock_owner(db: Session, user_id: UUID) -> None:
    """
    Serialize multi-row writes for one account.

    Takes a row lock on the user until the surrounding transaction ends. SQLite
    has no FOR UPDATE; there the engine opens the transaction with
    BEGIN IMMEDIATE (see gifter.db.session), which already holds the lock.
    """
    db.execute(select(User.id).where(User.id == user_id).with_for_update())


def raise_not_owned(db: Session, model: type[Person] | type[Gift], entity_id: UUID, user_id: UUID):
    """Raise for a conditional statement that matched no rows."""
    _log_miss(db, model, entity_id, user_id)
    raise NotFoundOrForbidden(model.__name__)


def _log_miss(db: Session, model: type[Person] | type[Gift], entity_id: UUID, user_id: UUID) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    exists = db.execute(select(model.id).where(model.id == entity_id)).first() is not None
    logger.debug(
        "ownership_miss %s %s",
        model.__tablename__,
        "foreign" if exists else "absent",
        extra=build_log_context(user_id=user_id),
    )
