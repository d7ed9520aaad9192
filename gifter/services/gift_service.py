"""Gift service - gift ideas and their purchased / wrapped flags.

A gift is reachable only through a person the requesting user owns. Writes
that target an existing gift are single conditional statements on
(gift id, owned person ids), so the ownership check and the change cannot be
split by a concurrent request.
"""

import logging
from typing import Iterable
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from gifter.core.structured_logging import build_log_context
from gifter.db.models import Gift, Person
from gifter.services.errors import NotFoundOrForbidden, ValidationError
from gifter.services.ownership import (
    get_owned_person,
    owned_person_ids_query,
    raise_not_owned,
)
from gifter.services.unit_of_work import atomic
from gifter.utils.normalization import normalize_text

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 500


def _clean_description(description: str | None) -> str:
    cleaned = normalize_text(description)
    if not cleaned:
        raise ValidationError("Gift description is required")
    if len(cleaned) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Gift description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )
    return cleaned


def _reload(db: Session, gift_id: UUID) -> Gift:
    return db.get(Gift, gift_id, populate_existing=True)


def create_gifts(
    db: Session,
    user_id: UUID,
    items: Iterable[tuple[UUID, str]],
) -> list[Gift]:
    """
    Create a batch of gifts from (person_id, description) pairs.

    Every referenced person must belong to user_id. One foreign or unknown
    person rejects the whole batch. Several gifts may share a person. An empty
    batch creates nothing.
    """
    drafts = [(person_id, _clean_description(description)) for person_id, description in items]
    if not drafts:
        return []

    requested = {person_id for person_id, _ in drafts}

    with atomic(db):
        owned = set(
            db.execute(
                owned_person_ids_query(user_id).where(Person.id.in_(requested))
            ).scalars()
        )
        if owned != requested:
            logger.debug(
                "gift_batch_rejected unknown=%d",
                len(requested - owned),
                extra=build_log_context(user_id=user_id),
            )
            raise NotFoundOrForbidden("Person")
        gifts = [
            Gift(person_id=person_id, description=description)
            for person_id, description in drafts
        ]
        db.add_all(gifts)

    logger.info(
        "gifts_created count=%d",
        len(gifts),
        extra=build_log_context(user_id=user_id),
    )
    return gifts


def upsert_gift(
    db: Session,
    user_id: UUID,
    person_id: UUID | None,
    description: str | None,
    gift_id: UUID | None = None,
) -> Gift:
    """
    Create a gift for person_id, or edit the description of gift_id.

    When gift_id is given it must already belong to person_id; a gift cannot
    be moved between people this way.
    """
    if person_id is None:
        raise ValidationError("Person ID and description are required")
    cleaned = _clean_description(description)

    with atomic(db):
        get_owned_person(db, user_id, person_id)
        if gift_id is None:
            gift = Gift(person_id=person_id, description=cleaned)
            db.add(gift)
        else:
            result = db.execute(
                update(Gift)
                .where(
                    Gift.id == gift_id,
                    Gift.person_id == person_id,
                    Gift.person_id.in_(owned_person_ids_query(user_id)),
                )
                .values(description=cleaned)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise_not_owned(db, Gift, gift_id, user_id)

    if gift_id is None:
        logger.info(
            "gift_created",
            extra=build_log_context(user_id=user_id, person_id=person_id, gift_id=gift.id),
        )
        return gift

    logger.info(
        "gift_updated",
        extra=build_log_context(user_id=user_id, person_id=person_id, gift_id=gift_id),
    )
    return _reload(db, gift_id)


def update_gift_status(
    db: Session,
    user_id: UUID,
    gift_id: UUID,
    *,
    purchased: bool | None = None,
    gift_wrapped: bool | None = None,
) -> Gift:
    """Set purchased and/or gift_wrapped. Fields left as None are untouched."""
    changes: dict[str, bool] = {}
    if purchased is not None:
        changes["purchased"] = purchased
    if gift_wrapped is not None:
        changes["gift_wrapped"] = gift_wrapped
    if not changes:
        raise ValidationError("Provide purchased or gift_wrapped")

    with atomic(db):
        result = db.execute(
            update(Gift)
            .where(Gift.id == gift_id, Gift.person_id.in_(owned_person_ids_query(user_id)))
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise_not_owned(db, Gift, gift_id, user_id)

    logger.info(
        "gift_status_updated fields=%s",
        ",".join(sorted(changes)),
        extra=build_log_context(user_id=user_id, gift_id=gift_id),
    )
    return _reload(db, gift_id)


def delete_gift(db: Session, user_id: UUID, gift_id: UUID) -> None:
    """Delete a gift of one of the user's people."""
    with atomic(db):
        result = db.execute(
            delete(Gift)
            .where(Gift.id == gift_id, Gift.person_id.in_(owned_person_ids_query(user_id)))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise_not_owned(db, Gift, gift_id, user_id)

    logger.info(
        "gift_deleted",
        extra=build_log_context(user_id=user_id, gift_id=gift_id),
    )
