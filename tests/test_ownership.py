"""Cross-tenant isolation: one user's ids never reach another user's rows."""
import pytest

from gifter.db.models import Gift, Person
from gifter.services import gift_service, person_service
from gifter.services.errors import NotFoundOrForbidden, ValidationError
from gifter.services.ownership import get_owned_gift, get_owned_person, owned_person_ids


@pytest.fixture
def foreign(db, other_user):
    """other_user's person with one gift."""
    (person,) = person_service.replace_people(db, other_user.id, ["Bob"])
    (gift,) = gift_service.create_gifts(db, other_user.id, [(person.id, "Train set")])
    return person.id, gift.id


def _foreign_state(db, person_id, gift_id):
    db.expire_all()
    gift = db.get(Gift, gift_id)
    return db.get(Person, person_id).name, gift.description, gift.purchased


def test_lookups_hide_foreign_rows(db, test_user, foreign):
    person_id, gift_id = foreign

    with pytest.raises(NotFoundOrForbidden):
        get_owned_person(db, test_user.id, person_id)
    with pytest.raises(NotFoundOrForbidden):
        get_owned_gift(db, test_user.id, gift_id)
    assert owned_person_ids(db, test_user.id) == set()


def test_get_owned_gift_loads_person(db, other_user, foreign):
    person_id, gift_id = foreign

    gift = get_owned_gift(db, other_user.id, gift_id)
    assert gift.person.id == person_id


def test_foreign_writes_are_not_found_and_change_nothing(db, test_user, foreign):
    person_id, gift_id = foreign
    before = _foreign_state(db, person_id, gift_id)

    with pytest.raises(NotFoundOrForbidden):
        person_service.delete_person(db, test_user.id, person_id)
    with pytest.raises(NotFoundOrForbidden):
        gift_service.update_gift_status(db, test_user.id, gift_id, purchased=True)
    with pytest.raises(NotFoundOrForbidden):
        gift_service.upsert_gift(db, test_user.id, person_id, "Stolen", gift_id=gift_id)
    with pytest.raises(NotFoundOrForbidden):
        gift_service.upsert_gift(db, test_user.id, person_id, "Planted")
    with pytest.raises(NotFoundOrForbidden):
        gift_service.create_gifts(db, test_user.id, [(person_id, "Planted")])
    with pytest.raises(NotFoundOrForbidden):
        gift_service.delete_gift(db, test_user.id, gift_id)

    assert _foreign_state(db, person_id, gift_id) == before
    assert db.query(Gift).count() == 1


def test_reorder_with_foreign_id_is_rejected(db, test_user, foreign):
    person_id, _ = foreign
    (mine,) = person_service.replace_people(db, test_user.id, ["Alice"])

    with pytest.raises(ValidationError):
        person_service.reorder_people(db, test_user.id, [person_id, mine.id])


def test_replace_only_touches_own_people(db, test_user, other_user, foreign):
    person_service.replace_people(db, test_user.id, ["Alice"])
    person_service.replace_people(db, test_user.id, ["Carol"])

    assert [p.name for p in person_service.list_people(db, other_user.id)] == ["Bob"]
    assert [p.name for p in person_service.list_people(db, test_user.id)] == ["Carol"]
