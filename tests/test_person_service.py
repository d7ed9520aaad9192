"""Tests for the person service (ordering, replace, reorder, delete)."""
import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from gifter.db.models import Gift, Person
from gifter.services import gift_service, person_service
from gifter.services.errors import NotFoundOrForbidden, StoreError, ValidationError


def _names(people):
    return [p.name for p in people]


def test_replace_people_assigns_positions(db, test_user):
    person_service.replace_people(db, test_user.id, ["Alice", "Bob", "Carol"])

    people = person_service.list_people(db, test_user.id)
    assert _names(people) == ["Alice", "Bob", "Carol"]
    assert [p.order for p in people] == [0, 1, 2]


def test_replace_people_trims_names(db, test_user):
    people = person_service.replace_people(db, test_user.id, ["  Alice  ", "Mary   Jane"])
    assert _names(people) == ["Alice", "Mary Jane"]


def test_replace_people_discards_previous_people_and_gifts(db, test_user):
    first = person_service.replace_people(db, test_user.id, ["Alice"])
    gift_service.create_gifts(db, test_user.id, [(first[0].id, "Scarf")])

    person_service.replace_people(db, test_user.id, ["Dan", "Eve"])

    assert _names(person_service.list_people(db, test_user.id)) == ["Dan", "Eve"]
    assert db.query(Gift).count() == 0


@pytest.mark.parametrize("names", [[], ["Alice", "   "]])
def test_replace_people_rejects_empty_input(db, test_user, names):
    person_service.replace_people(db, test_user.id, ["Keep"])

    with pytest.raises(ValidationError):
        person_service.replace_people(db, test_user.id, names)

    assert _names(person_service.list_people(db, test_user.id)) == ["Keep"]


def test_replace_people_rejects_overlong_name(db, test_user):
    with pytest.raises(ValidationError):
        person_service.replace_people(db, test_user.id, ["x" * 101])


def test_append_on_empty_list_starts_at_zero(db, test_user):
    first = person_service.append_person(db, test_user.id, "Alice")
    second = person_service.append_person(db, test_user.id, "Bob")

    assert (first.order, second.order) == (0, 1)


def test_append_after_gap_uses_max_order(db, test_user):
    people = person_service.replace_people(db, test_user.id, ["A", "B", "C"])
    person_service.delete_person(db, test_user.id, people[1].id)

    appended = person_service.append_person(db, test_user.id, "D")

    assert appended.order == 3
    assert _names(person_service.list_people(db, test_user.id)) == ["A", "C", "D"]


def test_append_rejects_blank_name(db, test_user):
    with pytest.raises(ValidationError):
        person_service.append_person(db, test_user.id, "   ")


def test_reorder_applies_permutation(db, test_user):
    a, b, c = person_service.replace_people(db, test_user.id, ["A", "B", "C"])

    reordered = person_service.reorder_people(db, test_user.id, [c.id, a.id, b.id])

    assert _names(reordered) == ["C", "A", "B"]
    assert [p.order for p in reordered] == [0, 1, 2]


def test_reorder_rejects_partial_list(db, test_user):
    a, b, c = person_service.replace_people(db, test_user.id, ["A", "B", "C"])

    with pytest.raises(ValidationError):
        person_service.reorder_people(db, test_user.id, [b.id, a.id])

    assert _names(person_service.list_people(db, test_user.id)) == ["A", "B", "C"]


def test_reorder_rejects_duplicates_even_with_matching_length(db, test_user):
    a, b, c = person_service.replace_people(db, test_user.id, ["A", "B", "C"])

    with pytest.raises(ValidationError):
        person_service.reorder_people(db, test_user.id, [a.id, a.id, b.id])

    assert _names(person_service.list_people(db, test_user.id)) == ["A", "B", "C"]


def test_reorder_rejects_unknown_id(db, test_user):
    a, b = person_service.replace_people(db, test_user.id, ["A", "B"])

    with pytest.raises(ValidationError):
        person_service.reorder_people(db, test_user.id, [b.id, uuid.uuid4()])


def test_list_people_ties_break_on_created_at(db, test_user):
    a, b = person_service.replace_people(db, test_user.id, ["A", "B"])
    earlier = a.created_at - timedelta(minutes=5)
    db.query(Person).filter(Person.id == b.id).update({"order": 0, "created_at": earlier})
    db.commit()

    assert _names(person_service.list_people(db, test_user.id)) == ["B", "A"]


def test_list_people_includes_gifts(db, test_user):
    (alice,) = person_service.replace_people(db, test_user.id, ["Alice"])
    gift_service.create_gifts(db, test_user.id, [(alice.id, "Book"), (alice.id, "Socks")])

    (listed,) = person_service.list_people(db, test_user.id)
    assert [g.description for g in listed.gifts] == ["Book", "Socks"]


def test_delete_person_removes_gifts(db, test_user):
    (alice,) = person_service.replace_people(db, test_user.id, ["Alice"])
    (gift,) = gift_service.create_gifts(db, test_user.id, [(alice.id, "Book")])
    gift_id = gift.id

    person_service.delete_person(db, test_user.id, alice.id)

    assert person_service.list_people(db, test_user.id) == []
    with pytest.raises(NotFoundOrForbidden):
        gift_service.delete_gift(db, test_user.id, gift_id)


def test_delete_missing_person_is_not_found(db, test_user):
    with pytest.raises(NotFoundOrForbidden):
        person_service.delete_person(db, test_user.id, uuid.uuid4())


def _disk_error():
    return OperationalError("INSERT", {}, Exception("disk I/O error"))


def test_replace_people_store_failure_keeps_previous_list(db, test_user, monkeypatch):
    (alice,) = person_service.replace_people(db, test_user.id, ["Alice"])
    gift_service.create_gifts(db, test_user.id, [(alice.id, "Book")])

    def broken_add_all(instances):
        raise _disk_error()

    monkeypatch.setattr(db, "add_all", broken_add_all)
    with pytest.raises(StoreError):
        person_service.replace_people(db, test_user.id, ["Dan", "Eve"])
    monkeypatch.undo()

    (person,) = person_service.list_people(db, test_user.id)
    assert person.name == "Alice"
    assert [g.description for g in person.gifts] == ["Book"]


def test_reorder_store_failure_midway_keeps_order(db, test_user, monkeypatch):
    a, b, c = person_service.replace_people(db, test_user.id, ["A", "B", "C"])
    ids = [c.id, b.id, a.id]
    real_execute = db.execute
    updates = []

    def failing_second_update(statement, *args, **kwargs):
        if getattr(statement, "is_update", False):
            updates.append(statement)
            if len(updates) == 2:
                raise _disk_error()
        return real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db, "execute", failing_second_update)
    with pytest.raises(StoreError):
        person_service.reorder_people(db, test_user.id, ids)
    monkeypatch.undo()

    people = person_service.list_people(db, test_user.id)
    assert _names(people) == ["A", "B", "C"]
    assert [p.order for p in people] == [0, 1, 2]
