from datetime import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from contactbook.core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from contactbook.schemas import ContactCreate, ContactUpdate
from contactbook.services.contacts import ContactStore, normalize_sort, parse_sort


def test_create_then_get_returns_input_fields(db):
    store = ContactStore(db)
    created = store.create(ContactCreate(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone="555-0101",
        company="Analytical Engines",
    ))

    fetched = store.get(created.id)

    assert fetched.id == created.id
    assert (fetched.first_name, fetched.last_name, fetched.email) == ("Ada", "Lovelace", "ada@example.com")
    assert (fetched.phone, fetched.company) == ("555-0101", "Analytical Engines")
    assert isinstance(fetched.created_at, datetime)
    assert isinstance(fetched.updated_at, datetime)


def test_optional_fields_default_to_none(make_contact):
    contact = make_contact()
    assert contact.phone is None
    assert contact.company is None


def test_duplicate_email_raises_conflict(db, make_contact):
    make_contact(email="dup@example.com")

    with pytest.raises(ConflictError) as excinfo:
        make_contact(email="dup@example.com")

    assert "Email already exists" in excinfo.value.message
    # Session was rolled back and stays usable
    assert ContactStore(db).count() == 1


def test_email_uniqueness_is_case_sensitive(db, make_contact):
    make_contact(email="Dup@example.com")
    make_contact(email="dup@example.com")
    assert ContactStore(db).count() == 2


def test_search_matches_names_and_email_case_insensitively(db, make_contact):
    make_contact(first_name="John", last_name="Smith")
    make_contact(first_name="Jane", last_name="Smithson")
    make_contact(first_name="SMITHY", last_name="Jones")
    make_contact(first_name="Pat", last_name="Doe", email="pat.blacksmith@example.com")
    make_contact(first_name="Ada", last_name="Lovelace")

    rows, total = ContactStore(db).list(search="smith")

    assert total == 4
    assert {r.last_name for r in rows} == {"Smith", "Smithson", "Jones", "Doe"}


def test_empty_search_matches_all(db, make_contact):
    for _ in range(3):
        make_contact()
    rows, total = ContactStore(db).list(search="")
    assert total == 3
    assert len(rows) == 3


def test_search_wildcards_are_literal(db, make_contact):
    make_contact(company="100% Legit", first_name="Percy")
    make_contact(first_name="Underscore_Fan")
    make_contact(first_name="Plain")

    _, percent_total = ContactStore(db).list(search="%")
    rows, underscore_total = ContactStore(db).list(search="_")

    assert percent_total == 0  # company is not searched
    assert underscore_total == 1
    assert rows[0].first_name == "Underscore_Fan"


def test_pagination_returns_slice_and_total(db, make_contact):
    for _ in range(25):
        make_contact()

    rows, total = ContactStore(db).list(page=2, page_size=10)

    assert total == 25
    assert [r.last_name for r in rows] == [f"Last{n:02d}" for n in range(11, 21)]


def test_page_past_the_end_is_empty(db, make_contact):
    for _ in range(5):
        make_contact()
    rows, total = ContactStore(db).list(page=3, page_size=5)
    assert rows == []
    assert total == 5


def test_page_size_has_no_upper_bound(db, make_contact):
    for _ in range(12):
        make_contact()
    rows, total = ContactStore(db).list(page=1, page_size=10_000)
    assert len(rows) == total == 12


def test_invalid_page_raises_validation_error(db):
    with pytest.raises(ValidationError) as excinfo:
        ContactStore(db).list(page=0, page_size=10)
    assert "page" in excinfo.value.fields


def test_sort_descending_by_first_name(db, make_contact):
    for name in ("Bea", "Cy", "Al"):
        make_contact(first_name=name)
    rows, _ = ContactStore(db).list(sort_column="first_name", sort_direction="DESC")
    assert [r.first_name for r in rows] == ["Cy", "Bea", "Al"]


def test_unknown_sort_column_falls_back_to_last_name(db, make_contact):
    make_contact(last_name="Zed", first_name="Aaron")
    make_contact(last_name="Abe", first_name="Zoe")

    rows, _ = ContactStore(db).list(sort_column="DROP TABLE", sort_direction="asc")

    assert [r.last_name for r in rows] == ["Abe", "Zed"]


@pytest.mark.parametrize(
    "sort, expected",
    [
        ("first_name:desc", ("first_name", "desc")),
        ("email:DeSc", ("email", "desc")),
        ("created_at:sideways", ("created_at", "asc")),
        ("updated_at", ("updated_at", "asc")),
        ("DROP TABLE", ("last_name", "asc")),
        ("password:desc", ("last_name", "desc")),
        ("", ("last_name", "asc")),
        (None, ("last_name", "asc")),
    ],
)
def test_parse_sort(sort, expected):
    assert parse_sort(sort) == expected


def test_normalize_sort_handles_missing_direction():
    assert normalize_sort("email", None) == ("email", "asc")


def test_update_merges_only_supplied_fields(db, make_contact, monkeypatch):
    contact = make_contact(company="Acme", phone="555-0000")
    before = (contact.first_name, contact.last_name, contact.email, contact.company)
    later = datetime(2030, 1, 1, 12, 0, 0)
    monkeypatch.setattr("contactbook.models.contact.utcnow", lambda: later)

    updated = ContactStore(db).update(contact.id, ContactUpdate(phone="555-1111"))

    assert updated.phone == "555-1111"
    assert (updated.first_name, updated.last_name, updated.email, updated.company) == before
    assert updated.updated_at == later
    assert updated.created_at < later


def test_update_can_clear_optional_field(db, make_contact):
    contact = make_contact(company="Acme")
    updated = ContactStore(db).update(contact.id, ContactUpdate(company=None))
    assert updated.company is None


def test_update_missing_contact_raises_not_found(db):
    with pytest.raises(NotFoundError):
        ContactStore(db).update(999, ContactUpdate(phone="555-1111"))


def test_update_to_taken_email_raises_conflict(db, make_contact):
    make_contact(email="taken@example.com")
    other = make_contact(email="free@example.com")

    with pytest.raises(ConflictError):
        ContactStore(db).update(other.id, ContactUpdate(email="taken@example.com"))

    assert ContactStore(db).get(other.id).email == "free@example.com"


def test_delete_then_get_raises_not_found(db, make_contact):
    contact = make_contact()
    store = ContactStore(db)

    store.delete(contact.id)

    with pytest.raises(NotFoundError):
        store.get(contact.id)


def test_delete_missing_contact_raises_not_found(db):
    with pytest.raises(NotFoundError):
        ContactStore(db).delete(12345)


def test_other_integrity_errors_become_internal_errors():
    session = MagicMock()
    session.commit.side_effect = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: contacts.last_name"))

    with pytest.raises(InternalError):
        ContactStore(session).create(ContactCreate(first_name="A", last_name="B", email="a@example.com"))

    session.rollback.assert_called_once()


def test_storage_failures_become_internal_errors():
    session = MagicMock()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

    with pytest.raises(InternalError) as excinfo:
        ContactStore(session).create(ContactCreate(first_name="A", last_name="B", email="a@example.com"))

    assert excinfo.value.to_payload() == {"error": "Internal server error"}
    session.rollback.assert_called_once()
