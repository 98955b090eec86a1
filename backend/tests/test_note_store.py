import pytest

from contactbook.core.errors import ValidationError
from contactbook.services.notes import NoteStore


@pytest.mark.parametrize("body", ["", "   ", "\n\t ", None])
def test_blank_body_is_rejected(db, body):
    with pytest.raises(ValidationError) as excinfo:
        NoteStore(db).add("demo", 1, body)

    assert excinfo.value.fields == {"body": ["Note body required"]}
    assert NoteStore(db).list_by_contact("demo", 1) == []


def test_new_note_is_listed_first(db):
    store = NoteStore(db)
    store.add("demo", 7, "older")
    store.add("demo", 7, "middle")

    note = store.add("demo", 7, "hello")

    notes = store.list_by_contact("demo", 7)
    assert [n.body for n in notes] == ["hello", "middle", "older"]
    assert notes[0].id == note.id
    assert note.created_at is not None


def test_notes_are_scoped_to_contact_and_user(db):
    store = NoteStore(db)
    store.add("demo", 1, "for one")
    store.add("demo", 2, "for two")
    store.add("other", 1, "someone else's")

    assert [n.body for n in store.list_by_contact("demo", 1)] == ["for one"]


def test_body_is_stored_as_given(db):
    note = NoteStore(db).add("demo", 1, "  spaced out  ")
    assert note.body == "  spaced out  "


def test_contact_reference_is_not_enforced(db):
    note = NoteStore(db).add("demo", 424242, "orphan")
    assert note.contact_id == 424242
