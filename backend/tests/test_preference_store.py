import pytest

from contactbook.core.errors import ValidationError
from contactbook.models import Preference
from contactbook.services.preferences import PreferenceStore

DEFAULTS = {"theme": "light", "default_sort": "last_name:asc", "rows_per_page": 10}


def _as_dict(prefs):
    return {"theme": prefs.theme, "default_sort": prefs.default_sort, "rows_per_page": prefs.rows_per_page}


def test_fresh_store_returns_defaults_without_persisting(db):
    prefs = PreferenceStore(db).get("demo")

    assert prefs.user_id == "demo"
    assert _as_dict(prefs) == DEFAULTS
    assert db.get(Preference, "demo") is None


def test_set_then_get_round_trips(db):
    store = PreferenceStore(db)
    store.set("demo", theme="dark", default_sort="email:desc", rows_per_page=25)

    assert _as_dict(store.get("demo")) == {"theme": "dark", "default_sort": "email:desc", "rows_per_page": 25}


def test_set_replaces_instead_of_merging(db):
    store = PreferenceStore(db)
    store.set("demo", theme="light", default_sort="first_name:desc", rows_per_page=50)

    returned = store.set("demo", theme="dark")

    expected = dict(DEFAULTS, theme="dark")
    assert _as_dict(returned) == expected
    assert _as_dict(store.get("demo")) == expected


def test_preferences_are_per_user(db):
    store = PreferenceStore(db)
    store.set("demo", theme="dark")

    assert store.get("demo").theme == "dark"
    assert store.get("someone-else").theme == "light"


@pytest.mark.parametrize(
    "kwargs, names",
    [
        ({"theme": "blue"}, {"theme"}),
        ({"rows_per_page": 0}, {"rowsPerPage", "rows_per_page"}),
        ({"default_sort": ""}, {"defaultSort", "default_sort"}),
    ],
)
def test_invalid_values_raise_validation_error(db, kwargs, names):
    with pytest.raises(ValidationError) as excinfo:
        PreferenceStore(db).set("demo", **kwargs)

    assert names & set(excinfo.value.fields)
    assert db.get(Preference, "demo") is None


def test_document_missing_keys_falls_back_to_defaults(db):
    db.add(Preference(user_id="demo", document={"theme": "dark", "legacy": True}))
    db.commit()

    prefs = PreferenceStore(db).get("demo")

    assert _as_dict(prefs) == dict(DEFAULTS, theme="dark")
