import pytest
from pydantic import ValidationError

from contactbook.schemas import ContactCreate, ContactUpdate


def test_email_keeps_caller_spelling():
    contact = ContactCreate(first_name="Ann", last_name="Lee", email="Ann@Example.COM")
    assert contact.email == "Ann@Example.COM"


@pytest.mark.parametrize("email", ["ann@corp.test", "x@mail.example.test"])
def test_test_domains_are_valid(email):
    assert ContactCreate(first_name="A", last_name="B", email=email).email == email


@pytest.mark.parametrize("email", ["nope", "a@", "@example.com", "a b@example.com"])
def test_malformed_email_is_rejected(email):
    with pytest.raises(ValidationError) as excinfo:
        ContactCreate(first_name="A", last_name="B", email=email)
    assert excinfo.value.errors()[0]["loc"] == ("email",)


def test_names_are_not_trimmed():
    contact = ContactCreate(first_name="  Ann ", last_name="Lee ", email="ann@example.com", phone=" 555 ")
    assert (contact.first_name, contact.last_name, contact.phone) == ("  Ann ", "Lee ", " 555 ")


@pytest.mark.parametrize("model", [ContactCreate, ContactUpdate])
def test_blank_names_are_rejected(model):
    with pytest.raises(ValidationError) as excinfo:
        model(first_name="   ", last_name="Lee", email="ann@example.com")
    assert excinfo.value.errors()[0]["loc"] == ("first_name",)


def test_update_email_is_validated_but_not_normalized():
    assert ContactUpdate(email="Bob@Example.com").email == "Bob@Example.com"
    with pytest.raises(ValidationError):
        ContactUpdate(email="not-an-email")
