"""
Request/response models shared by the API layer, the stores and the client.

Contacts travel in snake_case; preferences and notes in camelCase, which is
the shape the browser client has always consumed.
"""
from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

Theme = Literal["light", "dark"]

DEFAULT_THEME: Theme = "light"
DEFAULT_SORT = "last_name:asc"
DEFAULT_ROWS_PER_PAGE = 10


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Contacts

def _check_email(value: str) -> str:
    # Validate only; the caller's spelling is what gets stored and compared
    try:
        validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError as exc:
        raise ValueError(f"value is not a valid email address: {exc}") from exc
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class ContactCreate(BaseModel):
    """Create contact request. Values are stored exactly as sent."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: Email = Field(..., description="Unique across all contacts")
    phone: Optional[str] = Field(None, max_length=64)
    company: Optional[str] = Field(None, max_length=255)

    @field_validator("first_name", "last_name")
    @classmethod
    def require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ContactUpdate(BaseModel):
    """Update contact request (partial). Only fields present in the payload change."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[Email] = None
    phone: Optional[str] = Field(None, max_length=64)
    company: Optional[str] = Field(None, max_length=255)

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    @field_validator("first_name", "last_name")
    @classmethod
    def require_text(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value


class ContactResponse(BaseModel):
    """Contact response model"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ContactListResponse(BaseModel):
    """One page of contacts plus the pre-pagination match count"""
    model_config = ConfigDict(populate_by_name=True)

    data: List[ContactResponse]
    page: int
    page_size: int = Field(..., alias="pageSize")
    total: int


# Preferences

class PreferenceUpdate(CamelModel):
    """
    Full preference document.

    Omitted or null fields take their default; nothing is carried over from
    the previously stored document.
    """

    theme: Theme = DEFAULT_THEME
    default_sort: str = Field(DEFAULT_SORT, min_length=1)
    rows_per_page: int = Field(DEFAULT_ROWS_PER_PAGE, ge=1)

    @field_validator("theme", "default_sort", "rows_per_page", mode="before")
    @classmethod
    def null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class PreferenceResponse(CamelModel):
    user_id: str
    theme: Theme = DEFAULT_THEME
    default_sort: str = DEFAULT_SORT
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE


# Notes

class NoteCreate(BaseModel):
    body: str = Field(..., description="Note text; must contain something besides whitespace")


class NoteResponse(CamelModel):
    id: int
    contact_id: int
    user_id: str
    body: str
    created_at: datetime
