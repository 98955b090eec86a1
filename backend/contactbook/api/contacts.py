"""
Contacts API - CRUD endpoints for the contact book.

Routes:
- GET /api/contacts - Search, sort and paginate contacts
- POST /api/contacts - Create a contact
- GET /api/contacts/{contact_id} - Get a specific contact
- PUT /api/contacts/{contact_id} - Partially update a contact
- DELETE /api/contacts/{contact_id} - Delete a contact
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from contactbook.core.database import get_session
from contactbook.schemas import (
    DEFAULT_SORT,
    ContactCreate,
    ContactListResponse,
    ContactResponse,
    ContactUpdate,
)
from contactbook.services.contacts import ContactStore, parse_sort

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.get("", response_model=ContactListResponse)
def list_contacts(
    search: Optional[str] = Query("", description="Substring of first name, last name or email"),
    page: int = Query(1, ge=1, description="Page number starting at 1"),
    page_size: int = Query(10, ge=1, alias="pageSize", description="Items per page"),
    sort: Optional[str] = Query(DEFAULT_SORT, description="column:direction, e.g. last_name:asc"),
    db: Session = Depends(get_session),
) -> ContactListResponse:
    """
    List contacts with optional search, sorting and pagination.

    Unknown sort columns fall back to last_name; the direction is descending
    only for "desc". pageSize has no upper bound.
    """
    sort_column, sort_direction = parse_sort(sort or DEFAULT_SORT)
    rows, total = ContactStore(db).list(
        search=search,
        page=page,
        page_size=page_size,
        sort_column=sort_column,
        sort_direction=sort_direction,
    )
    return ContactListResponse(
        data=[ContactResponse.model_validate(row) for row in rows],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def create_contact(
    payload: ContactCreate,
    db: Session = Depends(get_session),
) -> ContactResponse:
    """Create a contact. 409 when the email already exists."""
    contact = ContactStore(db).create(payload)
    return ContactResponse.model_validate(contact)


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: int,
    db: Session = Depends(get_session),
) -> ContactResponse:
    """Get a specific contact."""
    return ContactResponse.model_validate(ContactStore(db).get(contact_id))


@router.put("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: int,
    payload: ContactUpdate,
    db: Session = Depends(get_session),
) -> ContactResponse:
    """Merge the supplied fields onto a contact; omitted fields are untouched."""
    contact = ContactStore(db).update(contact_id, payload)
    return ContactResponse.model_validate(contact)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact(
    contact_id: int,
    db: Session = Depends(get_session),
) -> Response:
    """Delete a contact. Its notes are left in place."""
    ContactStore(db).delete(contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
