"""Per-contact notes endpoints."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from contactbook.core.database import get_session
from contactbook.schemas import NoteCreate, NoteResponse
from contactbook.services.notes import NoteStore
from contactbook.utils.security import get_current_user_id

router = APIRouter(prefix="/contacts/{contact_id}/notes", tags=["notes"])


@router.get("", response_model=List[NoteResponse])
def list_notes(
    contact_id: int,
    db: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
) -> List[NoteResponse]:
    """Notes for a contact, newest first."""
    notes = NoteStore(db).list_by_contact(user_id, contact_id)
    return [NoteResponse.model_validate(note) for note in notes]


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def add_note(
    contact_id: int,
    payload: NoteCreate,
    db: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
) -> NoteResponse:
    """Append a note. 400 when the body is blank."""
    note = NoteStore(db).add(user_id, contact_id, payload.body)
    return NoteResponse.model_validate(note)
