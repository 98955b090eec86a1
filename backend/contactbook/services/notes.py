"""Note store: append-only notes per contact, newest first."""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import InternalError, ValidationError
from ..core.logging_config import get_logger_with_context
from ..core.observability import track_note_created
from ..models.note import Note


logger = logging.getLogger(__name__)

BODY_REQUIRED = "Note body required"


class NoteStore:
    """Notes are never edited or deleted; contact_id is not checked against contacts."""

    def __init__(self, db: Session):
        self.db = db

    def list_by_contact(self, user_id: str, contact_id: int) -> List[Note]:
        notes = self.db.scalars(
            select(Note)
            .where(Note.user_id == user_id, Note.contact_id == contact_id)
            .order_by(Note.created_at.desc(), Note.id.desc())
        ).all()
        return list(notes)

    def add(self, user_id: str, contact_id: int, body: str) -> Note:
        """Append a note. The body is stored as given once it passes the blank check."""
        if body is None or not str(body).strip():
            raise ValidationError(BODY_REQUIRED, fields={"body": [BODY_REQUIRED]})

        note = Note(contact_id=contact_id, user_id=user_id, body=str(body))
        self.db.add(note)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Note insert failed for contact {contact_id}: {exc}")
            raise InternalError("Note insert failed") from exc
        self.db.refresh(note)

        track_note_created()
        get_logger_with_context(__name__, user_id=user_id).info(
            f"Added note {note.id} to contact {contact_id}"
        )
        return note
