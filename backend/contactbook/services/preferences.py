"""Preference store: one replace-on-write document per user."""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import InternalError, flatten_validation_errors
from ..core.logging_config import get_logger_with_context
from ..core.observability import track_preference_write
from ..models.base import utcnow
from ..models.preference import Preference
from ..schemas import PreferenceResponse, PreferenceUpdate


logger = logging.getLogger(__name__)


class PreferenceStore:
    """Upsert-only store for UI preferences, keyed by user identity."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> PreferenceResponse:
        """Return the stored document, or the defaults when none exists.

        The defaults are not persisted by a read.
        """
        record = self.db.get(Preference, user_id)
        if record is None:
            return PreferenceResponse(user_id=user_id)
        return self._to_response(user_id, record.document)

    def set(
        self,
        user_id: str,
        theme: Optional[str] = None,
        default_sort: Optional[str] = None,
        rows_per_page: Optional[int] = None,
    ) -> PreferenceResponse:
        """Replace the whole document.

        None means "not supplied" and resolves to the default, not to the
        previously stored value.
        """
        log = get_logger_with_context(__name__, user_id=user_id)
        try:
            values = PreferenceUpdate(
                theme=theme, default_sort=default_sort, rows_per_page=rows_per_page
            )
        except PydanticValidationError as exc:
            raise flatten_validation_errors(exc.errors()) from exc

        document = values.model_dump()
        record = self.db.get(Preference, user_id)
        if record is None:
            record = Preference(user_id=user_id, document=document)
            self.db.add(record)
        else:
            record.document = document
            record.updated_at = utcnow()

        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.error(f"Preference write failed: {exc}")
            raise InternalError("Preference write failed") from exc

        track_preference_write()
        log.info("Preferences replaced: %s", document)
        return self._to_response(user_id, document)

    @staticmethod
    def _to_response(user_id: str, document: Dict[str, Any]) -> PreferenceResponse:
        # Keys missing from an older document fall back to the model defaults
        known = {k: v for k, v in (document or {}).items() if k in PreferenceUpdate.model_fields}
        return PreferenceResponse(user_id=user_id, **known)
