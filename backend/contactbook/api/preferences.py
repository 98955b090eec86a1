"""User preference endpoints (theme, default sort, rows per page)."""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from contactbook.core.database import get_session
from contactbook.schemas import PreferenceResponse, PreferenceUpdate
from contactbook.services.preferences import PreferenceStore
from contactbook.utils.security import get_current_user_id

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=PreferenceResponse)
def get_preferences(
    db: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
) -> PreferenceResponse:
    """Stored preferences, or the defaults when nothing has been saved yet."""
    return PreferenceStore(db).get(user_id)


@router.put("", response_model=PreferenceResponse)
def put_preferences(
    payload: Optional[PreferenceUpdate] = Body(None),
    db: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
) -> PreferenceResponse:
    """
    Replace the preference document.

    Fields missing from the body are reset to their defaults rather than
    kept from the previous document.
    """
    payload = payload or PreferenceUpdate()
    return PreferenceStore(db).set(
        user_id,
        theme=payload.theme,
        default_sort=payload.default_sort,
        rows_per_page=payload.rows_per_page,
    )
