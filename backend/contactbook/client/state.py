"""
View state for the contact book client.

All UI state lives in one serializable ViewState. Event handling is a set of
pure functions that take a state and return the next one, so every
transition can be exercised without a browser or a server.
"""
import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from contactbook.schemas import DEFAULT_ROWS_PER_PAGE, DEFAULT_SORT, DEFAULT_THEME, Theme

OPTIONAL_CONTACT_FIELDS = ("phone", "company")
REQUIRED_CONTACT_FIELDS = ("first_name", "last_name", "email")


class UIMode(str, Enum):
    """Client state machine states."""
    IDLE = "idle"
    LOADING_LIST = "loading_list"
    MODAL_CREATE = "modal_create"
    MODAL_EDIT = "modal_edit"
    MODAL_NOTES = "modal_notes"
    MODAL_CONFIRM_DELETE = "modal_confirm_delete"


MODAL_MODES = frozenset({
    UIMode.MODAL_CREATE,
    UIMode.MODAL_EDIT,
    UIMode.MODAL_NOTES,
    UIMode.MODAL_CONFIRM_DELETE,
})


class ViewState(BaseModel):
    """Everything the contact table, pager and modals render from."""

    model_config = ConfigDict(frozen=True)

    mode: UIMode = UIMode.IDLE
    theme: Theme = DEFAULT_THEME

    # List query
    search: str = ""
    # Typed but not yet sent; becomes search once the debounce fires
    pending_search: str = ""
    page: int = 1
    page_size: int = DEFAULT_ROWS_PER_PAGE
    sort: str = DEFAULT_SORT

    # Last applied list response
    contacts: List[Dict[str, Any]] = []
    total: int = 0

    # Sequence number of the newest list request issued / applied
    request_seq: int = 0
    applied_seq: int = 0

    # Modal targets
    editing_contact_id: Optional[int] = None
    deleting_contact_id: Optional[int] = None
    notes_contact_id: Optional[int] = None
    notes_title: str = ""
    notes: List[Dict[str, Any]] = []


# Preferences

def apply_preferences(state: ViewState, prefs: Mapping[str, Any]) -> ViewState:
    """Adopt theme, sort and page size from a preference document."""
    update: Dict[str, Any] = {}
    if prefs.get("theme") in ("light", "dark"):
        update["theme"] = prefs["theme"]
    if prefs.get("defaultSort"):
        update["sort"] = prefs["defaultSort"]
    if prefs.get("rowsPerPage"):
        update["page_size"] = int(prefs["rowsPerPage"])
    return state.model_copy(update=update)


def preferences_payload(state: ViewState) -> Dict[str, Any]:
    """The full document to PUT; the server replaces rather than merges."""
    return {
        "theme": state.theme,
        "defaultSort": state.sort,
        "rowsPerPage": state.page_size,
    }


def toggle_theme(state: ViewState) -> ViewState:
    return state.model_copy(update={"theme": "light" if state.theme == "dark" else "dark"})


# List query

def set_pending_search(state: ViewState, text: str) -> ViewState:
    return state.model_copy(update={"pending_search": text})


def set_search(state: ViewState, text: str) -> ViewState:
    return state.model_copy(update={"search": text, "pending_search": text, "page": 1})


def set_sort(state: ViewState, sort: str) -> ViewState:
    return state.model_copy(update={"sort": sort, "page": 1})


def set_page_size(state: ViewState, page_size: int) -> ViewState:
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    return state.model_copy(update={"page_size": page_size, "page": 1})


def total_pages(state: ViewState) -> int:
    return math.ceil(state.total / state.page_size) if state.page_size else 0


def can_go_prev(state: ViewState) -> bool:
    return state.page > 1


def can_go_next(state: ViewState) -> bool:
    """Judged against the totals of the last applied response.

    When rows disappeared since that response, the last page reached this
    way can come back empty.
    """
    return state.page < total_pages(state)


def go_prev(state: ViewState) -> ViewState:
    if not can_go_prev(state):
        return state
    return state.model_copy(update={"page": state.page - 1})


def go_next(state: ViewState) -> ViewState:
    if not can_go_next(state):
        return state
    return state.model_copy(update={"page": state.page + 1})


def begin_list_request(state: ViewState) -> Tuple[ViewState, int]:
    """Issue the next request sequence number."""
    seq = state.request_seq + 1
    update: Dict[str, Any] = {"request_seq": seq}
    if state.mode == UIMode.IDLE:
        update["mode"] = UIMode.LOADING_LIST
    return state.model_copy(update=update), seq


def is_current(state: ViewState, seq: int) -> bool:
    return seq == state.request_seq


def apply_list_response(state: ViewState, seq: int, payload: Mapping[str, Any]) -> ViewState:
    """Apply a list response unless a newer request has been issued since."""
    if not is_current(state, seq):
        return state
    update: Dict[str, Any] = {
        "contacts": list(payload.get("data") or []),
        "page": int(payload.get("page", state.page)),
        "page_size": int(payload.get("pageSize", state.page_size)),
        "total": int(payload.get("total", 0)),
        "applied_seq": seq,
    }
    if state.mode == UIMode.LOADING_LIST:
        update["mode"] = UIMode.IDLE
    return state.model_copy(update=update)


def fail_list_request(state: ViewState, seq: int) -> ViewState:
    if is_current(state, seq) and state.mode == UIMode.LOADING_LIST:
        return state.model_copy(update={"mode": UIMode.IDLE})
    return state


# Modals

def open_create_modal(state: ViewState) -> ViewState:
    return state.model_copy(update={"mode": UIMode.MODAL_CREATE, "editing_contact_id": None})


def open_edit_modal(state: ViewState, contact_id: int) -> ViewState:
    return state.model_copy(update={"mode": UIMode.MODAL_EDIT, "editing_contact_id": contact_id})


def open_confirm_delete(state: ViewState, contact_id: int) -> ViewState:
    return state.model_copy(update={"mode": UIMode.MODAL_CONFIRM_DELETE, "deleting_contact_id": contact_id})


def open_notes_modal(state: ViewState, contact_id: int, title: str) -> ViewState:
    return state.model_copy(update={
        "mode": UIMode.MODAL_NOTES,
        "notes_contact_id": contact_id,
        "notes_title": title,
        "notes": [],
    })


def set_notes(state: ViewState, notes: List[Dict[str, Any]]) -> ViewState:
    return state.model_copy(update={"notes": list(notes)})


def close_modal(state: ViewState) -> ViewState:
    return state.model_copy(update={
        "mode": UIMode.IDLE,
        "editing_contact_id": None,
        "deleting_contact_id": None,
        "notes_contact_id": None,
        "notes_title": "",
        "notes": [],
    })


# Forms

def build_contact_payload(form: Mapping[str, Optional[str]]) -> Dict[str, Optional[str]]:
    """Trim every text field; blank optional fields are sent as null."""
    payload: Dict[str, Optional[str]] = {}
    for name in REQUIRED_CONTACT_FIELDS:
        payload[name] = (form.get(name) or "").strip()
    for name in OPTIONAL_CONTACT_FIELDS:
        payload[name] = (form.get(name) or "").strip() or None
    return payload


def contact_form_values(contact: Mapping[str, Any]) -> Dict[str, str]:
    """Prefill values for the edit form."""
    return {
        name: contact.get(name) or ""
        for name in REQUIRED_CONTACT_FIELDS + OPTIONAL_CONTACT_FIELDS
    }
