"""HTML fragments for the contact table, pager and notes panel.

Every user-supplied value goes through escape_html before it is placed in
markup.
"""
import html
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from .state import ViewState, total_pages

NO_CONTACTS_ROW = '<tr><td colspan="5" class="no-data">No contacts found</td></tr>'
NO_NOTES = '<p class="no-data">No notes yet</p>'
LOADING_NOTES = '<p class="loading">Loading notes...</p>'


def escape_html(value: Optional[Any]) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def _or_dash(value: Optional[Any]) -> str:
    return escape_html(value) if value else "-"


def render_contact_rows(contacts: Iterable[Mapping[str, Any]]) -> str:
    rows = []
    for contact in contacts:
        # ids go into attributes unescaped, so force them to int
        contact_id = int(contact["id"])
        rows.append(
            "<tr>"
            f"<td>{escape_html(contact.get('first_name'))} {escape_html(contact.get('last_name'))}</td>"
            f"<td>{escape_html(contact.get('email'))}</td>"
            f"<td>{_or_dash(contact.get('phone'))}</td>"
            f"<td>{_or_dash(contact.get('company'))}</td>"
            '<td class="actions">'
            f'<button class="btn btn-sm btn-secondary" data-action="notes" data-contact-id="{contact_id}">Notes</button>'
            f'<button class="btn btn-sm btn-primary" data-action="edit" data-contact-id="{contact_id}">Edit</button>'
            f'<button class="btn btn-sm btn-danger" data-action="delete" data-contact-id="{contact_id}">Delete</button>'
            "</td>"
            "</tr>"
        )
    return "".join(rows) or NO_CONTACTS_ROW


def format_timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return escape_html(value)
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def render_notes(notes: Iterable[Mapping[str, Any]]) -> str:
    items = [
        '<div class="note-item">'
        f'<div class="note-body">{escape_html(note.get("body"))}</div>'
        f'<div class="note-date">{escape_html(format_timestamp(note.get("createdAt")))}</div>'
        "</div>"
        for note in notes
    ]
    return "".join(items) or NO_NOTES


def notes_title(contact: Mapping[str, Any]) -> str:
    """Plain-text modal title; escape it if it ever goes into markup."""
    return f"Notes for {contact.get('first_name', '')} {contact.get('last_name', '')}"


def render_page_info(state: ViewState) -> str:
    return f"Page {state.page} of {total_pages(state)} ({state.total} total)"
