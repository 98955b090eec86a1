"""
Contact book client controller.

Drives the REST API from user events and keeps the rendered fragments in a
Screen. State transitions are delegated to the pure functions in
contactbook.client.state; this class only sequences API calls around them.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from . import render
from . import state as view
from .api import APIError, ContactBookAPI
from .debounce import SEARCH_DEBOUNCE_SECONDS, Debouncer
from .state import UIMode, ViewState

logger = logging.getLogger(__name__)


class Notifier:
    """Where user-facing messages go. Errors are blocking alerts in a browser."""

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.successes: List[str] = []

    def show_error(self, message: str) -> None:
        logger.warning(f"Error: {message}")
        self.errors.append(message)

    def show_success(self, message: str) -> None:
        logger.info(message)
        self.successes.append(message)


@dataclass
class Screen:
    """Rendered output, one attribute per page region."""

    theme: str = "light"
    contacts_html: str = ""
    page_info: str = ""
    prev_disabled: bool = True
    next_disabled: bool = True
    modal_title: str = ""
    form: Dict[str, str] = field(default_factory=dict)
    notes_title: str = ""
    notes_html: str = ""


class ContactBookController:
    """Event handlers for the contact book UI.

    Args:
        api: API wrapper
        notifier: Receives error and success messages
        search_delay: Quiet period before a search is sent
    """

    def __init__(
        self,
        api: ContactBookAPI,
        notifier: Optional[Notifier] = None,
        search_delay: float = SEARCH_DEBOUNCE_SECONDS,
    ):
        self.api = api
        self.notifier = notifier or Notifier()
        self.state = ViewState()
        self.screen = Screen()
        self._search = Debouncer(search_delay)

    # Startup

    async def load(self) -> None:
        """Apply stored preferences, then fetch the first page."""
        await self.load_preferences()
        await self.load_contacts()

    async def load_preferences(self) -> None:
        try:
            prefs = await self.api.get_preferences()
        except APIError as exc:
            # Defaults keep the page usable; not worth an alert
            logger.warning(f"Error loading preferences: {exc.message}")
            return
        self.state = view.apply_preferences(self.state, prefs)
        self.screen.theme = self.state.theme

    async def save_preferences(self) -> None:
        try:
            await self.api.put_preferences(view.preferences_payload(self.state))
        except APIError as exc:
            logger.warning(f"Error saving preferences: {exc.message}")

    # Contact list

    async def load_contacts(self) -> None:
        self.state, seq = view.begin_list_request(self.state)
        try:
            payload = await self.api.list_contacts(
                search=self.state.search,
                page=self.state.page,
                page_size=self.state.page_size,
                sort=self.state.sort,
            )
        except APIError:
            self.state = view.fail_list_request(self.state, seq)
            self.notifier.show_error("Failed to load contacts")
            return

        if not view.is_current(self.state, seq):
            logger.debug(f"Discarding stale list response {seq} (latest {self.state.request_seq})")
            return
        self.state = view.apply_list_response(self.state, seq, payload)
        self._render_list()

    def _render_list(self) -> None:
        self.screen.contacts_html = render.render_contact_rows(self.state.contacts)
        self.screen.page_info = render.render_page_info(self.state)
        self.screen.prev_disabled = not view.can_go_prev(self.state)
        self.screen.next_disabled = not view.can_go_next(self.state)

    def on_search_input(self, text: str) -> asyncio.Task:
        """Schedule a search; only the last input in a quiet period is sent."""
        self.state = view.set_pending_search(self.state, text)
        return self._search.call(self._run_search)

    async def _run_search(self) -> None:
        self.state = view.set_search(self.state, self.state.pending_search)
        await self.load_contacts()

    async def flush_search(self) -> None:
        await self._search.wait()

    async def on_sort_change(self, sort: str) -> None:
        self.state = view.set_sort(self.state, sort)
        await self.load_contacts()
        await self.save_preferences()

    async def on_page_size_change(self, page_size: int) -> None:
        self.state = view.set_page_size(self.state, page_size)
        await self.load_contacts()
        await self.save_preferences()

    async def on_prev_page(self) -> None:
        if view.can_go_prev(self.state):
            self.state = view.go_prev(self.state)
            await self.load_contacts()

    async def on_next_page(self) -> None:
        if view.can_go_next(self.state):
            self.state = view.go_next(self.state)
            await self.load_contacts()

    async def on_toggle_theme(self) -> None:
        self.state = view.toggle_theme(self.state)
        self.screen.theme = self.state.theme
        await self.save_preferences()

    # Create / edit

    def open_create(self) -> None:
        self.state = view.open_create_modal(self.state)
        self.screen.modal_title = "Add Contact"
        self.screen.form = view.contact_form_values({})

    async def open_edit(self, contact_id: int) -> None:
        try:
            contact = await self.api.get_contact(contact_id)
        except APIError:
            self.notifier.show_error("Failed to load contact")
            return
        self.state = view.open_edit_modal(self.state, contact_id)
        self.screen.modal_title = "Edit Contact"
        self.screen.form = view.contact_form_values(contact)

    async def submit_contact_form(self, form: Mapping[str, Optional[str]]) -> bool:
        """Create or update from the modal form.

        Returns True when the modal closed. On failure the modal stays open
        and the error has been reported once.
        """
        data = view.build_contact_payload(form)
        try:
            if self.state.mode == UIMode.MODAL_EDIT and self.state.editing_contact_id is not None:
                await self.api.update_contact(self.state.editing_contact_id, data)
                message = "Contact updated successfully"
            elif self.state.mode == UIMode.MODAL_CREATE:
                await self.api.create_contact(data)
                message = "Contact added successfully"
            else:
                logger.warning(f"Contact form submitted in mode {self.state.mode.value}")
                return False
        except APIError as exc:
            self.notifier.show_error(exc.message)
            return False

        self.notifier.show_success(message)
        self.close_modal()
        await self.load_contacts()
        return True

    # Delete

    def confirm_delete(self, contact_id: int) -> None:
        self.state = view.open_confirm_delete(self.state, contact_id)

    async def on_confirm_delete(self) -> bool:
        """Fire the delete only from an open confirmation modal."""
        contact_id = self.state.deleting_contact_id
        if self.state.mode != UIMode.MODAL_CONFIRM_DELETE or contact_id is None:
            return False
        try:
            await self.api.delete_contact(contact_id)
        except APIError:
            self.notifier.show_error("Failed to delete contact")
            return False

        self.notifier.show_success("Contact deleted successfully")
        self.close_modal()
        await self.load_contacts()
        return True

    # Notes

    async def open_notes(self, contact_id: int) -> None:
        try:
            contact = await self.api.get_contact(contact_id)
        except APIError:
            self.notifier.show_error("Failed to load contact")
            return
        title = render.notes_title(contact)
        self.state = view.open_notes_modal(self.state, contact_id, title)
        self.screen.notes_title = title
        await self.load_notes()

    async def load_notes(self) -> None:
        contact_id = self.state.notes_contact_id
        if contact_id is None:
            return
        self.screen.notes_html = render.LOADING_NOTES
        try:
            notes: List[Dict[str, Any]] = await self.api.list_notes(contact_id)
        except APIError:
            self.notifier.show_error("Failed to load notes")
            notes = []
        self.state = view.set_notes(self.state, notes)
        self.screen.notes_html = render.render_notes(notes)

    async def add_note(self, text: str) -> bool:
        body = (text or "").strip()
        if not body:
            self.notifier.show_error("Please enter a note")
            return False
        contact_id = self.state.notes_contact_id
        if self.state.mode != UIMode.MODAL_NOTES or contact_id is None:
            return False

        try:
            await self.api.add_note(contact_id, body)
        except APIError:
            self.notifier.show_error("Failed to add note")
            return False

        await self.load_notes()
        self.notifier.show_success("Note added successfully")
        return True

    def close_modal(self) -> None:
        self.state = view.close_modal(self.state)
        self.screen.form = {}
        self.screen.notes_html = ""
        self.screen.notes_title = ""
