"""Client-side controller for the contact book API."""
from .api import APIError, ContactBookAPI
from .controller import ContactBookController, Notifier, Screen
from .state import UIMode, ViewState

__all__ = [
    "APIError",
    "ContactBookAPI",
    "ContactBookController",
    "Notifier",
    "Screen",
    "UIMode",
    "ViewState",
]
