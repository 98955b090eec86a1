"""SQLAlchemy model exports."""
from .base import Base
from .contact import Contact
from .note import Note
from .preference import Preference

__all__ = [
    "Base",
    "Contact",
    "Note",
    "Preference",
]
