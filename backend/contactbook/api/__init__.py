"""API routers aggregation."""
from fastapi import APIRouter

from . import contacts, notes, preferences

api_router = APIRouter()
api_router.include_router(contacts.router)
api_router.include_router(notes.router)
api_router.include_router(preferences.router)

__all__ = ["api_router"]
