"""Request identity resolution.

There is no authentication: every request acts for the configured default
user. Routes still take the identity through a dependency so stores are
always called with an explicit user id.
"""
from fastapi import Request

from contactbook.core.config import settings


def get_current_user_id(request: Request) -> str:
    """Return the identity the request acts for.

    Args:
        request: FastAPI request object

    Returns:
        The implicit user id (``settings.default_user_id``)
    """
    user_id = settings.default_user_id
    request.state.user_id = user_id
    return user_id
