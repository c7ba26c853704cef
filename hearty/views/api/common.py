from __future__ import annotations

from functools import wraps
from typing import Callable

from ...errors import ApiError
from ...security import get_identity_from_auth_header


def require_user(handler: Callable) -> Callable:
    """
    Decorator for REST handlers that require a valid ``Authorization: Bearer`` token.

    Verifies the token with the same secret the socket handshake uses and passes
    the resulting ``Identity`` as the first argument.
    """

    @wraps(handler)
    def wrapper(*args, **kwargs):
        identity = get_identity_from_auth_header()
        if identity is None:
            raise ApiError("unauthorized", 401)
        return handler(identity, *args, **kwargs)

    return wrapper
