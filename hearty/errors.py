"""
Error taxonomy shared by the socket layer and the REST collaborators.

Socket handlers translate every ``RealtimeError`` into an ``error`` event for the
requesting connection; the connection itself is never closed because of one.
``AuthFailure`` is the exception: it is raised only during the handshake and
turns into a refused connection.
"""
from __future__ import annotations


class RealtimeError(Exception):
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthFailure(RealtimeError):
    default_message = "Authentication failed"


class NoCredential(AuthFailure):
    default_message = "Authentication token required"


class InvalidCredential(AuthFailure):
    default_message = "Invalid authentication token"


class ExpiredCredential(AuthFailure):
    default_message = "Authentication token expired"


class AuthorizationFailure(RealtimeError):
    default_message = "Access denied"


class NotFound(RealtimeError):
    default_message = "Not found"


class ValidationFailure(RealtimeError):
    default_message = "Invalid payload"


class InfrastructureFailure(RealtimeError):
    default_message = "Internal error"


class ApiError(Exception):
    """HTTP error raised by REST handlers and rendered as ``{"error": message}``."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


__all__ = [
    "RealtimeError",
    "AuthFailure",
    "NoCredential",
    "InvalidCredential",
    "ExpiredCredential",
    "AuthorizationFailure",
    "NotFound",
    "ValidationFailure",
    "InfrastructureFailure",
    "ApiError",
]
