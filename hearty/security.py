from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

import jwt
from flask import current_app, request

from .errors import ExpiredCredential, InvalidCredential

if TYPE_CHECKING:
    from .models import User


@dataclass(frozen=True)
class Identity:
    """Identity bound to a request or a socket connection."""

    user_id: int
    email: Optional[str]
    role: str


def issue_token(user: User, expires_in: Optional[int] = None) -> str:
    now = int(time.time())
    ttl = expires_in if expires_in is not None else current_app.config["ACCESS_TOKEN_EXPIRES"]
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def decode_token(token: str) -> Identity:
    """Verify signature and expiry of ``token`` and return the identity it carries.

    Raises ``ExpiredCredential`` for a well-signed but expired token and
    ``InvalidCredential`` for anything else that fails verification.
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredCredential() from e
    except jwt.InvalidTokenError as e:
        raise InvalidCredential() from e

    sub = payload.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError) as e:
        raise InvalidCredential() from e
    return Identity(user_id=user_id, email=payload.get("email"), role=payload.get("role") or "")


def bearer_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value or not header_value.startswith("Bearer "):
        return None
    token = header_value[len("Bearer "):].strip()
    return token or None


def get_identity_from_auth_header() -> Optional[Identity]:
    token = bearer_token(request.headers.get("Authorization"))
    if not token:
        return None
    try:
        return decode_token(token)
    except (InvalidCredential, ExpiredCredential):
        return None
