from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import request

from ..errors import NoCredential
from ..security import Identity, bearer_token, decode_token


def extract_token(
    auth: Any, args: Mapping[str, str], headers: Mapping[str, str]
) -> Optional[str]:
    """Find the handshake credential.

    Priority: ``auth.token`` payload, then ``?token=`` query parameter, then an
    ``Authorization: Bearer <token>`` header. The first non-empty one wins.
    """
    if isinstance(auth, dict):
        token = auth.get("token")
        if isinstance(token, str) and token.strip():
            return token.strip()
    token = args.get("token")
    if token and token.strip():
        return token.strip()
    return bearer_token(headers.get("Authorization"))


def authenticate_handshake(auth: Any = None) -> Identity:
    """Verify the credential presented by the socket being connected.

    Must run inside the connect handler. Raises ``NoCredential``,
    ``InvalidCredential`` or ``ExpiredCredential``.
    """
    token = extract_token(auth, request.args, request.headers)
    if not token:
        raise NoCredential()
    return decode_token(token)
