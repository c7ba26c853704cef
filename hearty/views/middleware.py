from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Callable, Optional

from flask import request

from ..errors import (
    AuthorizationFailure,
    InfrastructureFailure,
    NotFound,
    RealtimeError,
)
from ..extensions import db
from ..realtime.connections import ConnectionState

if TYPE_CHECKING:
    from ..realtime import Realtime


def _rollback() -> None:
    try:
        db.session.rollback()
    except Exception:
        logging.exception("socket handler: session rollback failed")


def require_connection(
    realtime: Realtime,
    *,
    failure_message: str = "Request failed",
    silent: bool = False,
) -> Callable:
    """
    Decorator for socket handlers that run on an active, authenticated connection.

    Resolves the ``Connection`` bound to ``request.sid`` and passes
    ``(conn, data)`` to the handler. Nothing a handler raises reaches the
    transport: ``RealtimeError`` subclasses become an ``error`` event with their
    message, anything else is logged and reported with ``failure_message``.

    With ``silent=True`` authorization and not-found failures are dropped
    without telling the client (typing indicators, read receipts).

    Usage:
        @socketio.on("chat:join")
        @require_connection(realtime, failure_message="Failed to join chat room")
        def _on_chat_join(conn, data):
            ...
    """

    def decorator(handler: Callable) -> Callable:
        @wraps(handler)
        def wrapper(data: Optional[dict] = None, *_args):
            sid = request.sid
            event_name = None
            try:
                if getattr(request, "event", None):
                    event_name = request.event.get("message")
            except Exception:
                event_name = None

            conn = realtime.connections.get(sid)
            if conn is None or conn.state is not ConnectionState.ACTIVE:
                logging.warning(
                    "require_connection: event on inactive connection (handler=%s, event=%s, sid=%s)",
                    handler.__name__,
                    event_name,
                    sid,
                )
                realtime.emit_error(sid, "Connection is not authenticated")
                return None

            try:
                return handler(conn, data)
            except (AuthorizationFailure, NotFound) as e:
                _rollback()
                if silent:
                    logging.debug(
                        "%s dropped for user=%s: %s", event_name or handler.__name__, conn.user_id, e.message
                    )
                    return None
                logging.info(
                    "%s rejected for user=%s: %s", event_name or handler.__name__, conn.user_id, e.message
                )
                realtime.emit_error(sid, e.message)
            except RealtimeError as e:
                _rollback()
                logging.warning(
                    "%s failed for user=%s: %s", event_name or handler.__name__, conn.user_id, e.message
                )
                realtime.emit_error(sid, e.message)
            except Exception:
                _rollback()
                logging.exception(
                    "%s handler error (user_id=%s, sid=%s)", event_name or handler.__name__, conn.user_id, sid
                )
                realtime.emit_error(sid, InfrastructureFailure(failure_message).message)
            return None

        return wrapper

    return decorator
