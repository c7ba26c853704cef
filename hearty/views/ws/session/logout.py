from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask_socketio import disconnect

from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("auth:logout")
    @require_connection(realtime, failure_message="Failed to log out")
    def _on_logout(conn: Connection, data: dict | None):
        logging.info("auth:logout: user=%s sid=%s", conn.user_id, conn.sid)
        # Runs the regular disconnect handler, which marks the user offline
        disconnect(sid=conn.sid)
