from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ....lib.utils import require_int
from ....realtime.channels import chat_channel
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("chat:leave")
    @require_connection(realtime, failure_message="Failed to leave chat room")
    def _on_chat_leave(conn: Connection, data: dict | None):
        room_id = require_int(data, "roomId")
        left = realtime.leave(conn.sid, chat_channel(room_id))
        if left:
            logging.info("chat:leave: user=%s room=%s", conn.user_id, room_id)
