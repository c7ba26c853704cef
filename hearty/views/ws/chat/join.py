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

    @socketio.on("chat:join")
    @require_connection(realtime, failure_message="Failed to join chat room")
    def _on_chat_join(conn: Connection, data: dict | None):
        room_id = require_int(data, "roomId")
        # Re-checked on every join; raises AuthorizationFailure for strangers and missing rooms
        realtime.guard.require_chat_room(conn.user_id, room_id)

        realtime.join(conn.sid, chat_channel(room_id))
        logging.info("chat:join: user=%s room=%s", conn.user_id, room_id)
        realtime.reply(conn.sid, "chat:joined", {"roomId": room_id})
