from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ....lib.utils import isoformat, require_int, utcnow
from ....realtime.channels import chat_presence_channel
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    # Viewing presence is not guarded: the channel carries no room content, and
    # the chat channel stays the authorization boundary.
    @socketio.on("presence:join-chat")
    @require_connection(realtime, failure_message="Failed to join chat presence")
    def _on_join_chat(conn: Connection, data: dict | None):
        room_id = require_int(data, "roomId")
        channel = chat_presence_channel(room_id)
        realtime.join(conn.sid, channel)
        logging.debug("presence:join-chat: user=%s room=%s", conn.user_id, room_id)
        realtime.broadcast_to(
            channel,
            "presence:user-joined-chat",
            {"roomId": room_id, "userId": conn.user_id, "timestamp": isoformat(utcnow())},
            skip_sid=conn.sid,
        )

    @socketio.on("presence:leave-chat")
    @require_connection(realtime, failure_message="Failed to leave chat presence")
    def _on_leave_chat(conn: Connection, data: dict | None):
        room_id = require_int(data, "roomId")
        channel = chat_presence_channel(room_id)
        realtime.leave(conn.sid, channel)
        logging.debug("presence:leave-chat: user=%s room=%s", conn.user_id, room_id)
        realtime.broadcast_to(
            channel,
            "presence:user-left-chat",
            {"roomId": room_id, "userId": conn.user_id, "timestamp": isoformat(utcnow())},
            skip_sid=conn.sid,
        )
