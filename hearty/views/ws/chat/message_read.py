from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ....errors import NotFound
from ....extensions import db
from ....lib.utils import isoformat, require_int
from ....realtime.channels import chat_channel, user_channel
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("chat:message:read")
    @require_connection(realtime, failure_message="Failed to mark message as read", silent=True)
    def _on_message_read(conn: Connection, data: dict | None):
        message_id = require_int(data, "messageId")
        room_id = require_int(data, "roomId")

        message = realtime.guard.find_accessible_message(conn.user_id, message_id, room_id)
        if message is None:
            raise NotFound("Message not found")
        if message.sender_id == conn.user_id:
            logging.debug("chat:message:read: user=%s ignored own message %s", conn.user_id, message_id)
            return

        read_at = message.mark_read()
        db.session.commit()

        realtime.broadcast_to(
            [chat_channel(room_id), user_channel(message.sender_id)],
            "chat:message:read",
            {
                "messageId": message_id,
                "roomId": room_id,
                "readBy": conn.user_id,
                "readAt": isoformat(read_at),
            },
            skip_sid=conn.sid,
        )
