from __future__ import annotations

from typing import TYPE_CHECKING

from ....errors import ValidationFailure
from ....lib.utils import require_int
from ....realtime.channels import chat_channel
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("chat:typing")
    @require_connection(realtime, failure_message="Failed to send typing indicator", silent=True)
    def _on_chat_typing(conn: Connection, data: dict | None):
        room_id = require_int(data, "roomId")
        is_typing = data.get("isTyping")
        if not isinstance(is_typing, bool):
            raise ValidationFailure("isTyping must be a boolean")

        room = realtime.guard.require_chat_room(conn.user_id, room_id)
        realtime.broadcast_to(
            chat_channel(room_id),
            "chat:typing",
            {
                "roomId": room_id,
                "userId": conn.user_id,
                "userName": room.participant_name(conn.user_id),
                "isTyping": is_typing,
            },
            skip_sid=conn.sid,
        )
