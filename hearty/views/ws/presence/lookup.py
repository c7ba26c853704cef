from __future__ import annotations

from typing import TYPE_CHECKING

from ....lib.utils import isoformat, require_int
from ....realtime.presence import PresenceStatus
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("presence:get-online")
    @require_connection(realtime, failure_message="Failed to get online users")
    def _on_get_online(conn: Connection, data: dict | None):
        users = [record.to_dict() for record in realtime.presence.list_online()]
        realtime.reply(conn.sid, "presence:online-users", {"users": users})

    @socketio.on("presence:get-user")
    @require_connection(realtime, failure_message="Failed to get user status")
    def _on_get_user(conn: Connection, data: dict | None):
        target_user_id = require_int(data, "userId")
        record = realtime.presence.get_presence(target_user_id)
        # Users who never connected read as offline with no lastSeen
        realtime.reply(
            conn.sid,
            "presence:user-status",
            {
                "userId": target_user_id,
                "status": record.status if record else PresenceStatus.OFFLINE.value,
                "lastSeen": isoformat(record.last_seen) if record else None,
            },
        )
