from __future__ import annotations

from typing import TYPE_CHECKING

from ....errors import ValidationFailure
from ....lib.utils import isoformat
from ....realtime.presence import CLIENT_SETTABLE_STATUSES
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("presence:update")
    @require_connection(realtime, failure_message="Failed to update status")
    def _on_presence_update(conn: Connection, data: dict | None):
        status = (data or {}).get("status") if isinstance(data, dict) else None
        # offline is reserved for disconnects
        if not isinstance(status, str) or status not in CLIENT_SETTABLE_STATUSES:
            raise ValidationFailure("status must be 'online' or 'away'")

        record = realtime.presence.set_presence(conn.user_id, status, conn.sid)
        realtime.broadcast(
            "user:status",
            {
                "userId": conn.user_id,
                "status": record.status,
                "timestamp": isoformat(record.last_seen),
            },
            skip_sid=conn.sid,
        )
