from __future__ import annotations

from typing import TYPE_CHECKING

from ....extensions import db
from ....models import Notification
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("notifications:get-unread-count")
    @require_connection(realtime, failure_message="Failed to get unread count")
    def _on_get_unread_count(conn: Connection, data: dict | None):
        count = (
            db.session.query(Notification)
            .filter(Notification.user_id == conn.user_id, Notification.read_at.is_(None))
            .count()
        )
        realtime.reply(conn.sid, "notifications:unread-count", {"count": count})
