from __future__ import annotations

from typing import TYPE_CHECKING

from ....errors import NotFound
from ....extensions import db
from ....lib.utils import require_int, utcnow
from ....models import Notification
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("notifications:mark-read")
    @require_connection(realtime, failure_message="Failed to mark notification as read")
    def _on_mark_read(conn: Connection, data: dict | None):
        notification_id = require_int(data, "notificationId")
        # Ownership is part of the lookup: someone else's notification is simply not found
        notification = (
            db.session.query(Notification)
            .filter_by(id=notification_id, user_id=conn.user_id)
            .first()
        )
        if notification is None:
            raise NotFound("Notification not found")

        notification.read_at = utcnow()
        db.session.commit()
        realtime.reply(conn.sid, "notifications:read", {"notificationId": notification_id})

    @socketio.on("notifications:mark-all-read")
    @require_connection(realtime, failure_message="Failed to mark notifications as read")
    def _on_mark_all_read(conn: Connection, data: dict | None):
        (
            db.session.query(Notification)
            .filter(Notification.user_id == conn.user_id, Notification.read_at.is_(None))
            .update({Notification.read_at: utcnow()}, synchronize_session=False)
        )
        db.session.commit()
        realtime.reply(conn.sid, "notifications:all-read", {"userId": conn.user_id})
