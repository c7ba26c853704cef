from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ....errors import AuthorizationFailure
from ....lib.utils import require_int
from ....realtime.channels import notifications_channel
from ...middleware import require_connection

if TYPE_CHECKING:
    from ....realtime import Connection, Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("notifications:subscribe")
    @require_connection(realtime, failure_message="Failed to subscribe to notifications")
    def _on_subscribe(conn: Connection, data: dict | None):
        # Only the connection's own channel; an explicit userId must match it
        target_user_id = conn.user_id
        if isinstance(data, dict) and data.get("userId") is not None:
            target_user_id = require_int(data, "userId")
        if not realtime.guard.can_join_notification_channel(conn.user_id, target_user_id):
            raise AuthorizationFailure("Cannot subscribe to another user's notifications")

        realtime.join(conn.sid, notifications_channel(conn.user_id))
        logging.info("notifications:subscribe: user=%s", conn.user_id)
        realtime.reply(conn.sid, "notifications:subscribed", {"userId": conn.user_id})

    @socketio.on("notifications:unsubscribe")
    @require_connection(realtime, failure_message="Failed to unsubscribe from notifications")
    def _on_unsubscribe(conn: Connection, data: dict | None):
        if realtime.leave(conn.sid, notifications_channel(conn.user_id)):
            logging.info("notifications:unsubscribe: user=%s", conn.user_id)
